from .transaction_store_port import TransactionStorePort, TransactionStoreError

__all__ = ["TransactionStorePort", "TransactionStoreError"]
