"""Transaction facts domain module.

Facts are derived values recorded by one protocol stage and read back by later
stages of the same transaction. They live in an external key-value cache behind
the TransactionStorePort.
"""

from .facts import Fact, fact_key, tracking_fact
from .ports import TransactionStorePort, TransactionStoreError

__all__ = [
    "Fact",
    "fact_key",
    "tracking_fact",
    "TransactionStorePort",
    "TransactionStoreError",
]
