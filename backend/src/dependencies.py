"""Global FastAPI dependencies.

The transaction store is created once in the application lifespan and kept
on ``app.state``; endpoints receive it (and the engine built on it) through
these dependencies so tests can override them.
"""

from fastapi import Depends, Request

from config import get_settings
from domain.transactions.ports import TransactionStorePort
from domain.validation import OnSelectValidationEngine


def get_transaction_store(request: Request) -> TransactionStorePort:
    """Transaction store shared by all stage validators of this process."""
    return request.app.state.transaction_store


def get_on_select_engine(
    store: TransactionStorePort = Depends(get_transaction_store),
) -> OnSelectValidationEngine:
    """Engine validating /on_select calls against the shared store."""
    return OnSelectValidationEngine(store, ttl=get_settings().TTL_IN_SECONDS)
