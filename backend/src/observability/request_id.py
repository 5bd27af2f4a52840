"""Correlation ids for log records.

Request and transaction ids are held in context variables so they follow a
validation run across awaits without being passed around.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

# Context variables (async-safe)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
transaction_id_var: ContextVar[Optional[str]] = ContextVar("transaction_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID.

    Returns:
        str: UUID v4 request ID
    """
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID from context.

    Returns:
        str: Current request ID or "no-request-id" if not set
    """
    return request_id_var.get() or "no-request-id"


def get_transaction_id() -> Optional[str]:
    """Transaction being validated in the current context, if any."""
    return transaction_id_var.get()
