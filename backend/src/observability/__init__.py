"""Observability module.

Provides structured logging, correlation ids, metrics and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    validation_runs_total,
    validation_issues_total,
    validation_duration_seconds,
    validation_rule_failures_total,
)
from .request_id import (
    request_id_var,
    transaction_id_var,
    get_request_id,
    get_transaction_id,
    generate_request_id,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "validation_runs_total",
    "validation_issues_total",
    "validation_duration_seconds",
    "validation_rule_failures_total",
    # Correlation ids
    "request_id_var",
    "transaction_id_var",
    "get_request_id",
    "get_transaction_id",
    "generate_request_id",
]
