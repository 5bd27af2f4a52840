"""Validation domain module.

Implements the /on_select stage validator: a context check followed by the
provider, item, fulfillment, quote and error-payload field validators, which
share facts with the other stages through the transaction store.
"""

from .models import (
    ErrorCode,
    ErrorCollector,
    RuleResult,
    StageContext,
    ValidationIssue,
    issues_to_dicts,
)
from .port import FieldValidator
from .context_checker import ContextCheckError, ContextCheckerPort, StageContextChecker
from .engine import OnSelectValidationEngine, validate_on_select

__all__ = [
    "ErrorCode",
    "ErrorCollector",
    "RuleResult",
    "StageContext",
    "ValidationIssue",
    "issues_to_dicts",
    "FieldValidator",
    "ContextCheckError",
    "ContextCheckerPort",
    "StageContextChecker",
    "OnSelectValidationEngine",
    "validate_on_select",
]
