"""Validation models and enums for protocol stage checks"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from domain.transactions.ports import TransactionStorePort


class ErrorCode(int, Enum):
    """Stable numeric error taxonomy consumed by downstream reporting"""
    GENERIC = 20000  # mismatch or missing field
    TIME_ORDER = 20001
    OUT_OF_STOCK_PAYLOAD = 20006
    MISSING_TAG = 20007
    MISSING_TAG_FIELD = 20008


@dataclass(frozen=True)
class ValidationIssue:
    """A single business-rule violation found in a stage message.

    Any issue means the message is invalid; an empty list of issues means the
    message passed every check of the stage.
    """
    code: int
    description: str
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "code": int(self.code),
            "description": self.description,
        }


class ErrorCollector:
    """Append-only sink for validation issues.

    Adding an issue never interrupts the caller; every check keeps running.
    """

    def __init__(self) -> None:
        self._issues: list[ValidationIssue] = []

    def add(self, code: int, description: str) -> None:
        self._issues.append(ValidationIssue(code=int(code), description=description))

    def extend(self, issues: list[ValidationIssue]) -> None:
        self._issues.extend(issues)

    @property
    def issues(self) -> list[ValidationIssue]:
        return list(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(list(self._issues))

    def __bool__(self) -> bool:
        return bool(self._issues)


@dataclass
class RuleResult:
    """Outcome of one field validator.

    Attributes:
        rule_name: Validator that produced the result
        errors: Issues found (plus one synthetic issue if the rule faulted)
        facts: Transaction facts to persist for later stages
        outputs: Values handed to later validators of the same run
        failed: True if the rule hit an internal fault
    """
    rule_name: str
    errors: ErrorCollector = field(default_factory=ErrorCollector)
    facts: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)
    failed: bool = False


@dataclass
class StageContext:
    """Per-invocation state passed to every field validator.

    Holds the injected store and the values produced by earlier validators
    of the same run. Never shared across invocations.
    """
    transaction_id: str
    timestamp: Optional[str]
    store: TransactionStorePort
    ttl: Optional[int] = None
    non_serviceable: bool = False

    async def fact(self, name: str) -> Optional[Any]:
        """Read a prior fact of this transaction (None when not yet known)."""
        return await self.store.get(self.transaction_id, name)


def issues_to_dicts(issues: list[ValidationIssue]) -> list[dict[str, Any]]:
    """Serialize issues to the ``{valid, code, description}`` wire form."""
    return [issue.to_dict() for issue in issues]
