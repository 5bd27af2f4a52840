"""Generic context check run before the stage's field validators.

The check compares the envelope of the incoming call with the envelope of the
request it answers, which earlier stages store under ``<txn>_<stage>``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from domain.transactions.ports import TransactionStorePort

from .constants import Stage
from .utils import parse_timestamp

logger = logging.getLogger(__name__)

REQUIRED_CONTEXT_FIELDS = ("transaction_id", "message_id", "timestamp", "action", "bap_id", "bpp_id")
MATCHING_CONTEXT_FIELDS = ("message_id", "bap_id", "bpp_id", "domain")


class ContextCheckError(Exception):
    """Raised when the context block of a call is inconsistent."""
    pass


class ContextCheckerPort(ABC):
    """Contract for the context check shared by all protocol stages."""

    @abstractmethod
    async def check(self, context: Optional[dict[str, Any]], store: TransactionStorePort) -> None:
        """Validate a call context.

        Raises:
            ContextCheckError: On the first inconsistency found
        """
        pass


class StageContextChecker(ContextCheckerPort):
    """Context checker for a response stage answering a request stage.

    Args:
        action: Expected ``context.action`` of the incoming call
        request_stage: Stage whose stored request this call answers
    """

    def __init__(self, action: str = Stage.ON_SELECT, request_stage: str = Stage.SELECT):
        self.action = action
        self.request_stage = request_stage

    async def check(self, context: Optional[dict[str, Any]], store: TransactionStorePort) -> None:
        if not isinstance(context, dict):
            raise ContextCheckError(f"context is missing in /{self.action}")

        for name in REQUIRED_CONTEXT_FIELDS:
            if not context.get(name):
                raise ContextCheckError(f"context.{name} is missing in /{self.action}")

        if context["action"] != self.action:
            raise ContextCheckError(
                f"context.action should be '{self.action}', got '{context['action']}'"
            )

        try:
            timestamp = parse_timestamp(context["timestamp"])
        except ValueError:
            raise ContextCheckError(f"context.timestamp '{context['timestamp']}' is not a valid RFC 3339 timestamp")

        request = await store.get(context["transaction_id"], self.request_stage)
        request_context = request.get("context") if isinstance(request, dict) else None
        if not isinstance(request_context, dict):
            logger.debug(f"No stored /{self.request_stage} context for {context['transaction_id']}")
            return

        for name in MATCHING_CONTEXT_FIELDS:
            expected = request_context.get(name)
            if expected is not None and context.get(name) != expected:
                raise ContextCheckError(
                    f"context.{name} mismatches in /{self.request_stage} and /{self.action}"
                )

        try:
            request_timestamp = parse_timestamp(request_context.get("timestamp"))
        except ValueError:
            return
        if timestamp <= request_timestamp:
            raise ContextCheckError(
                f"context.timestamp of /{self.action} should be after /{self.request_stage}"
            )
