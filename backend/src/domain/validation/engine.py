"""OnSelectValidationEngine - orchestrates the /on_select field validators"""

import logging
import time
from typing import Any, Optional

from pydantic import ValidationError as PayloadError

from domain.transactions.ports import TransactionStorePort
from observability.metrics import (
    validation_duration_seconds,
    validation_issues_total,
    validation_rule_failures_total,
    validation_runs_total,
)
from observability.request_id import transaction_id_var

from .constants import Stage
from .context_checker import ContextCheckerPort, StageContextChecker
from .messages import StageRequest
from .models import ErrorCode, ErrorCollector, StageContext, ValidationIssue
from .port import FieldValidator
from .rules import (
    ErrorPayloadValidator,
    FulfillmentValidator,
    ItemValidator,
    ProviderValidator,
    QuoteValidator,
)

logger = logging.getLogger(__name__)


class OnSelectValidationEngine:
    """Validates a seller's /on_select response against the transaction so far.

    The generic context check runs first and short-circuits on failure.
    The field validators then run strictly in order, each reading facts left
    by earlier stages (and earlier validators) and writing its own. A fault
    inside one validator becomes one issue; the rest still run. ``validate``
    always returns a list and never raises.
    """

    stage = Stage.ON_SELECT

    def __init__(
        self,
        store: TransactionStorePort,
        context_checker: Optional[ContextCheckerPort] = None,
        ttl: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            store: Transaction fact store shared with the other stages
            context_checker: Generic context check (defaults to /on_select vs /select)
            ttl: Expiry of written facts in seconds (None uses the store default)
        """
        self.store = store
        self.context_checker = context_checker or StageContextChecker()
        self.ttl = ttl
        # Order matters: items before quote for item facts, fulfillments
        # before quote for the non-serviceable flag, quote before error payload.
        self.validators: list[FieldValidator] = [
            ProviderValidator(),
            ItemValidator(),
            FulfillmentValidator(),
            QuoteValidator(),
            ErrorPayloadValidator(),
        ]

    async def validate(self, payload: dict[str, Any]) -> list[ValidationIssue]:
        """Run every /on_select check on a stage payload.

        Args:
            payload: Raw ``{context, message}`` body of the call

        Returns:
            All issues found, in check order (empty if the message is valid)
        """
        started = time.perf_counter()
        context = payload.get("context") if isinstance(payload, dict) else None
        transaction_id = context.get("transaction_id") if isinstance(context, dict) else None
        token = transaction_id_var.set(transaction_id)
        try:
            issues = await self._validate(payload, context)
        finally:
            transaction_id_var.reset(token)

        outcome = "valid" if not issues else "invalid"
        validation_runs_total.labels(stage=self.stage, outcome=outcome).inc()
        validation_duration_seconds.labels(stage=self.stage).observe(time.perf_counter() - started)
        for issue in issues:
            validation_issues_total.labels(stage=self.stage, code=str(issue.code)).inc()

        logger.info(
            f"Validation completed for /{self.stage} of {transaction_id}: {len(issues)} total issues"
        )
        return issues

    async def _validate(self, payload: Any, context: Any) -> list[ValidationIssue]:
        errors = ErrorCollector()

        try:
            await self.context_checker.check(context, self.store)
        except Exception as e:
            logger.info(f"Context check failed for /{self.stage}: {e}")
            errors.add(ErrorCode.GENERIC, str(e))
            return errors.issues

        try:
            request = StageRequest.model_validate(payload)
        except PayloadError as e:
            logger.info(f"Unparseable /{self.stage} payload: {e.error_count()} errors")
            errors.add(ErrorCode.GENERIC, f"Invalid /{self.stage} payload: {_first_error(e)}")
            return errors.issues

        try:
            order = request.message.order if request.message else None
            if order is None:
                errors.add(ErrorCode.GENERIC, f"message.order is missing in /{self.stage}")
                return errors.issues

            ctx = StageContext(
                transaction_id=request.context.transaction_id,
                timestamp=request.context.timestamp,
                store=self.store,
                ttl=self.ttl,
            )
            await self.store.set(ctx.transaction_id, self.stage, payload, ttl=self.ttl)

            for validator in self.validators:
                result = await validator.run(order, ctx)
                errors.extend(result.errors.issues)
                if result.failed:
                    validation_rule_failures_total.labels(stage=self.stage, rule=result.rule_name).inc()
                if "non_serviceable" in result.outputs:
                    ctx.non_serviceable = result.outputs["non_serviceable"]
                logger.debug(
                    f"Validator '{result.rule_name}' found {len(result.errors)} issues"
                )
        except Exception as e:
            logger.error(f"Error in /{self.stage}: {e}", exc_info=True)
            errors.add(ErrorCode.GENERIC, f"Internal error: {e}")

        return errors.issues


def _first_error(error: PayloadError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


async def validate_on_select(
    payload: dict[str, Any],
    store: TransactionStorePort,
    ttl: Optional[int] = None,
) -> list[ValidationIssue]:
    """Validate one /on_select payload with the default context checker."""
    return await OnSelectValidationEngine(store, ttl=ttl).validate(payload)
