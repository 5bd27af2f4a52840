"""Field validator interface (Hexagonal Architecture)"""

import logging
from abc import ABC, abstractmethod

from .constants import Stage
from .messages import Order
from .models import ErrorCode, RuleResult, StageContext

logger = logging.getLogger(__name__)


class FieldValidator(ABC):
    """Base class for the field validators of a stage.

    Subclasses implement ``check``, which appends issues to ``result.errors``
    and stages facts in ``result.facts``. ``run`` is the validator boundary:
    it persists the staged facts and turns any internal fault into a single
    synthetic issue, so one validator never stops the others.
    """

    name: str = "field"
    subject: str = "field"
    default_code: int = ErrorCode.GENERIC

    @abstractmethod
    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        """Validate one section of the order.

        Args:
            order: Parsed order of the stage message
            ctx: Per-run context (store, transaction id, earlier outputs)
            result: Result to fill with issues, facts and outputs
        """
        pass

    async def run(self, order: Order, ctx: StageContext) -> RuleResult:
        """Run the check and persist its facts, never raising."""
        result = RuleResult(rule_name=self.name)
        try:
            logger.info(f"Checking {self.subject} in /{Stage.ON_SELECT}")
            await self.check(order, ctx, result)
            if result.facts:
                await ctx.store.set_many(ctx.transaction_id, result.facts, ttl=ctx.ttl)
        except Exception as e:
            logger.error(
                f"Error while checking {self.subject} in /{Stage.ON_SELECT}: {e}",
                exc_info=True
            )
            result.failed = True
            result.facts = {}
            result.errors.add(self.default_code, f"Error while checking {self.subject}: {e}")
        return result
