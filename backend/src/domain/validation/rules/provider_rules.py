"""Provider consistency rules for /on_select"""

from domain.transactions.facts import Fact

from ..constants import Stage
from ..messages import Order
from ..models import ErrorCode, RuleResult, StageContext
from ..port import FieldValidator


class ProviderValidator(FieldValidator):
    """Provider id and primary location must be those chosen in /select.

    A comparison is skipped while the /select fact is not yet known.
    """

    name = "provider"
    subject = "provider"

    async def check(self, order: Order, ctx: StageContext, result: RuleResult) -> None:
        provider_id = await ctx.fact(Fact.PROVIDER_ID)
        provider_location = await ctx.fact(Fact.PROVIDER_LOCATION)

        provider = order.provider
        if provider is None:
            result.errors.add(ErrorCode.GENERIC, f"provider is missing in /{Stage.ON_SELECT}")
            return

        if provider_id is not None and str(provider_id) != provider.id:
            result.errors.add(
                ErrorCode.GENERIC,
                f"provider.id mismatches in /{Stage.SELECT} and /{Stage.ON_SELECT}"
            )

        if provider_location is not None:
            location_id = provider.locations[0].id if provider.locations else None
            if location_id != str(provider_location):
                result.errors.add(
                    ErrorCode.GENERIC,
                    f"provider.locations[0].id mismatches in /{Stage.SELECT} and /{Stage.ON_SELECT}"
                )
