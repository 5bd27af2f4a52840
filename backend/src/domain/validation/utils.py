"""Value conversion helpers for protocol fields.

Protocol numbers arrive as strings or JSON numbers; timestamps are RFC 3339
and durations ISO 8601.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_DOWN, ROUND_HALF_UP
from typing import Any, Optional

_DURATION_RE = re.compile(
    r"^P(?!$)"
    r"(?:(?P<years>\d+(?:\.\d+)?)Y)?"
    r"(?:(?P<months>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:\.\d+)?)W)?"
    r"(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?=\d)"
    r"(?:(?P<hours>\d+(?:\.\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?"
    r")?$"
)

_UNIT_SECONDS = {
    "years": 365 * 86400,
    "months": 30 * 86400,
    "weeks": 7 * 86400,
    "days": 86400,
    "hours": 3600,
    "minutes": 60,
    "seconds": 1,
}


def to_decimal(value: Any) -> Decimal:
    """Convert a protocol number (string or JSON number) to Decimal.

    Raises:
        ValueError: If the value is missing or not numeric
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"not a number: {value!r}")
    return number


def optional_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal but returns None for missing or non-numeric values."""
    try:
        return to_decimal(value)
    except ValueError:
        return None


def round_half_up(value: Decimal, places: int = 0) -> Decimal:
    """Round to the given number of decimal places, halves towards +infinity.

    2.5 rounds to 3 and -2.5 to -2.
    """
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return value.quantize(Decimal(1).scaleb(-places), rounding=rounding)


def iso_duration_to_seconds(duration: str) -> int:
    """Convert an ISO 8601 duration such as ``PT45M`` or ``P1DT2H`` to seconds.

    Years count as 365 days, months as 30 days.

    Raises:
        ValueError: If the duration is malformed
    """
    match = _DURATION_RE.match(str(duration).strip())
    if not match:
        raise ValueError(f"invalid ISO 8601 duration: {duration!r}")

    total = Decimal(0)
    for unit, amount in match.groupdict().items():
        if amount:
            total += Decimal(amount) * _UNIT_SECONDS[unit]
    return int(total)


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime (UTC if no offset).

    Raises:
        ValueError: If the timestamp is missing or malformed
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def json_number(value: Decimal) -> float:
    """Decimal -> float for JSON facts."""
    return float(value)
