"""Fund total values, dollar exposure and dollar display formatting."""

import math
from typing import Literal, Optional, Union

Unit = Literal["M", "B"]

UNIT_MULTIPLIERS: dict[str, float] = {
    "M": 1_000_000,
    "B": 1_000_000_000,
}

Number = Union[int, float]


def parse_user_number(raw: Union[str, Number, None]) -> Optional[float]:
    """Parse a number typed into a form field.

    Args:
        raw: The raw field value.

    Returns:
        The number, or None when the field is blank, not numeric or infinite.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _check_unit(unit: str) -> None:
    if unit not in UNIT_MULTIPLIERS:
        raise ValueError(f"Unknown value unit '{unit}'. Expected one of {list(UNIT_MULTIPLIERS)}")


def _has_magnitude(magnitude: Optional[Number]) -> bool:
    return magnitude is not None and math.isfinite(magnitude) and magnitude > 0


def to_canonical_value(magnitude: Optional[Number], unit: Unit) -> Optional[float]:
    """Convert a magnitude in millions or billions to dollars.

    Args:
        magnitude: Value as entered, e.g. 2.5 for $2.5B.
        unit: "M" for millions or "B" for billions.

    Returns:
        Dollar value, or None when no positive magnitude was given.
    """
    _check_unit(unit)
    if not _has_magnitude(magnitude):
        return None
    return magnitude * UNIT_MULTIPLIERS[unit]


def _plain_number(value: Number) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_display_value(magnitude: Number, unit: Unit) -> str:
    """Build the cached label for a fund total, e.g. "$2.5B".

    The magnitude is printed as entered, with no rounding or grouping.
    """
    _check_unit(unit)
    return f"${_plain_number(magnitude)}{unit}"


def editable_total_value(total_value: Optional[float]) -> tuple[Optional[float], Unit]:
    """Split a dollar total back into a magnitude and unit for editing.

    Totals of a billion or more are shown in billions, everything else in
    millions.
    """
    if not total_value:
        return None, "B"
    if total_value >= UNIT_MULTIPLIERS["B"]:
        return total_value / UNIT_MULTIPLIERS["B"], "B"
    return total_value / UNIT_MULTIPLIERS["M"], "M"


def fund_dollar_exposure(total_value: Optional[float], weight_percent: float) -> Optional[float]:
    """Dollars the fund holds in one security."""
    if total_value is None:
        return None
    return total_value * weight_percent / 100


def personal_dollar_exposure(my_investment: Optional[float], weight_percent: float) -> Optional[float]:
    """Dollars of the user's own investment attributed to one security.

    The holding's weight is applied to the investment directly.
    """
    if not my_investment:
        return None
    return my_investment * weight_percent / 100


def format_fund_dollars(amount: float) -> str:
    """Format a fund-level dollar exposure ("$1.2B", "$350.0M", "$75K")."""
    if amount >= 1e9:
        return f"${amount / 1e9:.1f}B"
    if amount >= 1e6:
        return f"${amount / 1e6:.1f}M"
    return f"${amount / 1e3:.0f}K"


def format_personal_dollars(amount: float) -> str:
    """Format a personal dollar exposure ("$1.5M", "$2.3K", "$100.00")."""
    if amount >= 1e9:
        return f"${amount / 1e9:.1f}B"
    if amount >= 1e6:
        return f"${amount / 1e6:.1f}M"
    if amount >= 1e3:
        return f"${amount / 1e3:.1f}K"
    return f"${amount:.2f}"
