"""Operations on the funds of a single comparison set."""

import dataclasses
import logging
from typing import Literal, Optional, Union

from .column_detector import ColumnMapping, detect_columns
from .errors import FundNotFoundError, MissingFundNameError
from .fund_value import (
    Unit,
    format_display_value,
    parse_user_number,
    to_canonical_value,
)
from .holdings_builder import build_holdings
from .models import ComparisonSet, Fund, Holding
from .table_parser import ParsedTable, parse_table

logger = logging.getLogger(__name__)

SortKey = Literal["ticker", "weight"]
UserNumber = Union[str, int, float, None]


def detect_for_text(raw_text: str) -> tuple[ParsedTable, ColumnMapping]:
    """Parse pasted text and guess its column roles."""
    table = parse_table(raw_text)
    return table, detect_columns(table.header_cells)


def _build_from_text(
    raw_text: str,
    ticker_index: Optional[int],
    amount_index: Optional[int],
    description_index: Optional[int],
) -> list[Holding]:
    table = parse_table(raw_text)
    return build_holdings(table.rows, ticker_index, amount_index, description_index)


def find_fund_index(comparison: ComparisonSet, name: str) -> int:
    """Position of the fund with the given name, or -1."""
    for index, fund in enumerate(comparison.funds):
        if fund.name == name:
            return index
    return -1


def find_fund(comparison: ComparisonSet, name: str) -> Fund:
    index = find_fund_index(comparison, name)
    if index < 0:
        raise FundNotFoundError(name)
    return comparison.funds[index]


def add_or_replace_fund(comparison: ComparisonSet, fund: Fund) -> int:
    """Insert a fund, replacing any fund of the same name in place.

    Returns:
        The position the fund now occupies.
    """
    index = find_fund_index(comparison, fund.name)
    if index >= 0:
        comparison.funds[index] = fund
        return index
    comparison.funds.append(fund)
    return len(comparison.funds) - 1


def ingest_fund(
    comparison: ComparisonSet,
    name: str,
    raw_text: str,
    ticker_index: Optional[int],
    amount_index: Optional[int],
    description_index: Optional[int] = None,
    display_name: Optional[str] = None,
    total_value: UserNumber = None,
    unit: Unit = "B",
    my_investment: UserNumber = None,
) -> Fund:
    """Build a fund from pasted holdings and add it to the comparison set.

    A fund with the same name already in the set is replaced at its current
    position. Nothing in the set changes when the pasted data is rejected.

    Args:
        comparison: Set receiving the fund.
        name: Fund ticker, used as its key within the set.
        raw_text: Pasted holdings table, header first.
        ticker_index: Column holding the ticker.
        amount_index: Column holding the percentage weight.
        description_index: Optional column holding the security name.
        display_name: Optional long name of the fund.
        total_value: Fund total in `unit`, as typed by the user.
        unit: "M" or "B".
        my_investment: The user's own dollars in the fund, as typed.

    Returns:
        The new fund.

    Raises:
        MissingFundNameError: If the name is blank.
        HoldingsInputError: If the pasted data yields no holdings.
    """
    name = (name or "").strip()
    if not name:
        raise MissingFundNameError()

    holdings = _build_from_text(raw_text, ticker_index, amount_index, description_index)

    magnitude = parse_user_number(total_value)
    canonical = to_canonical_value(magnitude, unit)
    fund = Fund(
        name=name,
        display_name=(display_name or "").strip() or None,
        holdings=holdings,
        total_value=canonical,
        display_value=format_display_value(magnitude, unit) if canonical is not None else None,
        my_investment=parse_user_number(my_investment) or 0.0,
    )

    position = add_or_replace_fund(comparison, fund)
    logger.info(f"Ingested {name} with {len(holdings)} holdings at position {position} of '{comparison.name}'")
    return fund


def replace_holdings(
    comparison: ComparisonSet,
    fund_name: str,
    raw_text: str,
    ticker_index: Optional[int],
    amount_index: Optional[int],
    description_index: Optional[int] = None,
    *,
    name: Optional[str] = None,
    display_name: Optional[str] = None,
    total_value: UserNumber = None,
    unit: Unit = "B",
    my_investment: UserNumber = None,
) -> Fund:
    """Re-ingest an existing fund's holdings, keeping its position.

    Metadata that is not supplied keeps its current value. Renaming onto the
    name of another fund in the set replaces that fund.

    Raises:
        FundNotFoundError: If no fund has `fund_name`.
        HoldingsInputError: If the pasted data yields no holdings.
    """
    index = find_fund_index(comparison, fund_name)
    if index < 0:
        raise FundNotFoundError(fund_name)
    existing = comparison.funds[index]

    holdings = _build_from_text(raw_text, ticker_index, amount_index, description_index)

    magnitude = parse_user_number(total_value)
    canonical = to_canonical_value(magnitude, unit)
    investment = parse_user_number(my_investment)

    updated = Fund(
        name=(name or "").strip() or existing.name,
        display_name=(display_name or "").strip() or existing.display_name,
        holdings=holdings,
        total_value=canonical if canonical is not None else existing.total_value,
        display_value=format_display_value(magnitude, unit) if canonical is not None else existing.display_value,
        my_investment=investment if investment is not None else existing.my_investment,
    )

    comparison.funds[index] = updated
    if updated.name != existing.name:
        comparison.funds[:] = [
            fund for position, fund in enumerate(comparison.funds)
            if position == index or fund.name != updated.name
        ]

    logger.info(f"Replaced holdings of {existing.name} with {len(holdings)} holdings")
    return updated


def set_total_value(fund: Fund, magnitude: UserNumber, unit: Unit) -> None:
    """Edit a fund's total; a blank or non-positive magnitude clears it."""
    parsed = parse_user_number(magnitude)
    canonical = to_canonical_value(parsed, unit)
    if canonical is None:
        fund.total_value = None
        fund.display_value = None
    else:
        fund.total_value = canonical
        fund.display_value = format_display_value(parsed, unit)


def set_my_investment(fund: Fund, amount: UserNumber) -> None:
    """Edit the user's investment; anything but a non-negative number resets it to 0."""
    parsed = parse_user_number(amount)
    fund.my_investment = parsed if parsed is not None and parsed >= 0 else 0.0


def remove_fund(comparison: ComparisonSet, name: str) -> Fund:
    index = find_fund_index(comparison, name)
    if index < 0:
        raise FundNotFoundError(name)
    removed = comparison.funds.pop(index)
    logger.info(f"Removed {name} from '{comparison.name}'")
    return removed


def move_fund(comparison: ComparisonSet, from_index: int, to_index: int) -> bool:
    """Move a fund to a new position.

    Returns:
        False, leaving the set untouched, when either index is out of range
        or both are equal.
    """
    count = len(comparison.funds)
    if from_index == to_index or not (0 <= from_index < count) or not (0 <= to_index < count):
        return False

    fund = comparison.funds.pop(from_index)
    comparison.funds.insert(to_index, fund)
    return True


def copy_fund(fund: Fund, destination: ComparisonSet) -> Fund:
    """Copy a fund into another set, replacing a same-named fund there."""
    duplicate = dataclasses.replace(fund, holdings=list(fund.holdings))
    add_or_replace_fund(destination, duplicate)
    return duplicate


def sort_holdings(holdings: list[Holding], by: SortKey = "ticker") -> list[Holding]:
    """Holdings ordered for display: by ticker A-Z, or by weight high to low."""
    if by == "weight":
        return sorted(holdings, key=lambda h: h.amount, reverse=True)
    if by == "ticker":
        return sorted(holdings, key=lambda h: h.ticker)
    raise ValueError(f"Unknown sort key '{by}'")
