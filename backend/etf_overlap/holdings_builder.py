"""Building validated holdings from parsed table rows."""

import logging
import re
from typing import Optional

from .errors import InvalidColumnSelectionError, MissingColumnSelectionError, NoHoldingsError
from .models import Holding

logger = logging.getLogger(__name__)

NON_NUMERIC = re.compile(r"[^\d.\-]")
LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def parse_amount(cell: str) -> float:
    """Parse a weight cell such as "5.21%" or "$1,234.50".

    Everything except digits, "." and "-" is stripped first. Any leading
    number in what remains is used; a cell with none parses to 0.0.
    """
    match = LEADING_NUMBER.match(NON_NUMERIC.sub("", cell))
    if match is None:
        return 0.0
    return float(match.group()) or 0.0


def is_excluded_ticker(ticker: str) -> bool:
    """Whether a ticker cell is a cash line or an index/benchmark row."""
    return ticker.upper() == "CASH" or "index" in ticker.lower()


def build_holdings(
    rows: list[list[str]],
    ticker_index: Optional[int],
    amount_index: Optional[int],
    description_index: Optional[int] = None,
) -> list[Holding]:
    """Turn data rows into holdings.

    Rows that are too short, lack a ticker or amount, or name cash or an
    index are skipped without error.

    Args:
        rows: Data rows from parse_table (header excluded).
        ticker_index: Column holding the ticker.
        amount_index: Column holding the percentage weight.
        description_index: Optional column holding the security name.

    Returns:
        Holdings in input order.

    Raises:
        MissingColumnSelectionError: If ticker or amount column is missing.
        InvalidColumnSelectionError: If a column index is negative.
        NoHoldingsError: If no row survives the filters.
    """
    missing = []
    if ticker_index is None:
        missing.append("ticker")
    if amount_index is None:
        missing.append("amount")
    if missing:
        raise MissingColumnSelectionError(missing)

    negative = [
        role
        for role, index in (("ticker", ticker_index), ("amount", amount_index), ("description", description_index))
        if index is not None and index < 0
    ]
    if negative:
        raise InvalidColumnSelectionError(negative)

    required_width = max(ticker_index, amount_index) + 1
    holdings: list[Holding] = []
    skipped = 0

    for cells in rows:
        if len(cells) < required_width:
            skipped += 1
            continue

        ticker = cells[ticker_index].strip()
        amount = cells[amount_index].strip()
        if not ticker or not amount or is_excluded_ticker(ticker):
            skipped += 1
            continue

        description = ""
        if description_index is not None and description_index < len(cells):
            description = cells[description_index]

        holdings.append(Holding(
            ticker=ticker.upper(),
            amount=parse_amount(amount),
            description=description,
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} of {len(rows)} rows while building holdings")

    if not holdings:
        raise NoHoldingsError()

    return holdings
