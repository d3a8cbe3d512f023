"""Cross-fund overlap calculation."""

import re
from dataclasses import dataclass, field
from typing import Sequence

from .models import Fund, Holding

PLACEHOLDER_TICKERS = frozenset({"CASH", "N/A", "TBD", "UNKNOWN", "OTHER"})
TICKER_FIRST_CHAR = re.compile(r"[A-Z0-9]")


@dataclass(frozen=True)
class FundHolding:
    """A holding together with the position of the fund that holds it."""

    fund_index: int
    holding: Holding


@dataclass
class OverlapResult:
    """Result of an overlap analysis across a comparison set."""

    unique_ticker_count: int = 0
    overlapping_ticker_count: int = 0
    overlap_percentage: float = 0.0
    overlapping_tickers: list[str] = field(default_factory=list)
    ticker_index: dict[str, list[FundHolding]] = field(default_factory=dict)

    def is_overlapping(self, ticker: str) -> bool:
        return len(self.ticker_index.get(ticker, ())) > 1


def is_valid_ticker_for_overlap(ticker: str) -> bool:
    """Whether a ticker names a real security worth matching across funds.

    Blank tickers, placeholder text such as "N/A" or "CASH", index rows and
    tickers starting with punctuation are rejected.
    """
    if not ticker or not ticker.strip():
        return False

    normalized = ticker.strip().upper()
    if normalized in PLACEHOLDER_TICKERS:
        return False
    if "INDEX" in normalized:
        return False

    return TICKER_FIRST_CHAR.match(normalized[0]) is not None


def analyze_overlap(funds: Sequence[Fund]) -> OverlapResult:
    """Find the tickers held by more than one fund.

    Every eligible holding is indexed by ticker in fund order, then holding
    order. A ticker is overlapping once it has two or more index entries.
    Fewer than two funds yields an empty result.

    Args:
        funds: Funds of one comparison set.

    Returns:
        OverlapResult with counts, percentage and the per-ticker index.
    """
    if len(funds) < 2:
        return OverlapResult()

    ticker_index: dict[str, list[FundHolding]] = {}
    for fund_index, fund in enumerate(funds):
        for holding in fund.holdings:
            if not is_valid_ticker_for_overlap(holding.ticker):
                continue
            ticker_index.setdefault(holding.ticker, []).append(
                FundHolding(fund_index=fund_index, holding=holding)
            )

    overlapping = [ticker for ticker, entries in ticker_index.items() if len(entries) > 1]
    unique_count = len(ticker_index)
    percentage = round(len(overlapping) / unique_count * 100, 1) if unique_count else 0.0

    return OverlapResult(
        unique_ticker_count=unique_count,
        overlapping_ticker_count=len(overlapping),
        overlap_percentage=percentage,
        overlapping_tickers=overlapping,
        ticker_index=ticker_index,
    )
