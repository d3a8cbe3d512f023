"""Domain records for funds, their holdings and comparison sets."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Holding:
    """Represents a single security held by an ETF."""

    ticker: str
    amount: float  # percentage weight
    description: str = ""


@dataclass
class Fund:
    """Represents one ETF's holdings plus its value metadata."""

    name: str
    holdings: list[Holding] = field(default_factory=list)
    display_name: Optional[str] = None
    total_value: Optional[float] = None
    display_value: Optional[str] = None
    my_investment: float = 0.0


@dataclass
class ComparisonSet:
    """A group of funds compared together (one tab in the UI)."""

    id: str
    name: str
    funds: list[Fund] = field(default_factory=list)
