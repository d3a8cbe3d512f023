"""Guessing which pasted columns hold the ticker, weight and description."""

import re
from dataclasses import dataclass
from typing import Optional

TICKER_PATTERN = re.compile(r"ticker|symbol", re.IGNORECASE)
AMOUNT_PATTERN = re.compile(r"weight|%|amount|value|assets", re.IGNORECASE)
DESCRIPTION_PATTERN = re.compile(r"name|description|company|security", re.IGNORECASE)


@dataclass
class ColumnMapping:
    """Column indices chosen for building holdings."""

    ticker_index: Optional[int] = None
    amount_index: Optional[int] = None
    description_index: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        """Whether both required roles (ticker and amount) have a column."""
        return self.ticker_index is not None and self.amount_index is not None


def detect_columns(header_cells: list[str]) -> ColumnMapping:
    """Detect column roles from header names.

    Headers are scanned left to right and every match overwrites the previous
    one, so the last matching header wins in each category.

    Args:
        header_cells: Header row from parse_table.

    Returns:
        ColumnMapping with None for any role that matched nothing.
    """
    mapping = ColumnMapping()

    for index, header in enumerate(header_cells):
        if TICKER_PATTERN.search(header):
            mapping.ticker_index = index
        if AMOUNT_PATTERN.search(header):
            mapping.amount_index = index
        if DESCRIPTION_PATTERN.search(header):
            mapping.description_index = index

    return mapping
