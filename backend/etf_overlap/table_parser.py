"""Parsing of loosely delimited holdings tables pasted by the user."""

import re
from dataclasses import dataclass

from .errors import EmptyInputError

# A tab, or two or more spaces. A single space stays inside multi-word names.
CELL_DELIMITER = re.compile(r"\s{2,}|\t")


@dataclass
class ParsedTable:
    """Header cells plus the data rows that followed them."""

    header_cells: list[str]
    rows: list[list[str]]


def split_cells(line: str) -> list[str]:
    """Split one line into trimmed cells."""
    return [cell.strip() for cell in CELL_DELIMITER.split(line)]


def parse_table(raw_text: str) -> ParsedTable:
    """Parse pasted text into a header row and data rows.

    Blank lines are dropped. Rows are not checked against the header width;
    consumers validate the columns they need.

    Args:
        raw_text: Text copied from a fund provider's holdings page.

    Returns:
        The parsed table.

    Raises:
        EmptyInputError: If the text has no non-blank lines.
    """
    lines = [line for line in raw_text.split("\n") if line.strip()]
    if not lines:
        raise EmptyInputError()

    return ParsedTable(
        header_cells=split_cells(lines[0]),
        rows=[split_cells(line) for line in lines[1:]],
    )
