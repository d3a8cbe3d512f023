"""Tests for pasted table parsing."""

import pytest

from etf_overlap.errors import EmptyInputError
from etf_overlap.table_parser import parse_table, split_cells


class TestSplitCells:
    """Tests for the cell delimiter."""

    def test_splits_on_tabs(self) -> None:
        """Test that tab-separated cells are split and trimmed."""
        assert split_cells("AAPL\t Apple Inc \t5.2%") == ["AAPL", "Apple Inc", "5.2%"]

    def test_splits_on_runs_of_spaces(self) -> None:
        """Test that two or more spaces separate cells."""
        assert split_cells("AAPL  Apple Inc     5.2%") == ["AAPL", "Apple Inc", "5.2%"]

    def test_single_space_does_not_split(self) -> None:
        """Test that multi-word names stay in one cell."""
        assert split_cells("Johnson & Johnson") == ["Johnson & Johnson"]


class TestParseTable:
    """Tests for the parse_table function."""

    def test_header_and_rows(self, cibr_text: str) -> None:
        """Test that the first line is the header and the rest are rows."""
        table = parse_table(cibr_text)

        assert table.header_cells == ["Ticker", "Name", "Weight (%)"]
        assert len(table.rows) == 3
        assert table.rows[0] == ["AAPL", "Apple Inc", "5.2%"]

    def test_blank_lines_are_dropped(self) -> None:
        """Test that blank and whitespace-only lines are ignored."""
        table = parse_table("\n\nTicker\tWeight\n   \nAAPL\t5%\n\t\n\nMSFT\t4%\n")

        assert table.header_cells == ["Ticker", "Weight"]
        assert table.rows == [["AAPL", "5%"], ["MSFT", "4%"]]

    def test_windows_line_endings(self) -> None:
        """Test that carriage returns are trimmed from cells."""
        table = parse_table("Ticker\tWeight\r\nAAPL\t5%\r\n")

        assert table.header_cells == ["Ticker", "Weight"]
        assert table.rows == [["AAPL", "5%"]]

    def test_ragged_rows_pass_through(self) -> None:
        """Test that rows of differing width are not rejected."""
        table = parse_table("Ticker\tName\tWeight\nAAPL\nMSFT\tMicrosoft\t4%\textra")

        assert table.rows[0] == ["AAPL"]
        assert table.rows[1] == ["MSFT", "Microsoft", "4%", "extra"]

    def test_header_only(self) -> None:
        """Test that a lone header parses with no rows."""
        table = parse_table("Ticker\tWeight")

        assert table.header_cells == ["Ticker", "Weight"]
        assert table.rows == []

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", " \t \n  \n"])
    def test_empty_input_raises(self, text: str) -> None:
        """Test that text without content raises EmptyInputError."""
        with pytest.raises(EmptyInputError):
            parse_table(text)

    def test_reparse_of_rejoined_table(self, vti_text: str) -> None:
        """Test that rejoining cells with tabs and parsing again is stable."""
        first = parse_table(vti_text)
        rejoined = "\n".join(
            "\t".join(cells) for cells in [first.header_cells, *first.rows]
        )

        second = parse_table(rejoined)

        assert second.header_cells == first.header_cells
        assert len(second.rows) == len(first.rows)
        assert second.rows == first.rows
