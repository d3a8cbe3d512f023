"""Tests for building holdings from parsed rows."""

import math

import pytest

from etf_overlap.errors import InvalidColumnSelectionError, MissingColumnSelectionError, NoHoldingsError
from etf_overlap.holdings_builder import build_holdings, is_excluded_ticker, parse_amount
from etf_overlap.models import Holding
from etf_overlap.table_parser import parse_table


class TestParseAmount:
    """Tests for lenient weight parsing."""

    @pytest.mark.parametrize(
        "cell, expected",
        [
            ("5.21%", 5.21),
            ("$1,234.50", 1234.5),
            ("-0.35%", -0.35),
            ("12", 12.0),
            (".5", 0.5),
        ],
    )
    def test_numeric_cells(self, cell: str, expected: float) -> None:
        """Test that symbols and separators are stripped."""
        assert parse_amount(cell) == pytest.approx(expected)

    @pytest.mark.parametrize("cell", ["N/A%", "-", "--", "n/a", "."])
    def test_non_numeric_cells_are_zero(self, cell: str) -> None:
        """Test that unparseable cells fall back to zero."""
        assert parse_amount(cell) == 0.0

    def test_negative_zero_is_plain_zero(self) -> None:
        """Test that "-0" parses to 0.0 without a sign bit."""
        assert math.copysign(1.0, parse_amount("-0")) == 1.0
        assert math.copysign(1.0, parse_amount("-0.00%")) == 1.0


class TestIsExcludedTicker:
    """Tests for cash and index row exclusion."""

    @pytest.mark.parametrize("ticker", ["CASH", "cash", "S&P 500 Index", "MSCI INDEX FUT"])
    def test_excluded(self, ticker: str) -> None:
        assert is_excluded_ticker(ticker)

    @pytest.mark.parametrize("ticker", ["AAPL", "CASHX", "BRK.B"])
    def test_kept(self, ticker: str) -> None:
        assert not is_excluded_ticker(ticker)


class TestBuildHoldings:
    """Tests for the build_holdings function."""

    def test_builds_holdings_in_input_order(self, cibr_text: str) -> None:
        """Test a typical paste with a cash line."""
        table = parse_table(cibr_text)

        holdings = build_holdings(table.rows, 0, 2, 1)

        assert holdings == [
            Holding(ticker="AAPL", amount=5.2, description="Apple Inc"),
            Holding(ticker="MSFT", amount=4.8, description="Microsoft Corp"),
        ]

    def test_cash_and_index_rows_excluded(self) -> None:
        """Test that cash and index rows are dropped."""
        rows = [
            ["CASH", "1.0"],
            ["S&P 500 Index", "2.0"],
            ["AAPL", "3.0"],
        ]

        holdings = build_holdings(rows, 0, 1)

        assert [h.ticker for h in holdings] == ["AAPL"]

    def test_ticker_is_uppercased(self) -> None:
        """Test that tickers are stored upper-case."""
        holdings = build_holdings([["msft", "4.8%"]], 0, 1)

        assert holdings[0].ticker == "MSFT"

    def test_non_numeric_amount_is_zero(self) -> None:
        """Test that an unreadable weight keeps the row with zero weight."""
        holdings = build_holdings([["AAPL", "N/A%"]], 0, 1)

        assert holdings == [Holding(ticker="AAPL", amount=0.0)]

    def test_short_rows_skipped(self) -> None:
        """Test that rows missing the needed columns are skipped."""
        rows = [["AAPL"], ["MSFT", "Microsoft", "4.8"]]

        holdings = build_holdings(rows, 0, 2)

        assert [h.ticker for h in holdings] == ["MSFT"]

    def test_blank_ticker_or_amount_skipped(self) -> None:
        """Test that rows with empty key cells are skipped."""
        rows = [["", "1.0"], ["AAPL", ""], ["MSFT", "4.8"]]

        holdings = build_holdings(rows, 0, 1)

        assert [h.ticker for h in holdings] == ["MSFT"]

    def test_description_defaults_to_empty(self) -> None:
        """Test that descriptions are empty without a description column."""
        holdings = build_holdings([["AAPL", "5", "Apple"]], 0, 1)

        assert holdings[0].description == ""

    def test_description_beyond_row_width(self) -> None:
        """Test that a short row still builds with an empty description."""
        holdings = build_holdings([["AAPL", "5"]], 0, 1, 2)

        assert holdings[0].description == ""

    @pytest.mark.parametrize(
        "ticker_index, amount_index, missing",
        [
            (None, 1, ["ticker"]),
            (0, None, ["amount"]),
            (None, None, ["ticker", "amount"]),
        ],
    )
    def test_missing_columns_raise(self, ticker_index, amount_index, missing) -> None:
        """Test that unresolved columns raise MissingColumnSelectionError."""
        with pytest.raises(MissingColumnSelectionError) as excinfo:
            build_holdings([["AAPL", "5"]], ticker_index, amount_index)

        assert excinfo.value.missing == missing

    @pytest.mark.parametrize(
        "ticker_index, amount_index, description_index, roles",
        [
            (-3, -1, None, ["ticker", "amount"]),
            (0, -1, None, ["amount"]),
            (0, 2, -2, ["description"]),
        ],
    )
    def test_negative_columns_raise(self, ticker_index, amount_index, description_index, roles) -> None:
        """Test that negative indices are rejected instead of reading from the row end."""
        with pytest.raises(InvalidColumnSelectionError) as excinfo:
            build_holdings([["AAPL", "Apple", "5.0"]], ticker_index, amount_index, description_index)

        assert excinfo.value.roles == roles

    def test_no_valid_rows_raises(self) -> None:
        """Test that rejecting every row raises NoHoldingsError."""
        with pytest.raises(NoHoldingsError):
            build_holdings([["CASH", "100"], ["AAPL"]], 0, 1)

    def test_no_rows_raises(self) -> None:
        """Test that a header-only paste raises NoHoldingsError."""
        with pytest.raises(NoHoldingsError):
            build_holdings([], 0, 1)
