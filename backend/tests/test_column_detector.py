"""Tests for header-based column detection."""

from etf_overlap.column_detector import ColumnMapping, detect_columns


class TestDetectColumns:
    """Tests for the detect_columns function."""

    def test_last_matching_header_wins(self) -> None:
        """Test that a later match overrides an earlier one."""
        mapping = detect_columns(["Symbol", "Ticker", "Weight"])

        assert mapping.ticker_index == 1
        assert mapping.amount_index == 2
        assert mapping.description_index is None

    def test_typical_provider_headers(self) -> None:
        """Test detection on an iShares-style header row."""
        mapping = detect_columns(["Ticker", "Name", "Sector", "Asset Class", "Weight (%)"])

        assert mapping.ticker_index == 0
        assert mapping.description_index == 1
        assert mapping.amount_index == 4

    def test_later_value_column_overrides_weight(self) -> None:
        """Test that a trailing value column takes the amount role."""
        mapping = detect_columns(["Ticker", "Weight (%)", "Market Value"])

        assert mapping.amount_index == 2

    def test_case_insensitive(self) -> None:
        """Test that header matching ignores case."""
        mapping = detect_columns(["SYMBOL", "COMPANY", "% OF NET ASSETS"])

        assert mapping.ticker_index == 0
        assert mapping.description_index == 1
        assert mapping.amount_index == 2

    def test_header_can_match_several_roles(self) -> None:
        """Test that categories are matched independently."""
        mapping = detect_columns(["Security Value"])

        assert mapping.amount_index == 0
        assert mapping.description_index == 0

    def test_no_matches(self) -> None:
        """Test that unrecognised headers leave every role unset."""
        mapping = detect_columns(["Foo", "Bar"])

        assert mapping == ColumnMapping()
        assert not mapping.is_complete

    def test_is_complete_ignores_description(self) -> None:
        """Test that ticker and amount alone are enough to build."""
        assert detect_columns(["Ticker", "Weight"]).is_complete
