"""Errors raised by holdings ingestion and comparison-set operations."""


class HoldingsInputError(ValueError):
    """Pasted holdings data could not be turned into a fund."""


class EmptyInputError(HoldingsInputError):
    """No non-blank lines were found in the pasted text."""

    def __init__(self) -> None:
        super().__init__("No holdings data provided. Paste the fund's holdings table.")


class MissingColumnSelectionError(HoldingsInputError):
    """Ticker or amount column was not chosen before building holdings."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Select the {' and '.join(missing)} column(s) before processing.")


class InvalidColumnSelectionError(HoldingsInputError):
    """A column index does not point at a column (it is negative)."""

    def __init__(self, roles: list[str]) -> None:
        self.roles = roles
        super().__init__(f"Invalid {' and '.join(roles)} column selection.")


class NoHoldingsError(HoldingsInputError):
    """Every row was rejected by the holdings filters."""

    def __init__(self) -> None:
        super().__init__("No valid holdings found. Check the data format and column selection.")


class MissingFundNameError(HoldingsInputError):
    """A fund was submitted without a name."""

    def __init__(self) -> None:
        super().__init__("Enter a fund name (e.g. CIBR, UFO).")


class ComparisonError(Exception):
    """A comparison-set or workspace operation could not be applied."""


class TabNotFoundError(ComparisonError, LookupError):
    def __init__(self, tab_id: str) -> None:
        self.tab_id = tab_id
        super().__init__(f"Comparison '{tab_id}' not found.")


class FundNotFoundError(ComparisonError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"ETF '{name}' not found in this comparison.")


class LastTabError(ComparisonError):
    def __init__(self) -> None:
        super().__init__("The last comparison cannot be closed.")


class InvalidImportError(ComparisonError):
    """An import document does not have the expected structure."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid file format: {reason}")
