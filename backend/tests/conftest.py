"""Shared fixtures for the ETF overlap tests."""

import pytest

from etf_overlap.models import Fund, Holding

CIBR_TEXT = """Ticker\tName\tWeight (%)
AAPL\tApple Inc\t5.2%
MSFT\tMicrosoft Corp\t4.8%
CASH\tCash Collateral\t0.5%
"""

VTI_TEXT = """Symbol  Company  Weight
AAPL  Apple Inc  8.1%
JNJ  Johnson & Johnson  0.9%
"""


@pytest.fixture
def cibr_text() -> str:
    return CIBR_TEXT


@pytest.fixture
def vti_text() -> str:
    return VTI_TEXT


@pytest.fixture
def two_funds() -> list[Fund]:
    """Two funds sharing only AAPL."""
    return [
        Fund(
            name="CIBR",
            holdings=[
                Holding(ticker="AAPL", amount=5.2, description="Apple Inc"),
                Holding(ticker="MSFT", amount=4.8, description="Microsoft Corp"),
            ],
        ),
        Fund(
            name="VTI",
            holdings=[
                Holding(ticker="AAPL", amount=8.1, description="Apple Inc"),
                Holding(ticker="JNJ", amount=0.9, description="Johnson & Johnson"),
            ],
        ),
    ]
