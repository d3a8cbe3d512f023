"""Record schemas for persisted workspaces and import/export documents."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import ComparisonSet, Fund, Holding


class HoldingRecord(BaseModel):
    """Stored form of a single holding."""

    ticker: str
    amount: float
    description: str = ""


class FundRecord(BaseModel):
    """Stored form of a fund."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    holdings: list[HoldingRecord] = Field(default_factory=list)
    total_value: Optional[float] = Field(default=None, alias="totalValue")
    display_value: Optional[str] = Field(default=None, alias="displayValue")
    my_investment: Optional[float] = Field(default=0.0, alias="myInvestment")


class TabRecord(BaseModel):
    """Stored form of a comparison set."""

    id: str
    name: str
    etfs: list[FundRecord] = Field(default_factory=list)


class ExportDocument(BaseModel):
    """Document written by export and accepted by import."""

    model_config = ConfigDict(populate_by_name=True)

    version: str
    export_date: datetime = Field(alias="exportDate")
    tabs: list[TabRecord]


def fund_to_record(fund: Fund) -> FundRecord:
    return FundRecord(
        name=fund.name,
        display_name=fund.display_name,
        holdings=[
            HoldingRecord(ticker=h.ticker, amount=h.amount, description=h.description)
            for h in fund.holdings
        ],
        total_value=fund.total_value,
        display_value=fund.display_value,
        my_investment=fund.my_investment,
    )


def fund_from_record(record: FundRecord) -> Fund:
    return Fund(
        name=record.name,
        display_name=record.display_name,
        holdings=[
            Holding(ticker=h.ticker, amount=h.amount, description=h.description)
            for h in record.holdings
        ],
        total_value=record.total_value,
        display_value=record.display_value,
        my_investment=record.my_investment or 0.0,
    )


def tab_to_record(comparison: ComparisonSet) -> TabRecord:
    return TabRecord(
        id=comparison.id,
        name=comparison.name,
        etfs=[fund_to_record(fund) for fund in comparison.funds],
    )


def tab_from_record(record: TabRecord) -> ComparisonSet:
    return ComparisonSet(
        id=record.id,
        name=record.name,
        funds=[fund_from_record(fund) for fund in record.etfs],
    )


def dump_record(model: BaseModel) -> dict:
    """Plain JSON-compatible dict using the camelCase field names."""
    return model.model_dump(mode="json", by_alias=True)
