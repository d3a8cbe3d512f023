"""FastAPI application for the ETF holdings overlap service."""

from functools import lru_cache
from typing import Any, Literal, Union

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging

from . import config
from .comparison import (
    detect_for_text,
    find_fund_index,
    ingest_fund,
    move_fund,
    remove_fund,
    replace_holdings,
    set_my_investment,
    set_total_value,
    sort_holdings,
)
from .errors import (
    ComparisonError,
    FundNotFoundError,
    HoldingsInputError,
    TabNotFoundError,
)
from .fund_value import (
    editable_total_value,
    format_fund_dollars,
    format_personal_dollars,
    fund_dollar_exposure,
    personal_dollar_exposure,
)
from .models import ComparisonSet, Fund
from .overlap import analyze_overlap, is_valid_ticker_for_overlap
from .storage import JsonFileStorage
from .workspace import Workspace, WorkspaceStore

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ETF Holdings Overlap",
    description="Compare pasted ETF holdings and find the securities they share",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

UserNumber = Union[float, str, None]


@lru_cache
def get_store() -> WorkspaceStore:
    """Workspace store backed by JSON files in the data directory."""
    return WorkspaceStore(JsonFileStorage(config.DATA_DIR))


class ColumnDetectRequest(BaseModel):
    """Request body for column detection."""

    text: str


class ColumnDetectResponse(BaseModel):
    """Detected header cells and column roles."""

    headers: list[str]
    row_count: int
    ticker_index: int | None
    amount_index: int | None
    description_index: int | None
    complete: bool

class FundIngestRequest(BaseModel):
    """Request body for adding an ETF from pasted holdings."""

    name: str
    text: str
    ticker_index: int | None = Field(default=None, ge=0)
    amount_index: int | None = Field(default=None, ge=0)
    description_index: int | None = Field(default=None, ge=0)
    display_name: str | None = None
    total_value: UserNumber = None
    unit: Literal["M", "B"] = "B"
    my_investment: UserNumber = None


class HoldingsReplaceRequest(BaseModel):
    """Request body for replacing an ETF's holdings."""

    text: str
    ticker_index: int | None = Field(default=None, ge=0)
    amount_index: int | None = Field(default=None, ge=0)
    description_index: int | None = Field(default=None, ge=0)
    name: str | None = None
    display_name: str | None = None
    total_value: UserNumber = None
    unit: Literal["M", "B"] = "B"
    my_investment: UserNumber = None


class FundUpdateRequest(BaseModel):
    """Request body for editing an ETF's total value or personal investment.

    Omitted fields are left alone; an explicit null or non-positive total
    clears it.
    """

    total_value: UserNumber = None
    unit: Literal["M", "B"] = "B"
    my_investment: UserNumber = None


class MoveRequest(BaseModel):
    to_index: int


class CopyRequest(BaseModel):
    destination_tab_id: str


class RenameTabRequest(BaseModel):
    name: str


class FundResponse(BaseModel):
    """Response model for an ETF summary."""

    name: str
    display_name: str | None
    total_value: float | None
    display_value: str | None
    my_investment: float
    holdings_count: int
    edit_magnitude: float | None
    edit_unit: Literal["M", "B"]


class TabResponse(BaseModel):
    """Response model for a comparison tab."""

    id: str
    name: str
    etfs: list[FundResponse]


class HoldingView(BaseModel):
    """Response model for a single holding with its dollar exposure."""

    ticker: str
    description: str
    amount: float
    usd_value: float | None
    usd_display: str | None
    my_value: float | None
    my_display: str | None
    is_overlap: bool


class FundHoldingsResponse(BaseModel):
    """Response model for an ETF's holdings."""

    name: str
    display_name: str | None
    display_value: str | None
    my_investment: float
    sort: str
    holdings: list[HoldingView]


class OverlapMember(BaseModel):
    etf_index: int
    etf_name: str
    amount: float
    description: str


class OverlapEntry(BaseModel):
    ticker: str
    etfs: list[OverlapMember]


class OverlapResponse(BaseModel):
    """Response model for overlap analysis."""

    etf_count: int
    unique_ticker_count: int
    overlapping_ticker_count: int
    overlap_percentage: float
    overlapping: list[OverlapEntry]


class ImportResponse(BaseModel):
    imported_tabs: int


def _fund_response(fund: Fund) -> FundResponse:
    edit_magnitude, edit_unit = editable_total_value(fund.total_value)
    return FundResponse(
        name=fund.name,
        display_name=fund.display_name,
        total_value=fund.total_value,
        display_value=fund.display_value,
        my_investment=fund.my_investment,
        holdings_count=len(fund.holdings),
        edit_magnitude=edit_magnitude,
        edit_unit=edit_unit,
    )


def _tab_response(tab: ComparisonSet) -> TabResponse:
    return TabResponse(id=tab.id, name=tab.name, etfs=[_fund_response(f) for f in tab.funds])


def _get_tab(workspace: Workspace, tab_id: str) -> ComparisonSet:
    try:
        return workspace.get_tab(tab_id)
    except TabNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _get_fund(tab: ComparisonSet, name: str) -> Fund:
    index = find_fund_index(tab, name)
    if index < 0:
        raise HTTPException(status_code=404, detail=str(FundNotFoundError(name)))
    return tab.funds[index]


@app.post("/api/columns/detect", response_model=ColumnDetectResponse)
async def detect_columns(request: ColumnDetectRequest) -> ColumnDetectResponse:
    """Guess the ticker, weight and description columns of pasted data.

    Raises:
        HTTPException: If the pasted text is empty.
    """
    try:
        table, mapping = detect_for_text(request.text)
    except HoldingsInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ColumnDetectResponse(
        headers=table.header_cells,
        row_count=len(table.rows),
        ticker_index=mapping.ticker_index,
        amount_index=mapping.amount_index,
        description_index=mapping.description_index,
        complete=mapping.is_complete,
    )


@app.get("/api/tabs", response_model=list[TabResponse])
async def list_tabs(store: WorkspaceStore = Depends(get_store)) -> list[TabResponse]:
    """Get every comparison tab with its ETFs."""
    return [_tab_response(tab) for tab in store.load().tabs]


@app.post("/api/tabs", response_model=TabResponse, status_code=201)
async def add_tab(store: WorkspaceStore = Depends(get_store)) -> TabResponse:
    """Create a new, empty comparison tab."""
    workspace = store.load()
    tab = workspace.add_tab()
    store.save(workspace)
    return _tab_response(tab)


@app.patch("/api/tabs/{tab_id}", response_model=TabResponse)
async def rename_tab(
    tab_id: str, request: RenameTabRequest, store: WorkspaceStore = Depends(get_store)
) -> TabResponse:
    """Rename a comparison tab. Blank names leave it unchanged."""
    workspace = store.load()
    tab = _get_tab(workspace, tab_id)
    workspace.rename_tab(tab.id, request.name)
    store.save(workspace)
    return _tab_response(tab)


@app.delete("/api/tabs/{tab_id}", response_model=list[TabResponse])
async def close_tab(tab_id: str, store: WorkspaceStore = Depends(get_store)) -> list[TabResponse]:
    """Close a comparison tab and delete its ETFs.

    Raises:
        HTTPException: If the tab does not exist or is the last one.
    """
    workspace = store.load()
    _get_tab(workspace, tab_id)
    try:
        workspace.close_tab(tab_id)
    except ComparisonError as e:
        raise HTTPException(status_code=400, detail=str(e))

    store.save(workspace)
    return [_tab_response(tab) for tab in workspace.tabs]


@app.post("/api/tabs/{tab_id}/funds", response_model=FundResponse, status_code=201)
async def add_fund(
    tab_id: str, request: FundIngestRequest, store: WorkspaceStore = Depends(get_store)
) -> FundResponse:
    """Add an ETF from pasted holdings, replacing one of the same name.

    Raises:
        HTTPException: If the tab does not exist or the data holds no valid holdings.
    """
    workspace = store.load()
    tab = _get_tab(workspace, tab_id)

    try:
        fund = ingest_fund(
            tab,
            request.name,
            request.text,
            request.ticker_index,
            request.amount_index,
            request.description_index,
            display_name=request.display_name,
            total_value=request.total_value,
            unit=request.unit,
            my_investment=request.my_investment,
        )
    except HoldingsInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    store.save(workspace)
    return _fund_response(fund)


@app.put("/api/tabs/{tab_id}/funds/{name}/holdings", response_model=FundResponse)
async def replace_fund_holdings(
    tab_id: str, name: str, request: HoldingsReplaceRequest, store: WorkspaceStore = Depends(get_store)
) -> FundResponse:
    """Replace an ETF's holdings, keeping metadata that is not resubmitted."""
    workspace = store.load()
    tab = _get_tab(workspace, tab_id)
    _get_fund(tab, name)

    try:
        fund = replace_holdings(
            tab,
            name,
            request.text,
            request.ticker_index,
            request.amount_index,
            request.description_index,
            name=request.name,
            display_name=request.display_name,
            total_value=request.total_value,
            unit=request.unit,
            my_investment=request.my_investment,
        )
    except HoldingsInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    store.save(workspace)
    return _fund_response(fund)


@app.patch("/api/tabs/{tab_id}/funds/{name}", response_model=FundResponse)
async def update_fund(
    tab_id: str, name: str, request: FundUpdateRequest, store: WorkspaceStore = Depends(get_store)
) -> FundResponse:
    """Edit an ETF's total value and/or personal investment."""
    workspace = store.load()
    fund = _get_fund(_get_tab(workspace, tab_id), name)

    if "total_value" in request.model_fields_set:
        set_total_value(fund, request.total_value, request.unit)
    if "my_investment" in request.model_fields_set:
        set_my_investment(fund, request.my_investment)

    store.save(workspace)
    return _fund_response(fund)


@app.delete("/api/tabs/{tab_id}/funds/{name}", response_model=TabResponse)
async def delete_fund(tab_id: str, name: str, store: WorkspaceStore = Depends(get_store)) -> TabResponse:
    """Remove an ETF from a comparison tab."""
    workspace = store.load()
    tab = _get_tab(workspace, tab_id)
    _get_fund(tab, name)
    remove_fund(tab, name)
    store.save(workspace)
    return _tab_response(tab)


@app.post("/api/tabs/{tab_id}/funds/{name}/move", response_model=TabResponse)
async def move_fund_position(
    tab_id: str, name: str, request: MoveRequest, store: WorkspaceStore = Depends(get_store)
) -> TabResponse:
    """Move an ETF to another position within its tab.

    Raises:
        HTTPException: If the target position is out of range.
    """
    workspace = store.load()
    tab = _get_tab(workspace, tab_id)
    _get_fund(tab, name)

    from_index = find_fund_index(tab, name)
    if from_index != request.to_index and not move_fund(tab, from_index, request.to_index):
        raise HTTPException(
            status_code=400,
            detail=f"Position {request.to_index} is out of range for {len(tab.funds)} ETFs.",
        )

    store.save(workspace)
    return _tab_response(tab)


@app.post("/api/tabs/{tab_id}/funds/{name}/copy", response_model=TabResponse)
async def copy_fund_to_tab(
    tab_id: str, name: str, request: CopyRequest, store: WorkspaceStore = Depends(get_store)
) -> TabResponse:
    """Copy an ETF into another tab, replacing one of the same name there.

    Returns:
        The destination tab.
    """
    workspace = store.load()
    _get_fund(_get_tab(workspace, tab_id), name)
    destination = _get_tab(workspace, request.destination_tab_id)

    if destination.id == tab_id:
        raise HTTPException(status_code=400, detail="Choose a different tab to copy the ETF to.")

    workspace.copy_fund_to_tab(tab_id, name, destination.id)
    store.save(workspace)
    return _tab_response(destination)


@app.get("/api/tabs/{tab_id}/funds/{name}/holdings", response_model=FundHoldingsResponse)
async def get_fund_holdings(
    tab_id: str,
    name: str,
    sort: Literal["ticker", "weight"] = Query("ticker"),
    store: WorkspaceStore = Depends(get_store),
) -> FundHoldingsResponse:
    """Get an ETF's holdings with dollar exposure and overlap flags."""
    tab = _get_tab(store.load(), tab_id)
    fund = _get_fund(tab, name)
    overlap = analyze_overlap(tab.funds)

    views = []
    for holding in sort_holdings(fund.holdings, sort):
        usd_value = fund_dollar_exposure(fund.total_value, holding.amount)
        my_value = personal_dollar_exposure(fund.my_investment, holding.amount)
        views.append(HoldingView(
            ticker=holding.ticker,
            description=holding.description,
            amount=holding.amount,
            usd_value=usd_value,
            usd_display=format_fund_dollars(usd_value) if usd_value else None,
            my_value=my_value,
            my_display=format_personal_dollars(my_value) if my_value else None,
            is_overlap=is_valid_ticker_for_overlap(holding.ticker) and overlap.is_overlapping(holding.ticker),
        ))

    return FundHoldingsResponse(
        name=fund.name,
        display_name=fund.display_name,
        display_value=fund.display_value,
        my_investment=fund.my_investment,
        sort=sort,
        holdings=views,
    )


@app.get("/api/tabs/{tab_id}/overlap", response_model=OverlapResponse)
async def get_overlap(tab_id: str, store: WorkspaceStore = Depends(get_store)) -> OverlapResponse:
    """Analyze overlap between the ETFs of a tab."""
    tab = _get_tab(store.load(), tab_id)
    result = analyze_overlap(tab.funds)

    return OverlapResponse(
        etf_count=len(tab.funds),
        unique_ticker_count=result.unique_ticker_count,
        overlapping_ticker_count=result.overlapping_ticker_count,
        overlap_percentage=result.overlap_percentage,
        overlapping=[
            OverlapEntry(
                ticker=ticker,
                etfs=[
                    OverlapMember(
                        etf_index=entry.fund_index,
                        etf_name=tab.funds[entry.fund_index].name,
                        amount=entry.holding.amount,
                        description=entry.holding.description,
                    )
                    for entry in result.ticker_index[ticker]
                ],
            )
            for ticker in result.overlapping_tickers
        ],
    )


@app.get("/api/export")
async def export_data(store: WorkspaceStore = Depends(get_store)) -> dict:
    """Export every tab and ETF as a JSON document."""
    return store.load().export_document()


@app.post("/api/import", response_model=ImportResponse)
async def import_data(document: Any = Body(...), store: WorkspaceStore = Depends(get_store)) -> ImportResponse:
    """Replace all tabs with those of an exported document.

    Raises:
        HTTPException: If the document is not a valid export.
    """
    workspace = store.load()
    try:
        count = workspace.import_document(document)
    except ComparisonError as e:
        raise HTTPException(status_code=400, detail=f"Import failed: {e}")

    store.save(workspace)
    return ImportResponse(imported_tabs=count)


@app.delete("/api/data", response_model=list[TabResponse])
async def wipe_data(
    confirm: str = Query("", description='Must be "DELETE"'),
    store: WorkspaceStore = Depends(get_store),
) -> list[TabResponse]:
    """Permanently delete all tabs and ETFs.

    Raises:
        HTTPException: Unless the wipe is confirmed with confirm=DELETE.
    """
    if confirm != "DELETE":
        raise HTTPException(status_code=400, detail="Data wipe cancelled. Pass confirm=DELETE to proceed.")

    workspace = store.load()
    store.wipe(workspace)
    return [_tab_response(tab) for tab in workspace.tabs]


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status.
    """
    return {"status": "healthy"}
