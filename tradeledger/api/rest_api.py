"""
REST API for the transaction ledger.
Accepts marketplace CSV exports and serves filtered transactions and totals.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, Field

from ..config import API_DEFAULT_LIMIT, API_HOST, API_MAX_LIMIT, API_PORT, API_VERSION, DB_PATH
from ..exceptions import CSVImportError, StorageError
from ..logger import setup_logger
from ..models import TransactionFilters, TransactionType
from ..parsing import RowOrder
from ..services import MetricsService, TransactionService
from .database import SQLiteTransactionStore

logger = setup_logger(__name__)


# ============================================================================
# Models
# ============================================================================

class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: datetime


class DiscardResponse(BaseModel):
    """A skipped CSV row."""
    row_index: int = Field(..., description="1-based data row number")
    reason: str
    detail: str = ""


class ImportResponse(BaseModel):
    """Outcome of a CSV import."""
    imported: int
    skipped: int
    message: str
    discards: List[DiscardResponse]


class TransactionResponse(BaseModel):
    """Stored transaction."""
    id: str
    item: str
    game: str
    date: datetime
    price_cents: int
    type: TransactionType


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    count: int
    total_matching: int


class TotalsResponse(BaseModel):
    """Totals in cents."""
    gains: int
    spent: int
    net: int


class SummaryResponse(BaseModel):
    """Totals plus per-game and per-month breakdowns."""
    transaction_count: int
    totals: TotalsResponse
    games: List[dict]
    months: List[dict]


# ============================================================================
# FastAPI App
# ============================================================================

def create_app(
    transaction_service: Optional[TransactionService] = None,
    metrics_service: Optional[MetricsService] = None,
) -> FastAPI:
    """
    Build the API around injected services.

    Args:
        transaction_service: Service used for imports and queries
            (defaults to one backed by the SQLite database at DB_PATH)
        metrics_service: Service used for totals and summaries

    Returns:
        Configured FastAPI application
    """
    if transaction_service is None:
        transaction_service = TransactionService(SQLiteTransactionStore(DB_PATH))
    if metrics_service is None:
        metrics_service = MetricsService()

    api = FastAPI(
        title="Trade Ledger API",
        description="Import and analyse marketplace transaction history",
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    @api.get("/api/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check if API is running."""
        return HealthResponse(status="healthy", version=API_VERSION, timestamp=datetime.now())

    @api.post("/api/v1/imports", response_model=ImportResponse, tags=["Imports"])
    async def import_csv(
        request: Request,
        order: RowOrder = Query(RowOrder.NEWEST_FIRST, description="Chronological order of the rows"),
    ):
        """
        Import a CSV export sent as the raw request body.

        Rows that fail validation are skipped and reported; the request only
        fails when the file is empty or nothing in it is valid.
        """
        body = await request.body()
        try:
            text = body.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")

        try:
            result = transaction_service.import_csv_text(text, order=order)
        except CSVImportError as e:
            logger.warning(f"Import rejected: {e}")
            raise HTTPException(status_code=422, detail=str(e))
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return ImportResponse(
            imported=result.imported_count,
            skipped=result.skipped_count,
            message=result.summary_message(),
            discards=[DiscardResponse(**d.to_dict()) for d in result.discards],
        )

    @api.get("/api/v1/transactions", response_model=TransactionListResponse, tags=["Transactions"])
    async def get_transactions(
        search: str = Query("", description="Case-insensitive item name search"),
        game: Optional[str] = Query(None, description="Filter by game"),
        type: Optional[TransactionType] = Query(None, description="Filter by type"),
        min_price: Optional[float] = Query(None, ge=0, description="Minimum price in euros"),
        max_price: Optional[float] = Query(None, ge=0, description="Maximum price in euros"),
        start_date: Optional[date] = Query(None, description="Filter from date"),
        end_date: Optional[date] = Query(None, description="Filter to date"),
        limit: int = Query(API_DEFAULT_LIMIT, ge=1, le=API_MAX_LIMIT, description="Max results"),
    ):
        """Get stored transactions, newest first, with optional filters."""
        filters = TransactionFilters(
            search_term=search,
            game=game,
            type=type,
            min_price=min_price,
            max_price=max_price,
            start_date=start_date,
            end_date=end_date,
        )
        df = transaction_service.get_filtered_data(filters)
        limited = df.head(limit)

        transactions = [
            TransactionResponse(
                id=row["id"],
                item=row["item"],
                game=row["game"],
                date=row["date"].to_pydatetime(),
                price_cents=int(row["price_cents"]),
                type=TransactionType(row["type"]),
            )
            for row in limited.to_dict("records")
        ]

        return TransactionListResponse(transactions=transactions, count=len(transactions), total_matching=len(df))

    @api.get("/api/v1/summary", response_model=SummaryResponse, tags=["Metrics"])
    async def get_summary(
        ids: Optional[List[str]] = Query(None, description="Restrict totals to these transaction ids"),
    ):
        """Get gains, spending and net balance plus breakdowns."""
        df = transaction_service.get_data()
        metrics = metrics_service.calculate_all_metrics(df)
        if ids:
            metrics["totals"] = metrics_service.calculate_totals(df, ids).to_dict()
        return metrics

    @api.delete("/api/v1/transactions", tags=["Transactions"])
    async def delete_transactions():
        """Delete all stored transactions."""
        try:
            deleted = transaction_service.delete_all()
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"deleted": deleted}

    return api


def run_server(host: str = API_HOST, port: int = API_PORT):
    """Serve the API with uvicorn."""
    import uvicorn

    logger.info(f"Starting API on http://{host}:{port} (docs at /api/docs)")
    uvicorn.run(create_app(), host=host, port=port)
