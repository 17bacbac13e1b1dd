"""Stock report endpoints."""

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import get_app_settings, get_stock_reports_use_case
from stockledger.application.dto.responses import (
    ErrorResponse,
    ProductReportResponse,
    StockValueResponse,
)
from stockledger.application.use_cases import StockReportsUseCase
from stockledger.config import Settings

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/stock-value", response_model=StockValueResponse)
async def stock_value(
    use_case: StockReportsUseCase = Depends(get_stock_reports_use_case),
) -> StockValueResponse:
    """Total value of stock on hand (quantity x unit price)."""
    return await use_case.stock_value()


@router.get(
    "/expiring-soon",
    response_model=ProductReportResponse,
    responses={422: {"model": ErrorResponse}},
)
async def expiring_soon(
    window_days: int | None = Query(default=None, ge=0, le=3650),
    use_case: StockReportsUseCase = Depends(get_stock_reports_use_case),
    settings: Settings = Depends(get_app_settings),
) -> ProductReportResponse:
    """Perishables expiring after now and within ``window_days``."""
    if window_days is None:
        window_days = settings.inventory.expiring_window_days
    return await use_case.expiring_soon(window_days)


@router.get("/expired", response_model=ProductReportResponse)
async def expired(
    use_case: StockReportsUseCase = Depends(get_stock_reports_use_case),
) -> ProductReportResponse:
    """Perishables whose expiration date has passed."""
    return await use_case.expired()


@router.get("/low-stock", response_model=ProductReportResponse)
async def low_stock(
    use_case: StockReportsUseCase = Depends(get_stock_reports_use_case),
) -> ProductReportResponse:
    """Products whose quantity is below their minimum."""
    return await use_case.low_stock()
