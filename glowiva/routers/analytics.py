# =========================================================
# ANALYTICS ROUTER (ADMIN ONLY)
#
# Dashboard, sales by period, product performance,
# profit & loss, inventory and the Excel export.
# =========================================================

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from glowiva.database import get_db
from glowiva.core.auth import Principal, get_admin_user
from glowiva.core.errors import ValidationError
from glowiva.core.rate_limiter import limiter
from glowiva.services.analytics import (
    PERFORMANCE_SORT_KEYS,
    PERIODS,
    dashboard_snapshot,
    day_bounds,
    inventory_report,
    product_performance,
    profit_and_loss,
    sales_by_period,
    year_month_range,
)
from glowiva.services.exports import XLSX_MEDIA_TYPE, build_sales_workbook, export_filename

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _validate_range(start_date: date | None, end_date: date | None):
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date cannot be after end_date")


@router.get("/dashboard")
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    return dashboard_snapshot(db)


@router.get("/sales")
def get_sales_analytics(
    period: Literal[PERIODS] = "monthly",
    year: int | None = Query(None, ge=2000, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    _validate_range(start_date, end_date)

    # An explicit date range wins over year/month
    if start_date or end_date:
        start, end = day_bounds(start_date, end_date)
    else:
        start, end = year_month_range(year, month)

    return {
        "period": period,
        "data": sales_by_period(db, period, start, end),
    }


@router.get("/products/performance")
def get_product_performance(
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal[PERFORMANCE_SORT_KEYS] = "revenue",
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    return {
        "sort_by": sort_by,
        "products": product_performance(db, sort_by, limit),
    }


@router.get("/profit-loss")
def get_profit_loss(
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    _validate_range(start_date, end_date)
    return profit_and_loss(db, start_date, end_date)


@router.get("/inventory")
def get_inventory(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    return inventory_report(db)


@router.get("/export")
@limiter.limit("10/minute")
def export_sales(
    request: Request,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    _validate_range(start_date, end_date)

    output = build_sales_workbook(db, start_date, end_date)
    filename = export_filename(start_date, end_date)

    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
