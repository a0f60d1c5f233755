# =========================================================
# ANALYTICS AGGREGATIONS
#
# Read-only and recomputed on every request.
# Margins on zero revenue are 0.
# =========================================================

import math
from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from glowiva.core.money import ZERO, money, percentage, to_decimal
from glowiva.models.employees import Employee
from glowiva.models.order_items import OrderItem
from glowiva.models.orders import Order
from glowiva.models.products import Product
from glowiva.services.commission import monthly_base_salary

PERIODS = ("daily", "monthly", "yearly")
PERFORMANCE_SORT_KEYS = ("revenue", "quantity", "profit")
DAYS_PER_BILLING_MONTH = 30


# =========================================================
# DATE HELPERS
# =========================================================
def day_bounds(start_date: date | None, end_date: date | None):
    start_dt = (
        datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        if start_date else None
    )
    end_dt = (
        datetime.combine(end_date, time.max, tzinfo=timezone.utc)
        if end_date else None
    )
    return start_dt, end_dt


def in_window(query, start: datetime | None, end: datetime | None):
    if start is not None:
        query = query.filter(Order.created_at >= start)
    if end is not None:
        query = query.filter(Order.created_at <= end)
    return query


# =========================================================
# CORE ORDER SUMMARY CALCULATION
# =========================================================
def summarize_orders(db: Session, start: datetime | None = None, end: datetime | None = None) -> dict:
    total_orders, revenue, cost = in_window(
        db.query(
            func.count(Order.id),
            func.coalesce(func.sum(Order.total), 0),
            func.coalesce(func.sum(Order.total_cost), 0),
        ),
        start,
        end,
    ).one()

    revenue = money(revenue)
    cost = money(cost)
    profit = revenue - cost

    return {
        "orders": total_orders or 0,
        "revenue": revenue,
        "cost": cost,
        "profit": profit,
        "profit_margin": percentage(profit, revenue),
    }


def low_stock_filter():
    return [Product.is_active.is_(True), Product.stock <= Product.min_stock]


# =========================================================
# DASHBOARD SNAPSHOT
# =========================================================
def dashboard_snapshot(db: Session, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)

    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_today.replace(day=1)
    start_of_year = start_of_month.replace(month=1)

    today = summarize_orders(db, start_of_today)

    total_products = (
        db.query(func.count(Product.id))
        .filter(Product.is_active.is_(True))
        .scalar()
    )
    low_stock_products = (
        db.query(func.count(Product.id))
        .filter(*low_stock_filter())
        .scalar()
    )
    total_employees = (
        db.query(func.count(Employee.id))
        .filter(Employee.is_active.is_(True))
        .scalar()
    )

    return {
        "today": {
            "orders": today["orders"],
            "revenue": today["revenue"],
            "profit": today["profit"],
        },
        "monthly": summarize_orders(db, start_of_month),
        "yearly": summarize_orders(db, start_of_year),
        "inventory": {
            "total_products": total_products or 0,
            "low_stock_products": low_stock_products or 0,
        },
        "employees": {
            "total": total_employees or 0,
        },
    }


# =========================================================
# SALES BY PERIOD
# =========================================================
def _bucket_key(created_at: datetime, period: str) -> tuple:
    if period == "daily":
        return created_at.year, created_at.month, created_at.day
    if period == "yearly":
        return (created_at.year,)
    return created_at.year, created_at.month


def _bucket_label(key: tuple) -> dict:
    return dict(zip(("year", "month", "day"), key))


def sales_by_period(
    db: Session,
    period: str = "monthly",
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    rows = (
        in_window(db.query(Order.created_at, Order.total, Order.total_cost), start, end)
        .order_by(Order.created_at.asc())
        .all()
    )

    buckets: "OrderedDict[tuple, dict]" = OrderedDict()

    for created_at, total, total_cost in rows:
        key = _bucket_key(created_at, period)
        bucket = buckets.setdefault(key, {"orders": 0, "revenue": ZERO, "cost": ZERO})
        bucket["orders"] += 1
        bucket["revenue"] += to_decimal(total)
        bucket["cost"] += to_decimal(total_cost)

    results = []
    for key in sorted(buckets):
        bucket = buckets[key]
        revenue = money(bucket["revenue"])
        cost = money(bucket["cost"])
        profit = revenue - cost

        results.append({
            "period": _bucket_label(key),
            "total_orders": bucket["orders"],
            "total_revenue": revenue,
            "total_cost": cost,
            "average_order_value": money(revenue / bucket["orders"]),
            "profit": profit,
            "profit_margin": percentage(profit, revenue),
        })

    return results


def year_month_range(year: int | None, month: int | None):
    """Translate ?year=&month= into an inclusive window, or (None, None)."""
    if not year:
        return None, None
    if month:
        start = datetime(year, month, 1, tzinfo=timezone.utc)
        end = datetime(year + (month == 12), month % 12 + 1, 1, tzinfo=timezone.utc)
    else:
        start = datetime(year, 1, 1, tzinfo=timezone.utc)
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    return start, end - timedelta(microseconds=1)


# =========================================================
# PRODUCT PERFORMANCE
# =========================================================
def product_performance(
    db: Session,
    sort_by: str = "revenue",
    limit: int = 10,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    revenue_sum = func.sum(OrderItem.quantity * OrderItem.price_at_time)
    cost_sum = func.sum(OrderItem.quantity * OrderItem.cost_at_time)

    total_quantity = func.coalesce(func.sum(OrderItem.quantity), 0).label("total_quantity")
    total_revenue = func.coalesce(revenue_sum, 0).label("total_revenue")
    total_cost = func.coalesce(cost_sum, 0).label("total_cost")
    profit = (func.coalesce(revenue_sum, 0) - func.coalesce(cost_sum, 0)).label("profit")

    sort_column = {
        "quantity": total_quantity,
        "profit": profit,
    }.get(sort_by, total_revenue)

    query = (
        db.query(
            Product.id.label("product_id"),
            Product.name.label("product_name"),
            Product.sku,
            Product.category,
            total_quantity,
            total_revenue,
            total_cost,
            profit,
            func.count(OrderItem.id).label("order_count"),
        )
        .join(OrderItem, OrderItem.product_id == Product.id)
    )

    if start is not None or end is not None:
        query = in_window(query.join(Order, Order.id == OrderItem.order_id), start, end)

    rows = (
        query.group_by(Product.id, Product.name, Product.sku, Product.category)
        .order_by(sort_column.desc(), Product.id.asc())
        .limit(limit)
        .all()
    )

    results = []
    for row in rows:
        revenue = money(row.total_revenue)
        cost = money(row.total_cost)

        results.append({
            "product_id": row.product_id,
            "product_name": row.product_name,
            "sku": row.sku,
            "category": row.category,
            "total_quantity": int(row.total_quantity or 0),
            "total_revenue": revenue,
            "total_cost": cost,
            "profit": revenue - cost,
            "profit_margin": percentage(revenue - cost, revenue),
            "order_count": row.order_count,
        })

    return results


# =========================================================
# PROFIT & LOSS
# =========================================================
def months_in_period(start_date: date | None, end_date: date | None) -> int:
    if not (start_date and end_date):
        return 1
    days = (end_date - start_date).days
    return max(1, math.ceil(days / DAYS_PER_BILLING_MONTH))


def profit_and_loss(db: Session, start_date: date | None = None, end_date: date | None = None) -> dict:
    start, end = day_bounds(start_date, end_date)
    summary = summarize_orders(db, start, end)

    employees = db.query(Employee).filter(Employee.is_active.is_(True)).all()
    monthly_salaries = sum((monthly_base_salary(e) for e in employees), ZERO)
    salary_expenses = money(monthly_salaries * months_in_period(start_date, end_date))

    revenue = summary["revenue"]
    gross_profit = revenue - summary["cost"]
    net_profit = gross_profit - salary_expenses

    return {
        "period": {"start_date": start_date, "end_date": end_date},
        "revenue": {
            "total_revenue": revenue,
            "total_orders": summary["orders"],
            "average_order_value": money(revenue / summary["orders"]) if summary["orders"] else ZERO,
        },
        "costs": {
            "cost_of_goods_sold": summary["cost"],
            "salary_expenses": salary_expenses,
            "total_costs": summary["cost"] + salary_expenses,
        },
        "profit": {
            "gross_profit": gross_profit,
            "gross_profit_margin": percentage(gross_profit, revenue),
            "net_profit": net_profit,
            "net_profit_margin": percentage(net_profit, revenue),
        },
    }


# =========================================================
# INVENTORY
# =========================================================
def inventory_report(db: Session) -> dict:
    active = Product.is_active.is_(True)

    total_products = db.query(func.count(Product.id)).filter(active).scalar() or 0

    stock_value, selling_value = (
        db.query(
            func.coalesce(func.sum(Product.stock * Product.cost_price), 0),
            func.coalesce(func.sum(Product.stock * Product.selling_price), 0),
        )
        .filter(active)
        .one()
    )

    low_stock = (
        db.query(Product)
        .filter(*low_stock_filter())
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )

    categories = (
        db.query(
            Product.category,
            func.count(Product.id).label("count"),
            func.coalesce(func.sum(Product.stock), 0).label("total_stock"),
            func.coalesce(func.sum(Product.stock * Product.cost_price), 0).label("stock_value"),
        )
        .filter(active)
        .group_by(Product.category)
        .order_by(Product.category.asc())
        .all()
    )

    return {
        "summary": {
            "total_products": total_products,
            "low_stock_count": len(low_stock),
            "total_stock_value": money(stock_value),
            "potential_revenue": money(selling_value),
        },
        "low_stock_products": [
            {
                "id": p.id,
                "name": p.name,
                "sku": p.sku,
                "current_stock": p.stock,
                "min_stock": p.min_stock,
                "category": p.category,
            }
            for p in low_stock
        ],
        "category_distribution": [
            {
                "category": row.category,
                "count": row.count,
                "total_stock": int(row.total_stock or 0),
                "stock_value": money(row.stock_value),
            }
            for row in categories
        ],
    }
