from datetime import date
from io import BytesIO

from openpyxl import Workbook
from sqlalchemy.orm import Session, selectinload

from glowiva.models.order_items import OrderItem
from glowiva.models.orders import Order
from glowiva.services.analytics import in_window, day_bounds, product_performance, summarize_orders

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(start_date: date | None, end_date: date | None) -> str:
    if start_date and end_date:
        return f"sales_{start_date}_to_{end_date}.xlsx"
    return "sales_all_time.xlsx"


# =========================================================
# EXCEL BUILDER
# =========================================================
def build_sales_workbook(db: Session, start_date: date | None = None, end_date: date | None = None) -> BytesIO:
    start, end = day_bounds(start_date, end_date)

    orders = (
        in_window(db.query(Order), start, end)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .order_by(Order.created_at.asc())
        .all()
    )

    workbook = Workbook()

    # =======================
    # SHEET 1 - ORDER LINES
    # =======================
    sheet = workbook.active
    sheet.title = "Orders"

    sheet.append([
        "Date",
        "Order Number",
        "Customer",
        "Status",
        "Product",
        "Quantity",
        "Unit Price",
        "Unit Cost",
        "Line Total",
        "Order Total",
    ])

    for order in orders:
        for item in order.items:
            sheet.append([
                order.created_at.strftime("%Y-%m-%d"),
                order.order_number,
                order.customer_name,
                order.status,
                item.product_name or "Deleted product",
                item.quantity,
                float(item.price_at_time),
                float(item.cost_at_time),
                float(item.line_total),
                float(order.total),
            ])

    # =======================
    # SHEET 2 - SUMMARY
    # =======================
    summary = workbook.create_sheet(title="Summary")
    totals = summarize_orders(db, start, end)

    period = f"{start_date} to {end_date}" if start_date and end_date else "All time"
    summary.append(["Period", period])
    summary.append([])
    summary.append(["Total Orders", totals["orders"]])
    summary.append(["Total Revenue", float(totals["revenue"])])
    summary.append(["Total Cost", float(totals["cost"])])
    summary.append(["Total Profit", float(totals["profit"])])
    summary.append(["Profit Margin (%)", float(totals["profit_margin"])])

    top = product_performance(db, sort_by="revenue", limit=1, start=start, end=end)
    summary.append(["Top Performing Product", top[0]["product_name"] if top else "N/A"])

    output = BytesIO()
    workbook.save(output)
    output.seek(0)
    return output
