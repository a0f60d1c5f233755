"""
Analytics aggregations, over HTTP and at the service level.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from io import BytesIO

from openpyxl import load_workbook

from glowiva.models.orders import Order
from glowiva.services.analytics import months_in_period, profit_and_loss, sales_by_period


def place(client, headers, product, quantity=1, custom_price=None):
    item = {"product_id": product.id, "quantity": quantity}
    if custom_price is not None:
        item["custom_price"] = custom_price
    return client.post("/api/orders", json={
        "customer_name": "Walk-in",
        "customer_phone": "0800",
        "items": [item],
    }, headers=headers).json()


def backdate(db, order_id, when):
    order = db.get(Order, order_id)
    order.created_at = when
    db.commit()


class TestDashboard:

    def test_empty_store_has_zero_margins(self, client, admin_headers):
        body = client.get("/api/analytics/dashboard", headers=admin_headers).json()

        assert body["today"]["orders"] == 0
        assert body["monthly"]["profit_margin"] == 0.0
        assert body["yearly"]["revenue"] == 0.0

    def test_counts_today_and_inventory(self, client, product, make_product, employee, admin_headers):
        make_product(name="Almost Gone", stock=1)
        place(client, admin_headers, product, quantity=2)

        body = client.get("/api/analytics/dashboard", headers=admin_headers).json()

        assert body["today"]["orders"] == 1
        assert body["today"]["revenue"] == 200.0
        assert body["today"]["profit"] == 80.0
        assert body["monthly"]["profit_margin"] == 40.0
        assert body["inventory"]["total_products"] == 2
        assert body["inventory"]["low_stock_products"] == 1
        assert body["employees"]["total"] == 1

    def test_admin_only(self, client, employee_headers):
        assert client.get("/api/analytics/dashboard", headers=employee_headers).status_code == 403


class TestSalesByPeriod:

    def test_monthly_buckets(self, db, client, product, admin_headers):
        jan = place(client, admin_headers, product)
        feb_1 = place(client, admin_headers, product)
        feb_2 = place(client, admin_headers, product, custom_price=50)
        backdate(db, jan["id"], datetime(2026, 1, 15, tzinfo=timezone.utc))
        backdate(db, feb_1["id"], datetime(2026, 2, 1, tzinfo=timezone.utc))
        backdate(db, feb_2["id"], datetime(2026, 2, 27, tzinfo=timezone.utc))

        rows = sales_by_period(db, "monthly")

        assert [r["period"] for r in rows] == [{"year": 2026, "month": 1}, {"year": 2026, "month": 2}]
        assert rows[1]["total_orders"] == 2
        assert rows[1]["total_revenue"] == Decimal("150.00")
        assert rows[1]["average_order_value"] == Decimal("75.00")
        assert rows[1]["profit"] == Decimal("30.00")

    def test_year_and_month_filter_over_http(self, db, client, product, admin_headers):
        jan = place(client, admin_headers, product)
        feb = place(client, admin_headers, product)
        backdate(db, jan["id"], datetime(2026, 1, 31, 23, 0, tzinfo=timezone.utc))
        backdate(db, feb["id"], datetime(2026, 2, 1, tzinfo=timezone.utc))

        response = client.get(
            "/api/analytics/sales",
            params={"period": "daily", "year": 2026, "month": 1},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == [{
            "period": {"year": 2026, "month": 1, "day": 31},
            "total_orders": 1,
            "total_revenue": 100.0,
            "total_cost": 60.0,
            "average_order_value": 100.0,
            "profit": 40.0,
            "profit_margin": 40.0,
        }]

    def test_unknown_period_rejected(self, client, admin_headers):
        response = client.get("/api/analytics/sales", params={"period": "weekly"}, headers=admin_headers)
        assert response.status_code == 400


class TestProductPerformance:

    def test_ranking_by_revenue_and_quantity(self, client, make_product, admin_headers):
        serum = make_product(name="Serum", cost="60.00", selling="100.00")
        balm = make_product(name="Balm", cost="2.00", selling="5.00")
        place(client, admin_headers, serum, quantity=1)
        place(client, admin_headers, balm, quantity=10)

        by_revenue = client.get("/api/analytics/products/performance", headers=admin_headers).json()["products"]
        by_quantity = client.get(
            "/api/analytics/products/performance",
            params={"sort_by": "quantity"},
            headers=admin_headers,
        ).json()["products"]

        assert [p["product_name"] for p in by_revenue] == ["Serum", "Balm"]
        assert by_revenue[0]["total_revenue"] == 100.0
        assert by_revenue[0]["profit"] == 40.0
        assert [p["product_name"] for p in by_quantity] == ["Balm", "Serum"]
        assert by_quantity[0]["total_quantity"] == 10

    def test_limit(self, client, make_product, admin_headers):
        for name in ("A", "B", "C"):
            place(client, admin_headers, make_product(name=name))

        response = client.get("/api/analytics/products/performance", params={"limit": 2}, headers=admin_headers)
        assert len(response.json()["products"]) == 2


class TestProfitAndLoss:

    def test_salary_expense_scales_with_period(self, db, client, product, employee, admin_headers):
        order = place(client, admin_headers, product, quantity=10)
        backdate(db, order["id"], datetime(2026, 3, 10, tzinfo=timezone.utc))

        report = profit_and_loss(db, date(2026, 3, 1), date(2026, 4, 15))

        assert report["revenue"]["total_revenue"] == Decimal("1000.00")
        assert report["costs"]["cost_of_goods_sold"] == Decimal("600.00")
        assert report["costs"]["salary_expenses"] == Decimal("20000.00")
        assert report["profit"]["gross_profit"] == Decimal("400.00")
        assert report["profit"]["net_profit"] == Decimal("-19600.00")

    def test_months_in_period(self):
        assert months_in_period(None, None) == 1
        assert months_in_period(date(2026, 1, 1), date(2026, 1, 1)) == 1
        assert months_in_period(date(2026, 1, 1), date(2026, 1, 31)) == 1
        assert months_in_period(date(2026, 1, 1), date(2026, 2, 1)) == 2

    def test_reversed_range_rejected(self, client, admin_headers):
        response = client.get(
            "/api/analytics/profit-loss",
            params={"start_date": "2026-05-01", "end_date": "2026-04-01"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestInventory:

    def test_stock_value_and_low_stock(self, client, make_product, admin_headers):
        make_product(name="Cream", cost="10.00", selling="20.00", stock=3)
        make_product(name="Toner", cost="5.00", selling="8.00", stock=100, category="toner")

        body = client.get("/api/analytics/inventory", headers=admin_headers).json()

        assert body["summary"]["total_products"] == 2
        assert body["summary"]["total_stock_value"] == 530.0
        assert body["summary"]["potential_revenue"] == 860.0
        assert [p["name"] for p in body["low_stock_products"]] == ["Cream"]
        assert {c["category"] for c in body["category_distribution"]} == {"serum", "toner"}


class TestExport:

    def test_export_workbook(self, client, product, admin_headers):
        place(client, admin_headers, product, quantity=2)

        response = client.get("/api/analytics/export", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

        workbook = load_workbook(BytesIO(response.content))
        assert workbook.sheetnames == ["Orders", "Summary"]

        rows = list(workbook["Orders"].iter_rows(values_only=True))
        assert rows[1][4] == "Vitamin C Serum"
        assert rows[1][8] == 200.0

        summary = {row[0]: row[1] for row in workbook["Summary"].iter_rows(values_only=True) if row[0]}
        assert summary["Total Revenue"] == 200.0
        assert summary["Top Performing Product"] == "Vitamin C Serum"

    def test_dated_export_names_the_top_product_of_that_range(self, db, client, make_product, admin_headers):
        serum = make_product(name="Serum", cost="10.00", selling="50.00")
        toner = make_product(name="Toner", cost="10.00", selling="20.00")

        early = place(client, admin_headers, serum, quantity=10)
        backdate(db, early["id"], datetime(2026, 1, 10, 9, tzinfo=timezone.utc))
        late = place(client, admin_headers, toner, quantity=1)
        backdate(db, late["id"], datetime(2026, 2, 10, 9, tzinfo=timezone.utc))

        response = client.get(
            "/api/analytics/export",
            params={"start_date": "2026-02-01", "end_date": "2026-02-28"},
            headers=admin_headers,
        )

        workbook = load_workbook(BytesIO(response.content))
        summary = {row[0]: row[1] for row in workbook["Summary"].iter_rows(values_only=True) if row[0]}
        assert summary["Total Revenue"] == 20.0
        assert summary["Top Performing Product"] == "Toner"
