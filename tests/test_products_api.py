from glowiva.models.products import Product


def create_payload(**overrides):
    payload = {
        "name": "Niacinamide Serum",
        "category": "serum",
        "cost_price": 100,
        "stock": 12,
    }
    payload.update(overrides)
    return payload


class TestProductCreation:

    def test_selling_price_defaults_to_markup_on_cost(self, client, admin_headers):
        response = client.post("/api/products", json=create_payload(), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["selling_price"] == 150.0
        assert body["cost_price"] == 100.0
        assert body["sku"].startswith("PRD")
        assert body["description"] == "No description provided"

    def test_zero_selling_price_also_falls_back(self, client, admin_headers):
        response = client.post("/api/products", json=create_payload(selling_price=0), headers=admin_headers)
        assert response.json()["selling_price"] == 150.0

    def test_explicit_selling_price_is_kept(self, client, admin_headers):
        response = client.post("/api/products", json=create_payload(selling_price=180), headers=admin_headers)
        assert response.json()["selling_price"] == 180.0

    def test_duplicate_sku_is_rejected(self, client, admin_headers):
        client.post("/api/products", json=create_payload(sku="GLW-1"), headers=admin_headers)
        response = client.post("/api/products", json=create_payload(sku="GLW-1"), headers=admin_headers)

        assert response.status_code == 400
        assert "SKU" in response.json()["message"]

    def test_unknown_category_is_a_validation_error(self, client, admin_headers):
        response = client.post("/api/products", json=create_payload(category="snacks"), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_requires_token(self, client):
        response = client.post("/api/products", json=create_payload())

        assert response.status_code == 401
        assert response.json() == {"message": "No token provided, authorization denied"}

    def test_employees_cannot_create(self, client, employee_headers):
        response = client.post("/api/products", json=create_payload(), headers=employee_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"


class TestProductViews:

    def test_employee_view_hides_cost(self, client, product, employee_headers):
        response = client.get(f"/api/products/{product.id}", headers=employee_headers)

        assert response.status_code == 200
        assert "cost_price" not in response.json()
        assert response.json()["selling_price"] == 100.0

    def test_admin_view_includes_cost_and_profit(self, client, product, admin_headers):
        body = client.get(f"/api/products/{product.id}", headers=admin_headers).json()

        assert body["cost_price"] == 60.0
        assert body["profit"] == 40.0

    def test_low_stock_filter(self, client, make_product, admin_headers):
        make_product(name="Low", stock=2)
        make_product(name="Plenty", stock=50)

        response = client.get("/api/products", params={"low_stock": True}, headers=admin_headers)

        assert [p["name"] for p in response.json()] == ["Low"]
        assert response.json()[0]["is_low_stock"] is True

    def test_missing_product_is_404(self, client, admin_headers):
        response = client.get("/api/products/404", headers=admin_headers)
        assert response.status_code == 404

    def test_categories_are_public(self, client):
        response = client.get("/api/products/meta/categories")

        assert response.status_code == 200
        assert "serum" in response.json()["categories"]


class TestStock:

    def test_subtract_floors_at_zero(self, client, product, admin_headers):
        response = client.patch(
            f"/api/products/{product.id}/stock",
            json={"quantity": 50, "operation": "subtract"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["stock"] == 0

    def test_add_and_set(self, client, product, admin_headers):
        client.patch(f"/api/products/{product.id}/stock", json={"quantity": 5, "operation": "add"}, headers=admin_headers)
        assert client.get(f"/api/products/{product.id}", headers=admin_headers).json()["stock"] == 25

        client.patch(f"/api/products/{product.id}/stock", json={"quantity": 7}, headers=admin_headers)
        assert client.get(f"/api/products/{product.id}", headers=admin_headers).json()["stock"] == 7

    def test_negative_quantity_rejected(self, client, product, admin_headers):
        response = client.patch(
            f"/api/products/{product.id}/stock",
            json={"quantity": -1, "operation": "add"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestProductDeletion:

    def test_unreferenced_product_is_deleted(self, client, db, product, admin_headers):
        product_id = product.id
        response = client.delete(f"/api/products/{product_id}", headers=admin_headers)

        assert response.status_code == 200
        db.expire_all()
        assert db.query(Product).filter(Product.id == product_id).first() is None

    def test_referenced_product_is_deactivated(self, client, db, product, admin_headers):
        client.post("/api/orders", json={
            "customer_name": "Ngozi",
            "customer_phone": "0803",
            "items": [{"product_id": product.id, "quantity": 1}],
        }, headers=admin_headers)

        response = client.delete(f"/api/products/{product.id}", headers=admin_headers)

        assert response.status_code == 200
        db.expire_all()
        assert db.get(Product, product.id).is_active is False
