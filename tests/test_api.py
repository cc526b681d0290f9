"""HTTP tests through FastAPI's TestClient."""

import pytest

import routes.stock
from models.log import Log
from tests.helpers import receive


def _move(client, headers, **body):
    return client.post("/stock/moves", json=body, headers=headers)


class TestMoves:

    def test_receipt_created(self, client, seed, staff_headers):
        res = _move(client, staff_headers, product_id=seed.product_id, quantity=100,
                    type="RECEIPT", destination_location_id=seed.shelf_id)

        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "DONE"
        assert data["reference"].startswith("WH/IN/")
        assert data["user_id"] == seed.staff_id
        assert data["lines"][0]["done_qty"] == 100

        balances = client.get(f"/stock/balances/{seed.product_id}", headers=staff_headers).json()
        assert balances["on_hand"] == 100
        assert [(b["location_id"], b["quantity"]) for b in balances["balances"]] == [(seed.shelf_id, 100)]

    def test_move_by_sku_as_typed_at_creation(self, client, seed, staff_headers, admin_headers):
        client.post("/products", headers=admin_headers, json={"sku": "sku-z", "name": "Zed"})

        res = _move(client, staff_headers, sku="sku-z", quantity=5, type="RECEIPT",
                    destination_location_id=seed.shelf_id)

        assert res.status_code == 201, res.json()
        product_id = res.json()["lines"][0]["product_id"]
        assert client.get(f"/products/{product_id}", headers=staff_headers).json()["on_hand"] == 5

    def test_balances_list_every_location(self, client, seed, staff_headers, session_factory):
        with session_factory() as session:
            receive(session, seed, 9)
        _move(client, staff_headers, product_id=seed.product_id, quantity=4, type="DELIVERY",
              source_location_id=seed.shelf_id, destination_location_id=seed.customer_id)

        body = client.get(f"/stock/balances/{seed.product_id}", headers=staff_headers).json()

        assert body["on_hand"] == 5
        rows = {b["location_name"]: (b["location_type"], b["quantity"]) for b in body["balances"]}
        assert rows == {"WH/Shelf 1": ("INTERNAL", 5), "Partners/Customers": ("CUSTOMER", 4)}

    def test_insufficient_stock_is_409_with_location(self, client, seed, staff_headers, session_factory):
        with session_factory() as session:
            receive(session, seed, 5)

        res = _move(client, staff_headers, sku="SKU-X", quantity=6, type="DELIVERY",
                    source_location_id=seed.shelf_id, destination_location_id=seed.customer_id)

        assert res.status_code == 409
        body = res.json()
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert body["location_id"] == seed.shelf_id
        assert body["available"] == 5
        assert body["requested"] == 6

    def test_failed_move_is_audited(self, client, seed, staff_headers, session_factory):
        _move(client, staff_headers, sku="NOPE", quantity=1, type="RECEIPT",
              destination_location_id=seed.shelf_id)

        with session_factory() as session:
            log = session.query(Log).filter(Log.action == "STOCK_MOVE").one()
            assert log.status == "FAIL"
            assert log.meta["code"] == "PRODUCT_NOT_FOUND"

    @pytest.mark.parametrize("body, status, code", [
        ({"sku": "NOPE", "quantity": 1, "type": "RECEIPT"}, 404, "PRODUCT_NOT_FOUND"),
        ({"sku": "SKU-X", "quantity": 0, "type": "RECEIPT"}, 400, "INVALID_QUANTITY"),
        ({"sku": "SKU-X", "quantity": -3, "type": "RECEIPT"}, 400, "INVALID_QUANTITY"),
        ({"sku": "SKU-X", "quantity": 1, "type": "RECEIPT", "destination_location_id": 9999}, 404,
         "LOCATION_NOT_FOUND"),
    ])
    def test_rejections(self, client, seed, staff_headers, body, status, code):
        body.setdefault("destination_location_id", seed.shelf_id)
        res = _move(client, staff_headers, **body)
        assert res.status_code == status
        assert res.json()["code"] == code

    def test_unknown_type_fails_validation(self, client, seed, staff_headers):
        res = _move(client, staff_headers, sku="SKU-X", quantity=1, type="RETURN",
                    destination_location_id=seed.shelf_id)
        assert res.status_code == 422

    def test_requires_token(self, client, seed):
        res = _move(client, {}, sku="SKU-X", quantity=1, type="RECEIPT",
                    destination_location_id=seed.shelf_id)
        assert res.status_code in (401, 403)

    def test_viewer_cannot_move_stock(self, client, seed, viewer_headers):
        res = _move(client, viewer_headers, sku="SKU-X", quantity=1, type="RECEIPT",
                    destination_location_id=seed.shelf_id)
        assert res.status_code == 403

    def test_unexpected_error_is_generic_500(self, client, seed, staff_headers, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(routes.stock, "record_movement", boom)
        res = _move(client, staff_headers, sku="SKU-X", quantity=1, type="RECEIPT",
                    destination_location_id=seed.shelf_id)

        assert res.status_code == 500
        assert res.json() == {"detail": "Internal server error", "code": "INTERNAL_ERROR"}


class TestOperations:

    def test_staged_delivery_lifecycle(self, client, seed, staff_headers, admin_headers, session_factory):
        with session_factory() as session:
            receive(session, seed, 10)

        res = client.post("/operations", headers=staff_headers, json={
            "type": "DELIVERY",
            "source_location_id": seed.shelf_id,
            "destination_location_id": seed.customer_id,
            "lines": [{"sku": "SKU-X", "demand_qty": 4}],
        })
        assert res.status_code == 201
        op = res.json()
        assert op["status"] == "DRAFT"
        line_id = op["lines"][0]["id"]

        res = client.patch(f"/operations/{op['id']}/lines/{line_id}", headers=staff_headers, json={"done_qty": 4})
        assert res.json()["lines"][0]["done_qty"] == 4

        for status in ("WAITING", "READY", "DONE"):
            res = client.patch(f"/operations/{op['id']}/status", headers=staff_headers, json={"status": status})
            assert res.status_code == 200, res.json()
        assert res.json()["done_at"] is not None

        product = client.get(f"/products/{seed.product_id}", headers=staff_headers).json()
        assert product["on_hand"] == 6

        res = client.delete(f"/operations/{op['id']}", headers=admin_headers)
        assert res.status_code == 409
        assert res.json()["code"] == "INVALID_STATE"

    def test_invalid_transition_is_409(self, client, seed, staff_headers):
        op = client.post("/operations", headers=staff_headers, json={
            "type": "RECEIPT", "destination_location_id": seed.shelf_id,
            "lines": [{"product_id": seed.product_id, "demand_qty": 1}],
        }).json()
        res = client.patch(f"/operations/{op['id']}/status", headers=staff_headers, json={"status": "DONE"})
        assert res.status_code == 409

    def test_delete_draft_needs_manager(self, client, seed, staff_headers, admin_headers):
        op = client.post("/operations", headers=staff_headers, json={
            "type": "RECEIPT", "destination_location_id": seed.shelf_id,
            "lines": [{"product_id": seed.product_id, "demand_qty": 1}],
        }).json()

        assert client.delete(f"/operations/{op['id']}", headers=staff_headers).status_code == 403
        res = client.delete(f"/operations/{op['id']}", headers=admin_headers)
        assert res.status_code == 200
        assert client.get(f"/operations/{op['id']}", headers=staff_headers).status_code == 404


class TestProducts:

    def test_create_normalizes_sku_and_starts_empty(self, client, seed, admin_headers):
        res = client.post("/products", headers=admin_headers,
                          json={"sku": " sku-z ", "name": "Zed", "cost_price": 1, "selling_price": 2})
        assert res.status_code == 201
        assert res.json()["sku"] == "SKU-Z"
        assert res.json()["on_hand"] == 0

    def test_duplicate_sku(self, client, seed, admin_headers):
        res = client.post("/products", headers=admin_headers, json={"sku": "sku-x", "name": "Again"})
        assert res.status_code == 409

    def test_staff_cannot_create(self, client, seed, staff_headers):
        res = client.post("/products", headers=staff_headers, json={"sku": "SKU-Q", "name": "Q"})
        assert res.status_code == 403

    def test_edit_ignores_on_hand(self, client, seed, admin_headers):
        res = client.patch(f"/products/{seed.product_id}", headers=admin_headers,
                           json={"name": "Widget X2", "on_hand": 500})
        assert res.status_code == 200
        assert res.json()["name"] == "Widget X2"
        assert res.json()["on_hand"] == 0

    def test_reconcile_with_no_drift(self, client, seed, admin_headers, session_factory):
        with session_factory() as session:
            receive(session, seed, 3)
        res = client.post("/products/reconcile", headers=admin_headers)
        assert res.status_code == 200
        assert res.json() == {"checked": 2, "drifted": []}


class TestSettings:

    def test_internal_location_requires_warehouse(self, client, seed, admin_headers):
        res = client.post("/settings/locations", headers=admin_headers,
                          json={"name": "Floating", "type": "INTERNAL"})
        assert res.status_code == 400

    def test_virtual_location_without_warehouse(self, client, seed, admin_headers):
        res = client.post("/settings/locations", headers=admin_headers,
                          json={"name": "Scrap", "type": "INVENTORY_LOSS"})
        assert res.status_code == 201
        assert res.json()["is_virtual"] is True

    def test_duplicate_warehouse_code(self, client, seed, admin_headers):
        res = client.post("/settings/warehouses", headers=admin_headers,
                          json={"name": "Other", "short_code": "wh"})
        assert res.status_code == 400

    def test_contact(self, client, seed, admin_headers):
        res = client.post("/settings/contacts", headers=admin_headers,
                          json={"name": "Acme", "type": "VENDOR", "email": "buy@acme.com"})
        assert res.status_code == 201
