from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from fintools.common.exceptions import ConflictError, ValidationFailed
from fintools.models.expense import Expense
from fintools.models.product import Product, ProductCategory, prorate_asset_value
from fintools.models.revenue import Revenue
from fintools.services import product_service
from tests.helpers import API, money


def _create_product(client, headers, **overrides):
    payload = {
        "name": "Galaxy S23",
        "category": "Phone",
        "purchasePrice": "100",
        "quantity": 5,
    }
    payload.update(overrides)
    resp = client.post(f"{API}/products", json=payload, headers=headers)
    assert resp.status_code == 201, resp.json()
    return resp.json()["data"]


class TestCreateAndUpdate:
    def test_asset_value_is_derived(self, client, founder_headers):
        product = _create_product(client, founder_headers, assetValue="1")
        assert money(product["assetValue"]) == money("500")
        assert product["inStock"] is True

    def test_quantity_change_recomputes_asset_value(self, client, founder_headers):
        product = _create_product(client, founder_headers)
        resp = client.put(f"{API}/products/{product['id']}", json={"quantity": 3}, headers=founder_headers)
        assert resp.status_code == 200
        assert money(resp.json()["data"]["assetValue"]) == money("300")

    def test_sold_product_price_is_frozen(self, client, founder_headers):
        product = _create_product(client, founder_headers, quantity=1)
        client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "150", "soldDate": "2026-04-01"},
            headers=founder_headers,
        )
        resp = client.put(f"{API}/products/{product['id']}", json={"purchasePrice": "90"}, headers=founder_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Cannot change quantity or price of a sold product"

    def test_related_expense_must_exist(self, client, founder_headers):
        resp = client.post(
            f"{API}/products",
            json={"name": "X", "category": "Other", "purchasePrice": "1", "relatedExpenseId": "EXP-NOPE"},
            headers=founder_headers,
        )
        assert resp.status_code == 404

    def test_list_filters_in_stock(self, client, founder_headers):
        sold = _create_product(client, founder_headers, name="Old", quantity=1)
        _create_product(client, founder_headers, name="New")
        client.put(
            f"{API}/products/{sold['id']}/mark-sold",
            json={"sellingPrice": "10", "soldDate": "2026-04-01"},
            headers=founder_headers,
        )
        resp = client.get(f"{API}/products", params={"inStock": "true"}, headers=founder_headers)
        assert [p["name"] for p in resp.json()["data"]] == ["New"]
        assert resp.json()["count"] == 1


class TestMarkSold:
    def test_full_sale_closes_product(self, client, founder, founder_headers):
        product = _create_product(client, founder_headers, quantity=1)
        resp = client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "150", "soldDate": "2026-04-01"},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        data = resp.json()["data"]

        assert len(data["products"]) == 1
        closed = data["products"][0]
        assert closed["id"] == product["id"]
        assert closed["inStock"] is False
        assert closed["soldDate"] == "2026-04-01"
        assert money(closed["soldPrice"]) == money("150")

        revenue = data["revenue"]
        assert revenue["description"] == "Sale of 1 Galaxy S23"
        assert revenue["category"] == "Sales"
        assert revenue["date"] == "2026-04-01"
        assert revenue["notes"] == "Revenue from selling Galaxy S23"
        assert revenue["receivedById"] == founder.id
        assert money(revenue["amount"]) == money("150")

    def test_partial_sale_splits_product(self, client, founder_headers, db_session):
        product = _create_product(client, founder_headers, serialNumber="SN-1")
        resp = client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "150", "soldDate": "2026-04-02", "quantityToSell": 2, "notes": "walk-in"},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        remaining, sold = resp.json()["data"]["products"]

        assert remaining["id"] == product["id"]
        assert remaining["quantity"] == 3
        assert remaining["inStock"] is True
        assert money(remaining["assetValue"]) == money("300")

        assert sold["id"] != product["id"]
        assert sold["quantity"] == 2
        assert sold["inStock"] is False
        assert sold["serialNumber"] == "SN-1"
        assert sold["notes"] == "walk-in"
        assert money(sold["assetValue"]) == money("200")

        revenue = resp.json()["data"]["revenue"]
        assert money(revenue["amount"]) == money("300")
        assert revenue["description"] == "Sale of 2 Galaxy S23"
        assert revenue["notes"] == "walk-in"
        assert db_session.query(Product).count() == 2
        assert db_session.query(Revenue).count() == 1

    def test_cannot_sell_more_than_available(self, client, founder_headers, db_session):
        product = _create_product(client, founder_headers)
        resp = client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "150", "soldDate": "2026-04-02", "quantity": 6},
            headers=founder_headers,
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": ["Only 5 item(s) available"]}
        assert db_session.query(Revenue).count() == 0

    def test_cannot_sell_twice(self, client, founder_headers):
        product = _create_product(client, founder_headers, quantity=1)
        sale = {"sellingPrice": "150", "soldDate": "2026-04-02"}
        client.put(f"{API}/products/{product['id']}/mark-sold", json=sale, headers=founder_headers)
        resp = client.put(f"{API}/products/{product['id']}/mark-sold", json=sale, headers=founder_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Product is already marked as sold"

    def test_selling_price_must_be_positive(self, client, founder_headers):
        product = _create_product(client, founder_headers)
        resp = client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "0", "soldDate": "2026-04-02"},
            headers=founder_headers,
        )
        assert resp.status_code == 400

    def test_unknown_product(self, client, founder_headers):
        resp = client.put(
            f"{API}/products/PRD-NOPE/mark-sold",
            json={"sellingPrice": "1", "soldDate": "2026-04-02"},
            headers=founder_headers,
        )
        assert resp.status_code == 404


class TestDeleteProduct:
    def test_sold_product_cannot_be_deleted(self, client, founder_headers):
        product = _create_product(client, founder_headers, quantity=1)
        client.put(
            f"{API}/products/{product['id']}/mark-sold",
            json={"sellingPrice": "150", "soldDate": "2026-04-02"},
            headers=founder_headers,
        )
        resp = client.delete(f"{API}/products/{product['id']}", headers=founder_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Cannot delete a product that has been sold"

    def test_last_product_clears_expense_flag(self, client, founder_headers, db_session):
        body = client.post(
            f"{API}/expenses",
            json={"description": "Pixel 8", "amount": "600", "category": "Phone"},
            headers=founder_headers,
        ).json()
        product_id = body["product"]["id"]

        resp = client.delete(f"{API}/products/{product_id}", headers=founder_headers)
        assert resp.status_code == 200
        assert "warnings" not in resp.json()

        expense = db_session.query(Expense).filter(Expense.id == body["data"]["id"]).one()
        assert expense.is_product_created is False

    def test_flag_stays_while_other_products_remain(self, client, founder_headers, db_session):
        body = client.post(
            f"{API}/expenses",
            json={"description": "iPhone 13", "amount": "700", "category": "Phone"},
            headers=founder_headers,
        ).json()
        expense_id = body["data"]["id"]
        sibling = _create_product(client, founder_headers, quantity=1, relatedExpenseId=expense_id)

        resp = client.delete(f"{API}/products/{body['product']['id']}", headers=founder_headers)
        assert resp.status_code == 200

        expense = db_session.query(Expense).filter(Expense.id == expense_id).one()
        assert expense.is_product_created is True
        assert [p.id for p in db_session.query(Product).all()] == [sibling["id"]]

    def test_flag_reset_failure_is_reported_as_warning(self, client, founder_headers, db_session, monkeypatch):
        body = client.post(
            f"{API}/expenses",
            json={"description": "Pixel 7", "amount": "400", "category": "Phone"},
            headers=founder_headers,
        ).json()
        expense_id = body["data"]["id"]

        def broken(*args, **kwargs):
            raise SQLAlchemyError("boom")

        monkeypatch.setattr(product_service, "count_products_for_expense", broken)
        resp = client.delete(f"{API}/products/{body['product']['id']}", headers=founder_headers)

        assert resp.status_code == 200
        assert resp.json()["warnings"] == [f"Product deleted but expense {expense_id} could not be updated"]
        assert db_session.query(Product).count() == 0
        expense = db_session.query(Expense).filter(Expense.id == expense_id).one()
        assert expense.is_product_created is True


class TestFromExpense:
    def test_defaults_come_from_expense(self, client, founder_headers, db_session):
        expense = client.post(
            f"{API}/expenses",
            json={"description": "Printer", "amount": "250", "category": "Equipment", "date": "2026-02-14"},
            headers=founder_headers,
        ).json()["data"]

        resp = client.post(f"{API}/products/from-expense/{expense['id']}", headers=founder_headers)
        assert resp.status_code == 201
        product = resp.json()["data"]
        assert product["category"] == "Other"
        assert product["purchaseDate"] == "2026-02-14"
        assert money(product["purchasePrice"]) == money("250")
        assert product["relatedExpenseId"] == expense["id"]

        refreshed = db_session.query(Expense).filter(Expense.id == expense["id"]).one()
        assert refreshed.is_product_created is True

    def test_overrides_apply(self, client, founder_headers):
        expense = client.post(
            f"{API}/expenses",
            json={"description": "Cases", "amount": "20", "category": "Other"},
            headers=founder_headers,
        ).json()["data"]

        resp = client.post(
            f"{API}/products/from-expense/{expense['id']}",
            json={"name": "Silicone case", "category": "Accessories", "quantity": 10},
            headers=founder_headers,
        )
        product = resp.json()["data"]
        assert product["name"] == "Silicone case"
        assert product["quantity"] == 10
        assert money(product["assetValue"]) == money("200")

    def test_second_product_is_rejected(self, client, founder_headers):
        body = client.post(
            f"{API}/expenses",
            json={"description": "iPhone 15", "amount": "900", "category": "Phone"},
            headers=founder_headers,
        ).json()
        resp = client.post(f"{API}/products/from-expense/{body['data']['id']}", headers=founder_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "A product already exists for this expense"

    def test_unknown_expense(self, client, founder_headers):
        resp = client.post(f"{API}/products/from-expense/EXP-NOPE", headers=founder_headers)
        assert resp.status_code == 404


class TestServiceLevel:
    def test_mark_sold_raises_typed_errors(self, db_session, founder):
        product = product_service.create_product(db_session, founder, {
            "name": "Cable", "category": ProductCategory.ACCESSORIES,
            "purchase_price": Decimal("5"), "quantity": 2,
        })
        with pytest.raises(ValidationFailed):
            product_service.mark_product_sold(db_session, product.id, founder, Decimal("8"), date(2026, 1, 1), 3)

        product_service.mark_product_sold(db_session, product.id, founder, Decimal("8"), date(2026, 1, 1), 2)
        with pytest.raises(ConflictError):
            product_service.mark_product_sold(db_session, product.id, founder, Decimal("8"), date(2026, 1, 1))


@pytest.mark.parametrize("asset_value, quantity, portion, expected", [
    (Decimal("500"), 5, 2, Decimal("200.00")),
    (Decimal("100"), 3, 1, Decimal("33.33")),
    (None, 3, 1, None),
])
def test_prorate_asset_value(asset_value, quantity, portion, expected):
    assert prorate_asset_value(asset_value, quantity, portion) == expected
