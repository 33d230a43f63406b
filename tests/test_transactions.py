from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from fintools.models.asset import Asset
from fintools.models.transaction import Transaction, TransactionType
from fintools.services import transaction_service
from tests.helpers import API, bearer, money


def _laptop_purchase(**overrides):
    payload = {
        "type": "expense",
        "amount": "1200",
        "description": "Office laptop",
        "category": "Technology",
        "date": "2026-03-10",
        "isAsset": True,
        "assetDetails": {"name": "ThinkPad X1", "condition": "Excellent"},
    }
    payload.update(overrides)
    return payload


class TestAssetLinkedTransactions:
    def test_expense_asset_creates_linked_asset(self, client, founder_headers, db_session):
        resp = client.post(f"{API}/transactions", json=_laptop_purchase(), headers=founder_headers)
        assert resp.status_code == 201
        txn = resp.json()["data"]
        assert txn["relatedEntity"]["kind"] == "Asset"

        asset = db_session.query(Asset).filter(Asset.id == txn["relatedEntity"]["id"]).one()
        assert asset.name == "ThinkPad X1"
        assert asset.category.value == "Technology"
        assert asset.purchase_value == Decimal("1200")
        assert asset.current_value == Decimal("1200")
        assert asset.condition.value == "Excellent"

    def test_free_form_category_falls_back_to_other(self, client, founder_headers, db_session):
        resp = client.post(
            f"{API}/transactions",
            json=_laptop_purchase(category="Office", assetDetails={}),
            headers=founder_headers,
        )
        asset_id = resp.json()["data"]["relatedEntity"]["id"]
        asset = db_session.query(Asset).filter(Asset.id == asset_id).one()
        assert asset.category.value == "Other"
        assert asset.name == "Office laptop"

    def test_income_never_creates_asset(self, client, founder_headers, db_session):
        resp = client.post(
            f"{API}/transactions",
            json=_laptop_purchase(type="income"),
            headers=founder_headers,
        )
        assert resp.status_code == 201
        assert "relatedEntity" not in resp.json()["data"]
        assert db_session.query(Asset).count() == 0

    def test_update_refreshes_linked_asset(self, client, founder_headers, db_session):
        txn = client.post(f"{API}/transactions", json=_laptop_purchase(), headers=founder_headers).json()["data"]

        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"amount": "1100", "isAsset": True, "assetDetails": {"currentValue": "1000"}},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        asset = db_session.query(Asset).one()
        assert asset.current_value == Decimal("1000")
        assert asset.purchase_value == Decimal("1100")

    def test_update_can_attach_asset_later(self, client, founder_headers, db_session):
        txn = client.post(
            f"{API}/transactions",
            json=_laptop_purchase(isAsset=False, assetDetails=None),
            headers=founder_headers,
        ).json()["data"]
        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"isAsset": True, "assetDetails": {"name": "Monitor"}},
            headers=founder_headers,
        )
        assert resp.json()["data"]["relatedEntity"]["kind"] == "Asset"
        assert db_session.query(Asset).one().name == "Monitor"

    def test_failed_asset_rolls_back_transaction(self, db_session, founder, monkeypatch):
        monkeypatch.setattr(transaction_service, "_new_asset", lambda details, txn: Asset(name=None))

        with pytest.raises(SQLAlchemyError):
            transaction_service.create_transaction(
                db_session,
                founder,
                {"type": TransactionType.expense, "amount": Decimal("10"),
                 "description": "Desk", "category": "Furniture"},
                is_asset=True,
                asset_details={},
            )
        assert db_session.query(Transaction).count() == 0
        assert db_session.query(Asset).count() == 0


class TestOwnership:
    def test_other_user_cannot_update(self, client, founder_headers, second_founder):
        txn = client.post(f"{API}/transactions", json=_laptop_purchase(), headers=founder_headers).json()["data"]
        resp = client.put(
            f"{API}/transactions/{txn['id']}",
            json={"notes": "mine now"},
            headers=bearer(second_founder),
        )
        assert resp.status_code == 403
        assert resp.json()["error"] == "User not authorized"

    def test_other_user_cannot_delete(self, client, founder_headers, second_founder):
        txn = client.post(f"{API}/transactions", json=_laptop_purchase(), headers=founder_headers).json()["data"]
        resp = client.delete(f"{API}/transactions/{txn['id']}", headers=bearer(second_founder))
        assert resp.status_code == 403

    def test_delete_keeps_asset(self, client, founder_headers, db_session):
        txn = client.post(f"{API}/transactions", json=_laptop_purchase(), headers=founder_headers).json()["data"]
        resp = client.delete(f"{API}/transactions/{txn['id']}", headers=founder_headers)
        assert resp.status_code == 200
        assert db_session.query(Transaction).count() == 0
        assert db_session.query(Asset).count() == 1


class TestListTransactions:
    def test_filters_by_type_and_account(self, client, founder_headers):
        client.post(f"{API}/transactions", json={
            "type": "income", "amount": "50", "description": "Tip", "category": "Misc",
            "account": "petty-cash", "date": "2026-01-02",
        }, headers=founder_headers)
        client.post(f"{API}/transactions", json={
            "type": "income", "amount": "500", "description": "Invoice 7", "category": "Sales",
            "date": "2026-01-05",
        }, headers=founder_headers)

        resp = client.get(f"{API}/transactions", params={"account": "petty-cash"}, headers=founder_headers)
        body = resp.json()
        assert body["count"] == 1
        assert body["data"][0]["account"] == "petty-cash"

        resp = client.get(f"{API}/transactions", params={"type": "income"}, headers=founder_headers)
        assert [t["description"] for t in resp.json()["data"]] == ["Invoice 7", "Tip"]
        assert money(resp.json()["data"][0]["amount"]) == money("500")

    def test_unknown_transaction(self, client, founder_headers):
        resp = client.get(f"{API}/transactions/TXN-NOPE", headers=founder_headers)
        assert resp.status_code == 404
