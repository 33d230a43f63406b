from datetime import date

import pytest

from fintools.services.dashboard_service import DashboardService
from tests.helpers import API, money


def _txn(client, headers, type_, amount, when, account="main"):
    resp = client.post(f"{API}/transactions", json={
        "type": type_, "amount": amount, "description": f"{type_} {amount}",
        "category": "General", "date": when, "account": account,
    }, headers=headers)
    assert resp.status_code == 201, resp.json()


@pytest.fixture
def books(client, founder_headers, second_founder, admin):
    client.post(f"{API}/expenses", json={"description": "Rent", "amount": "1000", "category": "Rental"},
                headers=founder_headers)
    client.post(f"{API}/expenses", json={"description": "Ads", "amount": "250", "category": "Marketing"},
                headers=founder_headers)
    client.post(f"{API}/revenues", json={"description": "Contract", "amount": "4000", "category": "Services"},
                headers=founder_headers)
    client.post(f"{API}/assets", json={
        "name": "Van", "category": "Vehicle", "purchaseValue": "9000", "currentValue": "8000",
        "acquisitionDate": "2025-01-01",
    }, headers=founder_headers)

    _txn(client, founder_headers, "income", "1000", "2026-01-05")
    _txn(client, founder_headers, "expense", "300", "2026-01-20")
    _txn(client, founder_headers, "transfer", "100", "2026-02-03")
    _txn(client, founder_headers, "investment", "500", "2026-02-10", account="savings")
    _txn(client, founder_headers, "transfer", "50", "2026-02-11", account="savings")


class TestSummary:
    def test_totals(self, client, founder_headers, books):
        resp = client.get(f"{API}/dashboard/summary", headers=founder_headers)
        assert resp.status_code == 200
        assert set(resp.json()) == {"success", "data"}
        data = resp.json()["data"]

        assert money(data["totalExpenses"]) == money("1250")
        assert money(data["totalRevenue"]) == money("4000")
        assert money(data["pureProfit"]) == money("2750")
        assert money(data["totalAssets"]) == money("8000")
        # two founders (5000 + 3000); the admin's contribution is not counted
        assert money(data["founderContributions"]) == money("8000")

    def test_transfers_are_debits(self, client, founder_headers, books):
        balance = client.get(f"{API}/dashboard/summary", headers=founder_headers).json()["data"]["cashBalance"]
        assert money(balance["main"]) == money("600")
        assert money(balance["savings"]) == money("450")

    def test_empty_books(self, client, founder_headers):
        data = client.get(f"{API}/dashboard/summary", headers=founder_headers).json()["data"]
        assert money(data["totalExpenses"]) == 0
        assert money(data["pureProfit"]) == 0
        assert data["cashBalance"] == {}


class TestCashFlow:
    def test_monthly_buckets(self, client, founder_headers, books):
        resp = client.get(
            f"{API}/dashboard/cash-flow",
            params={"startDate": "2026-01-01", "endDate": "2026-03-31", "interval": "month"},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        points = resp.json()["data"]
        assert [p["date"] for p in points] == ["2026-01", "2026-02"]

        january, february = points
        assert money(january["income"]) == money("1000")
        assert money(january["expense"]) == money("300")
        assert money(january["netCashFlow"]) == money("700")
        assert money(february["transfer"]) == money("150")
        assert money(february["investment"]) == money("500")
        assert money(february["netCashFlow"]) == 0

    def test_daily_buckets_respect_range(self, client, founder_headers, books):
        resp = client.get(
            f"{API}/dashboard/cash-flow",
            params={"startDate": "2026-02-01", "endDate": "2026-02-10", "interval": "day"},
            headers=founder_headers,
        )
        assert [p["date"] for p in resp.json()["data"]] == ["2026-02-03", "2026-02-10"]

    def test_yearly_bucket(self, client, founder_headers, books):
        resp = client.get(
            f"{API}/dashboard/cash-flow",
            params={"startDate": "2026-01-01", "endDate": "2026-12-31", "interval": "year"},
            headers=founder_headers,
        )
        points = resp.json()["data"]
        assert len(points) == 1
        assert points[0]["date"] == "2026"
        assert money(points[0]["income"]) == money("1000")

    def test_unknown_interval(self, client, founder_headers):
        resp = client.get(f"{API}/dashboard/cash-flow", params={"interval": "hour"}, headers=founder_headers)
        assert resp.status_code == 400

    def test_service_rejects_unknown_interval(self, db_session):
        with pytest.raises(ValueError):
            DashboardService(db_session).get_cash_flow(date(2026, 1, 1), date(2026, 2, 1), "fortnight")

    def test_week_labels(self, db_session, client, founder_headers):
        _txn(client, founder_headers, "income", "10", "2026-01-05")
        points = DashboardService(db_session).get_cash_flow(date(2026, 1, 1), date(2026, 1, 31), "week")
        assert points[0]["date"] == date(2026, 1, 5).strftime("%Y-%U")


def test_founder_contributions(client, founder_headers, founder, second_founder, admin):
    resp = client.get(f"{API}/dashboard/founder-contributions", headers=founder_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert [f["name"] for f in body["data"]] == ["Bilal Cofounder", "Farah Founder"]
    assert money(body["data"][1]["fundContribution"]) == money("5000")


def test_phone_purchase_and_sale_flow_into_summary(client, founder_headers):
    before = client.get(f"{API}/dashboard/summary", headers=founder_headers).json()["data"]

    body = client.post(
        f"{API}/expenses",
        json={"description": "iPhone 13", "amount": "2500", "category": "Phone"},
        headers=founder_headers,
    ).json()
    product = body["product"]
    assert money(product["assetValue"]) == money("2500")

    sale = client.put(
        f"{API}/products/{product['id']}/mark-sold",
        json={"sellingPrice": "2800", "soldDate": "2026-06-01", "quantityToSell": 1},
        headers=founder_headers,
    ).json()["data"]
    assert sale["products"][0]["inStock"] is False
    assert money(sale["revenue"]["amount"]) == money("2800")

    after = client.get(f"{API}/dashboard/summary", headers=founder_headers).json()["data"]
    assert money(after["totalRevenue"]) - money(before["totalRevenue"]) == money("2800")
    assert money(after["pureProfit"]) == money("300")
