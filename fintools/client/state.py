from typing import Any, Dict, List, Optional

from fintools.client.api_client import ApiClient
from fintools.client.cache import ResourceCache
from fintools.client.config import client_settings

EXPENSES = "expenses"
PRODUCTS = "products"
REVENUES = "revenues"
ASSETS = "assets"
TRANSACTIONS = "transactions"
SUMMARY = "summary"
CASH_FLOW = "cash-flow"
FOUNDERS = "founder-contributions"


def _prepend(item: Dict[str, Any]):
    return lambda rows: [item] + [r for r in rows if r["id"] != item["id"]]


def _replace(item: Dict[str, Any]):
    return lambda rows: [item if r["id"] == item["id"] else r for r in rows]


def _upsert(items: List[Dict[str, Any]]):
    def apply(rows):
        known = {r["id"] for r in rows}
        fresh = [i for i in items if i["id"] not in known]
        by_id = {i["id"]: i for i in items}
        return fresh + [by_id.get(r["id"], r) for r in rows]
    return apply


def _remove(item_id: str):
    return lambda rows: [r for r in rows if r["id"] != item_id]


class FinancialState:
    """
    Cached view of the books for a client session.

    Reads go through the cache; every mutation calls the API, patches the
    affected collections with the server's reply and drops the summary.
    """

    def __init__(self, api: ApiClient, cache: Optional[ResourceCache] = None):
        self.api = api
        self.cache = cache or ResourceCache(
            throttle={SUMMARY: client_settings.SUMMARY_THROTTLE_SECONDS}
        )

    # ================= READS ===================

    def expenses(self) -> List[Dict[str, Any]]:
        return self.cache.get(EXPENSES, lambda: self.api.list(EXPENSES))

    def products(self) -> List[Dict[str, Any]]:
        return self.cache.get(PRODUCTS, lambda: self.api.list(PRODUCTS))

    def revenues(self) -> List[Dict[str, Any]]:
        return self.cache.get(REVENUES, lambda: self.api.list(REVENUES))

    def assets(self) -> List[Dict[str, Any]]:
        return self.cache.get(ASSETS, lambda: self.api.list(ASSETS))

    def transactions(self) -> List[Dict[str, Any]]:
        return self.cache.get(TRANSACTIONS, lambda: self.api.list(TRANSACTIONS))

    def summary(self, force: bool = False) -> Dict[str, Any]:
        return self.cache.refresh(SUMMARY, self.api.get_summary, force=force)

    def cash_flow(self, start_date=None, end_date=None, interval: str = "month") -> List[Dict[str, Any]]:
        """Load cash-flow points; the last loaded series stays readable through `peek`."""
        return self.cache.refresh(
            CASH_FLOW,
            lambda: self.api.get_cash_flow(start_date, end_date, interval),
            force=True,
        )

    def founder_contributions(self, force: bool = False) -> List[Dict[str, Any]]:
        fetch = self.api.get_founder_contributions
        if force:
            return self.cache.refresh(FOUNDERS, fetch, force=True)
        return self.cache.get(FOUNDERS, fetch)

    def product_for_expense(self, expense_id: str) -> Optional[Dict[str, Any]]:
        for product in self.products():
            if product.get("relatedExpenseId") == expense_id:
                return product
        return None

    def refresh_all(self) -> None:
        for key in (EXPENSES, PRODUCTS, REVENUES, ASSETS, TRANSACTIONS):
            self.cache.refresh(key, lambda key=key: self.api.list(key), force=True)
        self.summary(force=True)

    # ================= EXPENSES ===================

    def add_expense(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = self.api.create(EXPENSES, payload)
        self._apply_expense_reply(body, _prepend(body["data"]))
        return body

    def update_expense(self, expense_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = self.api.update(EXPENSES, expense_id, payload)
        self._apply_expense_reply(body, _replace(body["data"]))
        return body

    def approve_expense(self, expense_id: str) -> Dict[str, Any]:
        expense = self.api.approve_expense(expense_id)
        self.cache.patch(EXPENSES, _replace(expense))
        return expense

    def delete_expense(self, expense_id: str) -> None:
        self.api.delete(EXPENSES, expense_id)
        self.cache.patch(EXPENSES, _remove(expense_id))
        self.cache.patch(
            PRODUCTS,
            lambda rows: [r for r in rows if r.get("relatedExpenseId") != expense_id],
        )
        self.cache.invalidate(SUMMARY)

    def _apply_expense_reply(self, body: Dict[str, Any], patch_expenses) -> None:
        self.cache.patch(EXPENSES, patch_expenses)
        if body.get("product"):
            self.cache.patch(PRODUCTS, _prepend(body["product"]))
        self.cache.invalidate(SUMMARY)

    # ================= PRODUCTS ===================

    def add_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        product = self.api.create(PRODUCTS, payload)["data"]
        self.cache.patch(PRODUCTS, _prepend(product))
        if product.get("relatedExpenseId"):
            self._flag_expense(product["relatedExpenseId"], True)
        return product

    def update_product(self, product_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        product = self.api.update(PRODUCTS, product_id, payload)["data"]
        self.cache.patch(PRODUCTS, _replace(product))
        return product

    def create_product_from_expense(
        self, expense_id: str, overrides: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        product = self.api.create_product_from_expense(expense_id, overrides)
        self.cache.patch(PRODUCTS, _prepend(product))
        self._flag_expense(expense_id, True)
        return product

    def mark_product_sold(self, product_id: str, sale: Dict[str, Any]) -> Dict[str, Any]:
        result = self.api.mark_product_sold(product_id, sale)
        self.cache.patch(PRODUCTS, _upsert(result["products"]))
        self.cache.patch(REVENUES, _prepend(result["revenue"]))
        self.cache.invalidate(SUMMARY)
        return result

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        body = self.api.delete(PRODUCTS, product_id)
        self.cache.patch(PRODUCTS, _remove(product_id))
        # the server may have cleared the expense's product flag
        self.cache.invalidate(EXPENSES)
        return body

    def _flag_expense(self, expense_id: str, created: bool) -> None:
        self.cache.patch(EXPENSES, lambda rows: [
            dict(r, isProductCreated=created) if r["id"] == expense_id else r for r in rows
        ])

    # ================= REVENUES ===================

    def add_revenue(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        revenue = self.api.create(REVENUES, payload)["data"]
        self.cache.patch(REVENUES, _prepend(revenue))
        self.cache.invalidate(SUMMARY)
        return revenue

    def delete_revenue(self, revenue_id: str) -> None:
        self.api.delete(REVENUES, revenue_id)
        self.cache.patch(REVENUES, _remove(revenue_id))
        self.cache.invalidate(SUMMARY)

    def update_revenue(self, revenue_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        revenue = self.api.update(REVENUES, revenue_id, payload)["data"]
        self.cache.patch(REVENUES, _replace(revenue))
        self.cache.invalidate(SUMMARY)
        return revenue

    def verify_revenue(self, revenue_id: str) -> Dict[str, Any]:
        revenue = self.api.verify_revenue(revenue_id)
        self.cache.patch(REVENUES, _replace(revenue))
        return revenue

    # ================= ASSETS ===================

    def add_asset(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        asset = self.api.create(ASSETS, payload)["data"]
        self.cache.patch(ASSETS, _prepend(asset))
        self.cache.invalidate(SUMMARY)
        return asset

    def update_asset(self, asset_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        asset = self.api.update(ASSETS, asset_id, payload)["data"]
        self.cache.patch(ASSETS, _replace(asset))
        self.cache.invalidate(SUMMARY)
        return asset

    def update_asset_value(self, asset_id: str, current_value, valued_at=None) -> Dict[str, Any]:
        asset = self.api.update_asset_value(asset_id, current_value, valued_at)
        self.cache.patch(ASSETS, _replace(asset))
        self.cache.invalidate(SUMMARY)
        return asset

    def delete_asset(self, asset_id: str) -> None:
        self.api.delete(ASSETS, asset_id)
        self.cache.patch(ASSETS, _remove(asset_id))
        self.cache.invalidate(SUMMARY)

    # ================= TRANSACTIONS ===================

    def add_transaction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        txn = self.api.create(TRANSACTIONS, payload)["data"]
        self.cache.patch(TRANSACTIONS, _prepend(txn))
        self._after_transaction_change(txn)
        return txn

    def update_transaction(self, transaction_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        txn = self.api.update(TRANSACTIONS, transaction_id, payload)["data"]
        self.cache.patch(TRANSACTIONS, _replace(txn))
        self._after_transaction_change(txn)
        return txn

    def delete_transaction(self, transaction_id: str) -> None:
        self.api.delete(TRANSACTIONS, transaction_id)
        self.cache.patch(TRANSACTIONS, _remove(transaction_id))
        self.cache.invalidate(CASH_FLOW)
        self.cache.invalidate(SUMMARY)

    def _after_transaction_change(self, txn: Dict[str, Any]) -> None:
        if (txn.get("relatedEntity") or {}).get("kind") == "Asset":
            self.cache.invalidate(ASSETS)
        self.cache.invalidate(CASH_FLOW)
        self.cache.invalidate(SUMMARY)
