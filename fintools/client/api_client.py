"""
Thin HTTP client for the Fintools API.

Every reply is the `{success, data, ...}` envelope; a reply with
`success: false` (or a non-2xx status) raises `ApiError` carrying the
server's message.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import httpx

from fintools.client.config import client_settings
from fintools.logger_config import logger


class ApiError(Exception):
    def __init__(self, message: Union[str, List[str]], status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message if isinstance(message, str) else "; ".join(message))


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url if base_url is not None else client_settings.BASE_URL).rstrip("/")
        self.token = token
        if http_client is None:
            timeout = timeout if timeout is not None else client_settings.TIMEOUT
            http_client = httpx.Client(timeout=timeout) if timeout is not None else httpx.Client()
        self._http = http_client

    def close(self) -> None:
        self._http.close()

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the whole envelope."""
        url = f"{self.base_url}{path}"
        response = self._http.request(method, url, headers=self._headers(), **kwargs)
        try:
            body = response.json()
        except ValueError:
            logger.error(f"{method} {path} returned a non-JSON body ({response.status_code})")
            raise ApiError("Unexpected response from server", response.status_code)

        if response.is_error or not body.get("success", False):
            raise ApiError(body.get("error") or "Request failed", response.status_code)
        return body

    def _data(self, method: str, path: str, **kwargs) -> Any:
        return self.request(method, path, **kwargs).get("data")

    # ================= AUTH ===================

    def login(self, email: str, password: str) -> str:
        body = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        return self.token

    def me(self) -> Dict[str, Any]:
        return self._data("GET", "/auth/me")

    # ================= GENERIC RESOURCES ===================

    def list(self, resource: str, **params) -> List[Dict[str, Any]]:
        params = {k: v for k, v in params.items() if v is not None}
        return self._data("GET", f"/{resource}", params=params)

    def get(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self._data("GET", f"/{resource}/{item_id}")

    def create(self, resource: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", f"/{resource}", json=payload)

    def update(self, resource: str, item_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/{resource}/{item_id}", json=payload)

    def delete(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self.request("DELETE", f"/{resource}/{item_id}")

    # ================= WORKFLOWS ===================

    def approve_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._data("PUT", f"/expenses/{expense_id}/approve")

    def verify_revenue(self, revenue_id: str) -> Dict[str, Any]:
        return self._data("PUT", f"/revenues/{revenue_id}/verify")

    def update_asset_value(
        self, asset_id: str, current_value, valued_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        payload = {"currentValue": str(current_value)}
        if valued_at is not None:
            payload["lastValuationDate"] = valued_at.isoformat()
        return self._data("PUT", f"/assets/{asset_id}/update-value", json=payload)

    def mark_product_sold(self, product_id: str, sale: Dict[str, Any]) -> Dict[str, Any]:
        return self._data("PUT", f"/products/{product_id}/mark-sold", json=sale)

    def create_product_from_expense(
        self, expense_id: str, overrides: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return self._data("POST", f"/products/from-expense/{expense_id}", json=overrides)

    def get_summary(self) -> Dict[str, Any]:
        return self._data("GET", "/dashboard/summary")

    def get_cash_flow(self, start_date=None, end_date=None, interval: str = "month") -> List[Dict[str, Any]]:
        params = {"interval": interval}
        if start_date is not None:
            params["startDate"] = str(start_date)
        if end_date is not None:
            params["endDate"] = str(end_date)
        return self._data("GET", "/dashboard/cash-flow", params=params)

    def get_founder_contributions(self) -> List[Dict[str, Any]]:
        return self._data("GET", "/dashboard/founder-contributions")
