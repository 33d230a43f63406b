from fintools.client.api_client import ApiClient, ApiError
from fintools.client.cache import ResourceCache
from fintools.client.state import FinancialState

__all__ = ["ApiClient", "ApiError", "ResourceCache", "FinancialState"]
