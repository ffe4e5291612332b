# app/clients/data_api.py
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.cache import InMemoryCache
from app.core.config import get_settings
from app.services.offline_store import OfflineStore
from app.clients.notifications import Notifier

logger = logging.getLogger(__name__)


class DataAPIError(Exception):
    """Request to the café API failed.

    ``status_code`` is None when the server could not be reached at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def offline(self) -> bool:
        return self.status_code is None


def create_http_client(base_url: str) -> httpx.AsyncClient:
    """Create HTTP client with connection pooling"""
    limits = httpx.Limits(
        max_keepalive_connections=5,
        max_connections=10,
        keepalive_expiry=30.0
    )
    return httpx.AsyncClient(
        base_url=base_url,
        limits=limits,
        timeout=httpx.Timeout(30.0)
    )


class DataAPI:
    """Client for the café data API with a short-lived cache and an offline fallback"""

    base_path = "/api/data/"

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[InMemoryCache] = None,
        offline_store: Optional[OfflineStore] = None,
        notifier: Optional[Notifier] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.api_url
        self._client = client or create_http_client(self.base_url)
        self.cache = cache if cache is not None else InMemoryCache()
        self.offline_store = offline_store if offline_store is not None else OfflineStore(settings.offline_dir)
        self.notifier = notifier or Notifier()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise DataAPIError(f"Network error: {str(e) or type(e).__name__}")

        try:
            result = response.json()
        except ValueError:
            raise DataAPIError(f"HTTP error! status: {response.status_code}", response.status_code)

        if not response.is_success or not isinstance(result, dict) or not result.get("success"):
            error = result.get("error") if isinstance(result, dict) else None
            raise DataAPIError(
                f"API error: {error or f'status {response.status_code}'}",
                response.status_code
            )
        return result

    async def fetch_data(self, filename: str) -> Optional[Any]:
        """Fetch one document: cache, then server, then the offline copy"""
        cached = await self.cache.get(filename)
        if cached is not None:
            logger.debug(f"Using cached data for {filename}")
            return cached

        try:
            result = await self._request("GET", f"{self.base_path}{filename}")
        except DataAPIError as e:
            logger.error(f"Error fetching {filename}: {e.message}")

            fallback = self.offline_store.load(filename)
            if fallback is not None:
                logger.info(f"Using offline fallback for {filename}")
                return fallback

            self.notifier.show("Failed to load data. Please check your server connection.", "error")
            return None

        data = result["data"]
        await self.cache.set(filename, data)
        self.offline_store.save(filename, data)
        logger.info(f"Loaded {filename} from backend")
        return data

    async def fetch_all(self) -> Dict[str, Optional[Any]]:
        """Fetch all four documents with the combined endpoint"""
        result = await self._request("GET", "/api/data")
        data = result["data"]
        for key, document in data.items():
            if document is not None:
                await self.cache.set(f"{key}.json", document)
        return data

    async def save_data(self, filename: str, data: Any) -> Dict[str, Any]:
        """Replace a whole document.

        When the server cannot be reached the document is kept in the offline
        store and ``savedLocally`` is set on the returned result.
        """
        try:
            result = await self._request("POST", f"{self.base_path}{filename}", json=data)
        except DataAPIError as e:
            logger.error(f"Error saving {filename}: {e.message}")
            if not e.offline:
                return {"success": False, "error": e.message}

            self.offline_store.save(filename, data)
            self.notifier.show("Saved locally (server offline)", "warning")
            return {"success": False, "error": e.message, "savedLocally": True}

        await self.cache.invalidate(filename)
        self.offline_store.save(filename, data)
        logger.info(f"Successfully saved {filename}")
        return result

    async def update_item(self, filename: str, item_id: int, update_data: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._request("PUT", f"{self.base_path}{filename}/{item_id}", json=update_data)
        await self.cache.invalidate(filename)
        logger.info(f"Successfully updated item {item_id} in {filename}")
        return result

    async def delete_item(self, filename: str, item_id: int) -> Dict[str, Any]:
        result = await self._request("DELETE", f"{self.base_path}{filename}/{item_id}")
        await self.cache.invalidate(filename)
        logger.info(f"Successfully deleted item {item_id} from {filename}")
        return result

    async def create_backup(self) -> Dict[str, Any]:
        return await self._request("POST", "/api/backup")

    async def check_health(self) -> bool:
        try:
            result = await self._request("GET", "/api/health")
        except DataAPIError as e:
            logger.error(f"Health check failed: {e.message}")
            return False
        return result.get("status") == "OK"

    async def clear_cache(self):
        await self.cache.clear()
        logger.info("Data cache cleared")


__all__ = ["DataAPI", "DataAPIError", "create_http_client"]
