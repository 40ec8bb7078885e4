"""
Base API client with common functionality
"""

import json
from typing import Any, Dict, Iterable, Optional
import httpx
from tasksync.utils.logger import logger
from tasksync.utils.error_handler import ConfigurationError, NetworkError, ServiceError
from tasksync.config.constants import DEFAULT_REQUEST_TIMEOUT


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """
    Pull a human-readable reason out of an error response

    Prefers the JSON ``message`` field, then the whole JSON body. Returns
    None when the body is empty or not JSON.
    """
    try:
        data = response.json()
    except ValueError:
        return None

    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    if data in (None, "", {}, []):
        return None
    return json.dumps(data, ensure_ascii=False)


class BaseAPIClient:
    """Base class for API clients with common functionality"""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base API client

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If base_url is missing
        """
        if not base_url or not base_url.strip():
            raise ConfigurationError("Task service address is not configured")

        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.logger = logger

    def _url(self, endpoint: str) -> str:
        endpoint = str(endpoint).strip("/")
        return f"{self.base_url}/{endpoint}" if endpoint else self.base_url

    async def _send(
        self,
        method: str,
        endpoint: str = "",
        json_data: Optional[Dict[str, Any]] = None,
        allow_statuses: Iterable[int] = (),
    ) -> httpx.Response:
        """
        Make a single HTTP request and classify the outcome

        There is no retry: each call is exactly one attempt.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: Path relative to the base URL
            json_data: JSON body
            allow_statuses: Error statuses to hand back instead of raising

        Returns:
            The response (2xx, or an error status listed in allow_statuses)

        Raises:
            NetworkError: If the service could not be reached
            ServiceError: If the service answered with a non-success status
        """
        url = self._url(endpoint)
        self.logger.debug(f"Request: {method} {url}")

        request_kwargs: Dict[str, Any] = {"method": method, "url": url}
        if json_data is not None:
            request_kwargs["json"] = json_data
            self.logger.debug(f"Request JSON data: {json_data}")

        try:
            response = await self.client.request(**request_kwargs)
        except httpx.RequestError as e:
            self.logger.warning(f"Request error: {method} {url}: {e!r}")
            raise NetworkError(url, str(e) or type(e).__name__) from e

        self.logger.debug(f"Response status: {response.status_code}")

        if response.is_error:
            self.logger.warning(f"Error response body: {response.text[:1000]}")
            if response.status_code not in allow_statuses:
                raise ServiceError(response.status_code, extract_error_message(response))

        return response

    async def _request(
        self,
        method: str,
        endpoint: str = "",
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make HTTP request and decode the JSON body

        Returns:
            Parsed JSON body, or None for an empty body
        """
        response = await self._send(method, endpoint, json_data=json_data)

        # Handle empty response (204 No Content or empty body)
        if response.status_code == 204 or not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError:
            # A 2xx without a JSON body still counts as confirmation
            return None

    async def get(self, endpoint: str = "") -> Any:
        """Make GET request"""
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str = "", json_data: Optional[Dict[str, Any]] = None) -> Any:
        """Make POST request"""
        return await self._request("POST", endpoint, json_data=json_data)

    async def patch(self, endpoint: str = "", json_data: Optional[Dict[str, Any]] = None) -> Any:
        """Make PATCH request"""
        return await self._request("PATCH", endpoint, json_data=json_data)

    async def delete(self, endpoint: str = "", allow_statuses: Iterable[int] = ()) -> httpx.Response:
        """Make DELETE request"""
        return await self._send("DELETE", endpoint, allow_statuses=allow_statuses)

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
