"""
HTTP client for the chat backend.
"""

import logging
from typing import Optional, Dict, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from optachat_client.config import ConfigManager, get_config_manager
from optachat_client.exceptions import (
    APIError,
    ConnectionFailedError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from optachat_client.models import ErrorResponse

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Thin wrapper over httpx.Client.

    Resolves the server URL from the configuration, maps error statuses to
    client exceptions and turns transport failures into
    ConnectionFailedError.
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Args:
            server_url: Server URL for this client; stored config when omitted.
            config_manager: Configuration manager.
            timeout: Request timeout in seconds; stored config when omitted.
            transport: Custom httpx transport (tests, proxies).
        """
        self.config_manager = config_manager or get_config_manager()

        self._server_url = server_url.rstrip("/") if server_url else None
        self.timeout = timeout if timeout is not None else self.config_manager.get_config().timeout
        self._transport = transport

        self._client: Optional[httpx.Client] = None

    @property
    def server_url(self) -> str:
        """Backend base URL."""
        return self._server_url or self.config_manager.get_config().server_url

    def _get_sync_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.server_url,
                timeout=self.timeout,
                transport=self._transport
            )
        return self._client

    def _handle_response_error(self, response: httpx.Response) -> None:
        """
        Raise the matching exception for an error response.

        Args:
            response: HTTP response

        Raises:
            APIError: On any non-2xx status
        """
        if response.is_success:
            return

        try:
            error_data = ErrorResponse.model_validate(response.json())
            error_type = error_data.error
            message = error_data.message or error_data.error
        except (ValueError, PydanticValidationError):
            error_type = "unknown_error"
            message = response.text or f"HTTP {response.status_code}"

        status = response.status_code
        if status == 404:
            raise NotFoundError(message)
        elif status in (400, 422):
            raise ValidationError(message, status_code=status)
        elif status >= 500:
            raise ServerError(message, status_code=status)
        else:
            raise APIError(message, status, error_type)

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """
        Perform an HTTP request.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: API path
            json: JSON body
            params: Query parameters

        Returns:
            HTTP response

        Raises:
            ConnectionFailedError: When the backend cannot be reached
            APIError: On an error status
        """
        client = self._get_sync_client()
        logger.debug(f"{method} {self.server_url}{path}")

        try:
            response = client.request(method, path, json=json, params=params)
        except httpx.TransportError as e:
            raise ConnectionFailedError(
                f"Cannot reach {self.server_url}: {e}",
                {"method": method, "path": path}
            ) from e

        self._handle_response_error(response)
        return response

    def get(self, path: str, **kwargs) -> httpx.Response:
        """GET request."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> httpx.Response:
        """POST request."""
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        """DELETE request."""
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
