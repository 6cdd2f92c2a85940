"""Internal HTTP client for Navi SDK."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from navi_sdk.exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    AuthorizationError,
    InvalidResponseError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

USER_AGENT = "Navi-Python-SDK/0.1.0"


def wrap_transport_error(error: httpx.RequestError) -> APIConnectionError:
    """Convert an httpx transport failure into an SDK exception."""
    if isinstance(error, httpx.TimeoutException):
        return APITimeoutError(f"Request to Navi API timed out: {error}", detail=str(error))
    return APIConnectionError(f"Failed to connect to Navi API: {error}", detail=str(error))


def _parse_retry_after(value: str | None) -> int | None:
    """Read a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class HTTPClient:
    """HTTP client that authenticates every request with the API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        stream_timeout: float = 300.0,
        verify_ssl: bool = True,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: API root including the integration path
                (e.g., "https://navi.example.com/api/integration")
            api_key: Integration API key sent as a bearer token
            timeout: Timeout in seconds for ordinary requests
            stream_timeout: Read timeout in seconds for streaming chat requests
            verify_ssl: Whether to verify TLS certificates
            client: Optional preconfigured httpx.Client (not closed by close())
        """
        # Ensure base_url doesn't end with /
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.stream_timeout = stream_timeout

        self._api_key = api_key

        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, verify=verify_ssl)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client:
            self._client.close()

    def _get_headers(self, accept: str = "application/json") -> dict[str, str]:
        """Build request headers.

        Args:
            accept: Value of the Accept header

        Returns:
            Dictionary of headers
        """
        return {
            "Content-Type": "application/json",
            "Accept": accept,
            "Authorization": f"Bearer {self._api_key}",
            "User-Agent": USER_AGENT,
        }

    def _handle_error(self, response: httpx.Response) -> None:
        """Convert HTTP errors to SDK exceptions.

        Args:
            response: HTTP response object (body already read)

        Raises:
            NaviError: Appropriate exception based on status code
        """
        status = response.status_code
        try:
            detail = response.json()
        except ValueError:
            detail = response.text

        if isinstance(detail, dict):
            message = detail.get("message") or detail.get("error") or detail.get("detail")
            if not isinstance(message, str):
                message = str(message) if message else f"HTTP {status}"
        else:
            message = str(detail) if detail else f"HTTP {status}"

        if status == 401:
            raise AuthenticationError(message=message, detail=detail)
        elif status == 403:
            raise AuthorizationError(message=message, detail=detail)
        elif status == 404:
            raise NotFoundError(message=message, detail=detail)
        elif status in (400, 422):
            errors = detail.get("errors") if isinstance(detail, dict) else None
            raise ValidationError(
                message=message,
                errors=errors,
                status_code=status,
                detail=detail,
            )
        elif status == 429:
            raise RateLimitError(
                message=message,
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
                detail=detail,
            )
        else:
            raise APIError(
                message=message,
                status_code=status,
                detail=detail,
            )

    def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: URL path (will be joined with base_url)
            json: JSON body data
            params: Query parameters

        Returns:
            Parsed JSON response ({} for an empty body)

        Raises:
            NaviError: On API or transport errors
        """
        url = f"{self.base_url}{path}"

        try:
            response = self._client.request(
                method=method,
                url=url,
                headers=self._get_headers(),
                json=json,
                params=params,
            )
        except httpx.RequestError as e:
            raise wrap_transport_error(e) from e

        if response.status_code >= 400:
            self._handle_error(response)

        # 204 No Content and empty bodies
        if not response.content:
            return {}

        try:
            return response.json()  # type: ignore[no-any-return]
        except ValueError as e:
            logger.warning(f"{method} {path} returned a non-JSON body")
            raise InvalidResponseError(
                f"Invalid JSON response: {e}",
                status_code=response.status_code,
                detail=response.text,
            ) from e

    def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Make a GET request."""
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Make a POST request."""
        return self.request("POST", path, json=json)

    def delete(self, path: str) -> dict[str, Any] | list[Any]:
        """Make a DELETE request."""
        return self.request("DELETE", path)

    def open_stream(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """POST a request and return the response with its body unread.

        The caller owns the returned response and must close it. Error
        statuses are raised here, before any body is handed out.

        Args:
            path: URL path (will be joined with base_url)
            json: JSON body data

        Returns:
            Open streaming httpx.Response

        Raises:
            NaviError: On API or transport errors
        """
        headers = {
            **self._get_headers(accept="text/event-stream"),
            "Cache-Control": "no-cache",
        }
        request = self._client.build_request(
            "POST",
            f"{self.base_url}{path}",
            headers=headers,
            json=json,
            timeout=httpx.Timeout(self.timeout, read=self.stream_timeout),
        )

        try:
            response = self._client.send(request, stream=True)
        except httpx.RequestError as e:
            raise wrap_transport_error(e) from e

        if response.status_code >= 400:
            try:
                response.read()
            except httpx.RequestError as e:
                raise wrap_transport_error(e) from e
            finally:
                response.close()
            self._handle_error(response)

        logger.debug(f"Opened event stream for POST {path}")
        return response
