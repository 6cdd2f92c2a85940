"""Main Navi client."""

from __future__ import annotations

import os
import sys
from types import TracebackType

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

import httpx

from navi_sdk._http import HTTPClient
from navi_sdk.agents import AgentsResource
from navi_sdk.conversations import ConversationsResource
from navi_sdk.exceptions import AuthenticationError, ConfigurationError
from navi_sdk.models import ApiStatus

# Environment variables read when arguments are not given
ENV_NAVI_API_KEY = "NAVI_API_KEY"
ENV_NAVI_BASE_URL = "NAVI_BASE_URL"

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_API_PATH = "/api/integration"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STREAM_TIMEOUT = 300.0

API_KEY_PREFIX = "navi_sk_"
API_KEY_MIN_LENGTH = 20


def validate_api_key(api_key: str) -> None:
    """Check the API key format before any request is made.

    Raises:
        AuthenticationError: If the key is empty or malformed
    """
    if not api_key:
        raise AuthenticationError("API key is required")
    if not api_key.startswith(API_KEY_PREFIX):
        raise AuthenticationError(
            f'Invalid API key format. Key should start with "{API_KEY_PREFIX}"'
        )
    if len(api_key) < API_KEY_MIN_LENGTH:
        raise AuthenticationError("Invalid API key format. Key is too short")


class NaviClient:
    """Main client for interacting with the Navi integration API.

    Example usage:
        # Initialize with environment variables
        # (set NAVI_API_KEY=navi_sk_... and NAVI_BASE_URL=https://your-navi.com)
        client = NaviClient()

        # Or explicitly
        client = NaviClient("navi_sk_your_api_key", base_url="https://your-navi.com")

        # Create a conversation
        conversation = client.conversations.create(agent_id="agent-uuid", user_id="user-123")

        # Chat with streaming
        client.conversations.chat(
            conversation.id,
            "Hello!",
            lambda event: print(event.get_text(), end="") if event.is_text_delta else None,
        )

        # Context manager for cleanup
        with NaviClient() as client:
            print(client.status().integration_name)
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        api_path: str = DEFAULT_API_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        stream_timeout: float = DEFAULT_STREAM_TIMEOUT,
        verify_ssl: bool = True,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the Navi client.

        Args:
            api_key: Integration API key (or from NAVI_API_KEY env var)
            base_url: Navi server URL (or from NAVI_BASE_URL env var,
                default http://localhost:3000)
            api_path: Path of the integration API on the server
            timeout: Request timeout in seconds (default 30)
            stream_timeout: Read timeout in seconds for streaming chat (default 300)
            verify_ssl: Whether to verify TLS certificates
            http_client: Preconfigured httpx.Client to send requests with;
                it is left open by close()

        Raises:
            ConfigurationError: If no API key is given or configured
            AuthenticationError: If the API key format is invalid
        """
        resolved_key = api_key if api_key is not None else os.environ.get(ENV_NAVI_API_KEY)
        if resolved_key is None:
            raise ConfigurationError(
                f"Navi API key not configured. Either pass api_key parameter "
                f"or set {ENV_NAVI_API_KEY} environment variable."
            )
        validate_api_key(resolved_key)

        server_url = base_url or os.environ.get(ENV_NAVI_BASE_URL) or DEFAULT_BASE_URL
        self._base_url = server_url.rstrip("/") + api_path

        self._http = HTTPClient(
            base_url=self._base_url,
            api_key=resolved_key,
            timeout=timeout,
            stream_timeout=stream_timeout,
            verify_ssl=verify_ssl,
            client=http_client,
        )

        self._conversations = ConversationsResource(self._http)
        self._agents = AgentsResource(self._http)

    @property
    def conversations(self) -> ConversationsResource:
        """Conversation management and chat."""
        return self._conversations

    @property
    def agents(self) -> AgentsResource:
        """Discover available agents."""
        return self._agents

    @property
    def base_url(self) -> str:
        """API root requests are sent to."""
        return self._base_url

    def status(self) -> ApiStatus:
        """Get the status of this API integration.

        Returns:
            ApiStatus of the integration the key belongs to
        """
        response = self._http.get("/status")
        data = response if isinstance(response, dict) else {}
        return ApiStatus.model_validate(data)

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager and cleanup."""
        self.close()

    def __repr__(self) -> str:
        """String representation."""
        return f"NaviClient(base_url={self._base_url!r})"
