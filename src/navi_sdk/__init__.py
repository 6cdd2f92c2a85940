"""Navi SDK - Python client for the Navi integration API.

Example usage:
    from navi_sdk import NaviClient

    client = NaviClient("navi_sk_your_api_key", base_url="https://your-navi.com")

    # Pick an agent and start a conversation
    agent = client.agents.list()[0]
    conversation = client.conversations.create(agent_id=agent.id, user_id="user-123")

    # Streaming chat
    with client.conversations.chat_stream(conversation.id, "Hello!") as stream:
        for event in stream:
            if event.is_text_delta:
                print(event.get_text(), end="")

    # Or wait for the full answer
    response = client.conversations.chat_sync(conversation.id, "Thanks!")
    print(response.content)
"""

from navi_sdk._pagination import PageIterator
from navi_sdk._sse import SSEDecoder
from navi_sdk.agents import AgentsResource
from navi_sdk.client import NaviClient
from navi_sdk.conversations import ConversationsResource
from navi_sdk.events import StreamEvent, StreamEventType
from navi_sdk.exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    InvalidResponseError,
    NaviError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from navi_sdk.models import (
    Agent,
    ApiStatus,
    ChatResponse,
    Conversation,
    ConversationStatus,
    Message,
    MessageRole,
    MessagesPage,
)
from navi_sdk.streaming import EventStream
from navi_sdk.widget_auth import TokenVerification, WidgetAuth

__version__ = "0.1.0"

__all__ = [
    # Main client
    "NaviClient",
    # Models
    "Agent",
    "ApiStatus",
    "Conversation",
    "ConversationStatus",
    "Message",
    "MessageRole",
    "MessagesPage",
    "ChatResponse",
    # Streaming
    "StreamEvent",
    "StreamEventType",
    "EventStream",
    "SSEDecoder",
    # Resources (for type hints)
    "AgentsResource",
    "ConversationsResource",
    # Widget authentication
    "WidgetAuth",
    "TokenVerification",
    # Exceptions
    "NaviError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "APIError",
    "InvalidResponseError",
    "ConfigurationError",
    "APIConnectionError",
    "APITimeoutError",
    # Utilities
    "PageIterator",
]
