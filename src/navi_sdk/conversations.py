"""Conversations resource for managing conversations and chatting with agents.

Chat responses are streamed by the server as Server-Sent Events. The
resource offers three ways of consuming them:

    # 1. Callback per event, as it arrives
    client.conversations.chat(
        conversation.id,
        "Hello!",
        lambda event: print(event.get_text() or "", end="")
        if event.is_text_delta else None,
    )

    # 2. Iterate events lazily
    with client.conversations.chat_stream(conversation.id, "Hello!") as stream:
        for event in stream:
            if event.type == "response_delta":
                print(event.get_text(), end="", flush=True)

    # 3. Wait for the whole answer
    response = client.conversations.chat_sync(conversation.id, "Hello!")
    print(response.content)

Runtime parameters are forwarded to the agent untouched and can be
referenced in its configuration with ``${params.key}`` (for example in MCP or
HTTP tool headers). The server also provides built-in parameters such as
``params.current_date`` and ``params.execution_id``.
"""

from __future__ import annotations

import builtins
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from navi_sdk._pagination import Page, PageIterator
from navi_sdk.models import ChatResponse, Conversation, Message, MessagesPage
from navi_sdk.streaming import (
    EventCallback,
    EventStream,
    collect_events,
    dispatch_events,
)

if TYPE_CHECKING:
    import httpx

    from navi_sdk._http import HTTPClient

logger = logging.getLogger(__name__)


def _conversation_path(conversation_id: str) -> str:
    if not conversation_id:
        raise ValueError("conversation_id is required")
    return f"/conversations/{quote(conversation_id, safe='')}"


def build_chat_body(
    message: str,
    *,
    context: dict[str, Any] | None = None,
    runtime_params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the JSON body of a chat request.

    ``context`` and ``runtime_params`` are copied in verbatim; the SDK does
    not interpret either of them.
    """
    body: dict[str, Any] = {"message": message}
    if context is not None:
        body["context"] = context
    if runtime_params is not None:
        body["runtimeParams"] = runtime_params
    return body


class ConversationsResource:
    """Create, inspect and close conversations, and chat within them.

    Example usage:
        # Start a conversation with an agent
        conversation = client.conversations.create(
            agent_id="agent-uuid",
            user_id="user-123",
            title="Billing question",
        )

        # List a user's active conversations
        for conv in client.conversations.list(user_id="user-123", status="active"):
            print(conv.id, conv.title)

        # Page through the messages
        for message in client.conversations.iter_messages(conversation.id):
            print(f"{message.role}: {message.content}")

        # Close it
        client.conversations.close(conversation.id)
    """

    def __init__(self, http: HTTPClient) -> None:
        """Initialize conversations resource.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def create(
        self,
        *,
        agent_id: str,
        user_id: str | None = None,
        user_name: str | None = None,
        title: str | None = None,
        message: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> Conversation:
        """Create a new conversation.

        Args:
            agent_id: Agent that will answer in this conversation
            user_id: Your identifier for the end user
            user_name: Display name of the end user
            title: Conversation title
            message: Optional first message
            context: Free-form context passed to the agent

        Returns:
            The created Conversation

        Raises:
            ValidationError: If the request is invalid
            NotFoundError: If the agent does not exist
        """
        payload: dict[str, Any] = {"agentId": agent_id}
        # Only include optional fields if provided
        if user_id is not None:
            payload["userId"] = user_id
        if user_name is not None:
            payload["userName"] = user_name
        if title is not None:
            payload["title"] = title
        if message is not None:
            payload["message"] = message
        if context is not None:
            payload["context"] = context

        response = self._http.post("/conversations", json=payload)
        data = response if isinstance(response, dict) else {}
        return Conversation.model_validate(data)

    def list(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> builtins.list[Conversation]:
        """List conversations.

        Args:
            user_id: Only conversations of this end user
            status: Only conversations with this status ("active" or "closed")
            limit: Maximum number of conversations to return
            offset: Number of conversations to skip

        Returns:
            List of Conversation (without messages)
        """
        params: dict[str, Any] = {}
        if user_id is not None:
            params["userId"] = user_id
        if status is not None:
            params["status"] = status
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        response = self._http.get("/conversations", params=params or None)
        items = response if isinstance(response, builtins.list) else []
        return [Conversation.model_validate(item) for item in items]

    def get(self, conversation_id: str) -> Conversation:
        """Get a conversation with its messages.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        response = self._http.get(_conversation_path(conversation_id))
        data = response if isinstance(response, dict) else {}
        return Conversation.model_validate(data)

    def messages(
        self,
        conversation_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
        order: str | None = None,
    ) -> MessagesPage:
        """Get one page of messages.

        Args:
            conversation_id: Conversation ID
            limit: Page size (server default 50)
            offset: Number of messages to skip
            order: "asc" or "desc"

        Returns:
            MessagesPage with the messages and paging info
        """
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        if order is not None:
            params["order"] = order

        response = self._http.get(
            f"{_conversation_path(conversation_id)}/messages",
            params=params or None,
        )
        data = response if isinstance(response, dict) else {}
        return MessagesPage.model_validate(data)

    def iter_messages(
        self,
        conversation_id: str,
        *,
        page_size: int = 50,
        order: str | None = None,
    ) -> PageIterator[Message]:
        """Iterate over all messages, fetching pages lazily.

        Args:
            conversation_id: Conversation ID
            page_size: Number of messages per request (default 50)
            order: "asc" or "desc"

        Returns:
            PageIterator over Message
        """

        def fetch_fn(offset: int, limit: int) -> Page[Message]:
            page = self.messages(
                conversation_id, limit=limit, offset=offset, order=order
            )
            return Page(items=page.messages, has_more=page.has_more)

        return PageIterator(fetch_fn, page_size=page_size)

    def close(self, conversation_id: str) -> None:
        """Close a conversation.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        self._http.delete(_conversation_path(conversation_id))

    # -------------------------------------------------------------------------
    # Chat
    # -------------------------------------------------------------------------

    def _open_chat(
        self,
        conversation_id: str,
        message: str,
        context: dict[str, Any] | None,
        runtime_params: dict[str, Any] | None,
    ) -> httpx.Response:
        body = build_chat_body(message, context=context, runtime_params=runtime_params)
        return self._http.open_stream(
            f"{_conversation_path(conversation_id)}/chat", json=body
        )

    def chat(
        self,
        conversation_id: str,
        message: str,
        callback: EventCallback,
        *,
        context: dict[str, Any] | None = None,
        runtime_params: dict[str, Any] | None = None,
    ) -> None:
        """Send a message and receive the response events via a callback.

        The callback runs for each event as soon as its frame arrives. The
        call returns after the ``complete`` or ``error`` event, or when the
        server ends the stream. An in-band ``error`` event is passed to the
        callback, not raised.

        Args:
            conversation_id: Conversation ID
            message: Message text
            callback: Called with each StreamEvent
            context: Free-form context passed to the agent
            runtime_params: Values substituted into the agent configuration

        Raises:
            AuthenticationError: If the API key is rejected
            RateLimitError: If the rate limit is exceeded
            APIConnectionError: If the connection fails or times out
            Exception: Whatever the callback raises, after the connection
                has been closed
        """
        response = self._open_chat(conversation_id, message, context, runtime_params)
        dispatch_events(response, callback)

    def chat_stream(
        self,
        conversation_id: str,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        runtime_params: dict[str, Any] | None = None,
    ) -> EventStream:
        """Send a message and iterate over the response events.

        The request is sent immediately; events are read as you iterate.
        Use the returned stream as a context manager (or call ``close()``)
        when you may stop before the end.

        Args:
            conversation_id: Conversation ID
            message: Message text
            context: Free-form context passed to the agent
            runtime_params: Values substituted into the agent configuration

        Returns:
            EventStream yielding StreamEvent

        Raises:
            AuthenticationError: If the API key is rejected
            RateLimitError: If the rate limit is exceeded
            APIConnectionError: If the connection fails or times out
        """
        response = self._open_chat(conversation_id, message, context, runtime_params)
        return EventStream(response)

    def chat_sync(
        self,
        conversation_id: str,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        runtime_params: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """Send a message and wait for the complete response.

        Args:
            conversation_id: Conversation ID
            message: Message text
            context: Free-form context passed to the agent
            runtime_params: Values substituted into the agent configuration

        Returns:
            ChatResponse aggregated from the whole event stream

        Raises:
            AuthenticationError: If the API key is rejected
            RateLimitError: If the rate limit is exceeded
            APIConnectionError: If the connection fails or times out
        """
        stream = self.chat_stream(
            conversation_id,
            message,
            context=context,
            runtime_params=runtime_params,
        )
        events = collect_events(stream)
        logger.debug(f"Chat in conversation {conversation_id} produced {len(events)} events")
        return ChatResponse.from_stream_events(events)
