"""Pydantic models for Navi SDK responses."""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from navi_sdk.events import StreamEvent, StreamEventType


class ConversationStatus(str, Enum):
    """Conversation lifecycle states."""

    ACTIVE = "active"
    CLOSED = "closed"


class MessageRole(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class ApiStatus(BaseModel):
    """Status of the API integration the key belongs to."""

    status: str
    integration_name: str = Field(alias="integrationName")
    rate_limit_per_minute: int | None = Field(default=None, alias="rateLimitPerMinute")
    default_agent_id: str | None = Field(default=None, alias="defaultAgentId")
    default_agent_name: str | None = Field(default=None, alias="defaultAgentName")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def is_active(self) -> bool:
        """Check if the integration is active."""
        return self.status == "active"

    @property
    def has_rate_limit(self) -> bool:
        """Check if a rate limit is configured."""
        return self.rate_limit_per_minute is not None

    @property
    def has_default_agent(self) -> bool:
        """Check if a default agent is configured."""
        return self.default_agent_id is not None


class Agent(BaseModel):
    """Agent available to the integration."""

    id: str
    name: str
    description: str | None = None
    is_default: bool = Field(default=False, alias="isDefault")

    model_config = {"frozen": True, "populate_by_name": True}


class Message(BaseModel):
    """A message in a conversation."""

    id: str
    role: str
    content: str
    timestamp: datetime

    model_config = {"frozen": True}

    @property
    def is_user(self) -> bool:
        """Check if this message is from the user."""
        return self.role == MessageRole.USER.value

    @property
    def is_assistant(self) -> bool:
        """Check if this message is from the assistant."""
        return self.role == MessageRole.ASSISTANT.value


class Conversation(BaseModel):
    """A conversation with an agent.

    ``messages`` is only populated by ``conversations.get()``; list and
    create responses leave it empty.
    """

    id: str
    status: str
    title: str | None = None
    agent_id: str | None = Field(default=None, alias="agentId")
    agent_name: str | None = Field(default=None, alias="agentName")
    user_id: str | None = Field(default=None, alias="userId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_activity_at: datetime | None = Field(default=None, alias="lastActivityAt")
    message_count: int | None = Field(default=None, alias="messageCount")
    messages: list[Message] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def is_active(self) -> bool:
        """Check if the conversation is active."""
        return self.status == ConversationStatus.ACTIVE.value

    @property
    def is_closed(self) -> bool:
        """Check if the conversation is closed."""
        return self.status == ConversationStatus.CLOSED.value


class MessagesPage(BaseModel):
    """One page of conversation messages."""

    messages: list[Message] = Field(default_factory=list)
    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = Field(default=False, alias="hasMore")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def next_offset(self) -> int:
        """Offset of the page after this one."""
        return self.offset + self.limit

    @property
    def is_first_page(self) -> bool:
        return self.offset == 0

    @property
    def is_last_page(self) -> bool:
        return not self.has_more


# =============================================================================
# Chat Models
# =============================================================================


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> int | None:
    # bool is an int subclass but never a valid count
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _error_message(value: Any) -> str | None:
    """Render an error payload of any JSON shape as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("message"), str):
        return value["message"]
    return json.dumps(value, ensure_ascii=False)


class ChatResponse(BaseModel):
    """Complete result of a chat exchange.

    Returned by ``conversations.chat_sync()``, which consumes the whole event
    stream before returning. ``success`` is False only when the agent reported
    an in-band error event; transport failures raise instead.
    """

    success: bool
    content: str | None = None
    execution_id: str | None = None
    user_message_id: str | None = None
    assistant_message_id: str | None = None
    duration_ms: int | None = None
    tokens_used: int | None = None
    error: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def from_stream_events(cls, events: Iterable[StreamEvent]) -> ChatResponse:
        """Fold a finished event sequence into one ChatResponse.

        Args:
            events: Events in the order they were received

        Returns:
            The aggregated ChatResponse
        """
        content = ""
        fields: dict[str, Any] = {"success": True}

        for event in events:
            if event.type == StreamEventType.RESPONSE_DELTA.value:
                content += _as_str(event.get_text()) or ""

            elif event.type == StreamEventType.MESSAGE_CREATED.value:
                fields["user_message_id"] = _as_str(event.data.get("userMessageId"))

            elif event.type == StreamEventType.COMPLETE.value:
                stats = event.data.get("stats")
                if not isinstance(stats, dict):
                    stats = {}
                fields["execution_id"] = _as_str(event.get_execution_id())
                fields["assistant_message_id"] = _as_str(event.get_assistant_message_id())
                fields["duration_ms"] = _as_int(stats.get("durationMs"))
                fields["tokens_used"] = _as_int(stats.get("tokensUsed"))

            elif event.type == StreamEventType.ERROR.value:
                fields["error"] = _error_message(event.data.get("error"))
                fields["success"] = False

        return cls(content=content or None, **fields)
