"""Stream event model for chat responses.

Every frame decoded from the chat SSE stream becomes a ``StreamEvent``: a
string ``type`` tag and the decoded JSON ``data`` object. Types the SDK does
not know about are kept as-is so that newer servers do not break older
clients.

Example:
    for event in client.conversations.chat_stream(conversation_id, "Hi"):
        if event.is_text_delta:
            print(event.get_text(), end="", flush=True)
        elif event.is_tool_event:
            print(f"[{event.type}] {event.get_tool_name()}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StreamEventType(str, Enum):
    """Event types emitted by the chat stream."""

    MESSAGE_CREATED = "message_created"
    REASONING_START = "reasoning_start"
    REASONING_DELTA = "reasoning_delta"
    REASONING_COMPLETE = "reasoning_complete"
    TOOL_START = "tool_start"
    TOOL_COMPLETE = "tool_complete"
    RESPONSE_START = "response_start"
    RESPONSE_DELTA = "response_delta"
    RESPONSE_COMPLETE = "response_complete"
    COMPLETE = "complete"
    ERROR = "error"


TEXT_DELTA_TYPES = frozenset(
    {StreamEventType.REASONING_DELTA.value, StreamEventType.RESPONSE_DELTA.value}
)
TOOL_EVENT_TYPES = frozenset(
    {StreamEventType.TOOL_START.value, StreamEventType.TOOL_COMPLETE.value}
)
TERMINAL_TYPES = frozenset(
    {StreamEventType.COMPLETE.value, StreamEventType.ERROR.value}
)


@dataclass(frozen=True)
class StreamEvent:
    """A single event decoded from the chat stream."""

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    id: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        # StreamEventType members compare equal to their value; store the str
        if isinstance(self.type, StreamEventType):
            object.__setattr__(self, "type", self.type.value)
        if not self.type:
            raise ValueError("StreamEvent type must not be empty")

    @property
    def is_text_delta(self) -> bool:
        """Check if this event carries a reasoning or response text fragment."""
        return self.type in TEXT_DELTA_TYPES

    @property
    def is_complete(self) -> bool:
        """Check if this is the final complete event."""
        return self.type == StreamEventType.COMPLETE.value

    @property
    def is_error(self) -> bool:
        """Check if this is an in-band error event."""
        return self.type == StreamEventType.ERROR.value

    @property
    def is_terminal(self) -> bool:
        """Check if the stream ends after this event."""
        return self.type in TERMINAL_TYPES

    @property
    def is_tool_event(self) -> bool:
        """Check if this is a tool start/complete event."""
        return self.type in TOOL_EVENT_TYPES

    def get_text(self) -> str | None:
        """Return the text fragment of a delta event."""
        return self.data.get("text")

    def get_error(self) -> str | None:
        """Return the error message of an error event."""
        return self.data.get("error")

    def get_tool_name(self) -> str | None:
        """Return the tool name of a tool event."""
        return self.data.get("tool")

    def get_response(self) -> str | None:
        """Return the final response content carried by a complete event."""
        return self.data.get("response")

    def get_execution_id(self) -> str | None:
        """Return the execution ID carried by a complete event."""
        return self.data.get("executionId")

    def get_assistant_message_id(self) -> str | None:
        """Return the ID of the stored assistant message."""
        return self.data.get("assistantMessageId")
