"""Ways of consuming a chat event stream.

All three strategies read the same open HTTP response through an
``SSEDecoder`` and deliver events in the order their frames completed on the
wire:

- ``dispatch_events``: push each event to a callback as soon as it arrives
- ``EventStream``: pull events lazily with a for loop
- ``collect_events``: drain the stream into a list (used by ``chat_sync``)

Every strategy stops after a terminal event (``complete`` or ``error``) and
closes the response exactly once, whichever way consumption ends.
"""

from __future__ import annotations

import logging
import sys
from collections import deque
from collections.abc import Callable, Iterator
from types import TracebackType
from typing import Protocol

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

import httpx

from navi_sdk._http import wrap_transport_error
from navi_sdk._sse import SSEDecoder
from navi_sdk.events import StreamEvent

logger = logging.getLogger(__name__)

EventCallback = Callable[[StreamEvent], None]


class ByteStream(Protocol):
    """The part of an open ``httpx.Response`` the strategies rely on."""

    def iter_bytes(self) -> Iterator[bytes]: ...

    def close(self) -> None: ...


def _read_chunks(response: ByteStream) -> Iterator[bytes]:
    """Yield body chunks, converting transport failures to SDK errors."""
    try:
        yield from response.iter_bytes()
    except httpx.RequestError as e:
        raise wrap_transport_error(e) from e


def dispatch_events(response: ByteStream, callback: EventCallback) -> None:
    """Feed a response into a decoder and call ``callback`` for every event.

    Chunks are decoded the moment they are received, so delta events reach
    the callback while the agent is still generating. The response is closed
    once a terminal event has been delivered, when the body ends, or when the
    callback raises (the exception then propagates unchanged).

    Args:
        response: Open streaming response
        callback: Called once per decoded event
    """
    decoder = SSEDecoder()
    try:
        for chunk in _read_chunks(response):
            for event in decoder.feed(chunk):
                callback(event)
                if event.is_terminal:
                    return

        for event in decoder.flush():
            callback(event)
            if event.is_terminal:
                return
    finally:
        response.close()


class EventStream:
    """Lazy, forward-only iterator over the events of one chat response.

    The stream reads from the connection only when the consumer asks for the
    next event. It cannot be restarted; call ``chat_stream()`` again to open
    a new connection. Leaving a ``for`` loop early does not leak the
    connection as long as the stream is used as a context manager or closed
    explicitly (it is also closed when garbage collected).

    Example:
        with client.conversations.chat_stream(conversation_id, "Hi") as stream:
            for event in stream:
                if event.is_text_delta:
                    print(event.get_text(), end="")
    """

    def __init__(self, response: ByteStream) -> None:
        self._response = response
        self._decoder = SSEDecoder()
        self._chunks = _read_chunks(response)
        self._pending: deque[StreamEvent] = deque()
        self._finished = False
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once the underlying connection has been released."""
        return self._closed

    def __iter__(self) -> Iterator[StreamEvent]:
        return self

    def __next__(self) -> StreamEvent:
        while not self._pending:
            if self._finished:
                self.close()
                raise StopIteration
            self._fill()

        event = self._pending.popleft()
        if event.is_terminal:
            # Nothing after a terminal event is delivered
            self._pending.clear()
            self._finished = True
            self.close()
        return event

    def _fill(self) -> None:
        """Read until at least one event is decoded or the body ends."""
        try:
            chunk = next(self._chunks, None)
        except BaseException:
            self.close()
            raise

        if chunk is None:
            self._pending.extend(self._decoder.flush())
            self._finished = True
        else:
            self._pending.extend(self._decoder.feed(chunk))

    def close(self) -> None:
        """Release the connection. Calling it again has no effect."""
        if self._closed:
            return
        self._closed = True
        self._finished = True
        self._pending.clear()
        self._decoder.reset()
        logger.debug("Closing chat event stream")
        try:
            self._chunks.close()
        finally:
            self._response.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        # Consumers that abandon the iterator without closing it
        if not getattr(self, "_closed", True):
            self.close()


def collect_events(stream: EventStream) -> list[StreamEvent]:
    """Drain a stream into a list, closing it afterwards."""
    with stream:
        return list(stream)
