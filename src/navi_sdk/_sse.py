"""Incremental Server-Sent Events decoder for the chat stream.

The chat endpoint answers with ``text/event-stream`` frames::

    event: response_delta
    data: {"text": "Hel"}

    event: complete
    data: {"executionId": "..."}

A frame ends at a blank line. ``SSEDecoder`` accepts the body in whatever
chunks the transport delivers (frames, lines and even UTF-8 characters may be
split across chunks) and returns each event as soon as its frame is complete.
Malformed frames are dropped rather than raised, so one bad frame never ends
an otherwise healthy stream.
"""

from __future__ import annotations

import codecs
import json
import logging

from navi_sdk.events import StreamEvent

logger = logging.getLogger(__name__)

FRAME_TERMINATOR = "\n\n"


def parse_frame(frame: str) -> StreamEvent | None:
    """Parse one SSE frame (without its terminating blank line).

    ``event:`` sets the type (last one wins), ``data:`` values are
    concatenated without a separator and ``id:`` is kept as metadata. Any
    other line is ignored.

    Args:
        frame: Raw frame text

    Returns:
        The decoded StreamEvent, or None if the frame has no type or no data
    """
    event_type: str | None = None
    event_id: str | None = None
    data = ""

    for line in frame.split("\n"):
        line = line.strip()
        if not line:
            continue

        if line.startswith("event:"):
            event_type = line[6:].strip()
        elif line.startswith("data:"):
            data += line[5:].strip()
        elif line.startswith("id:"):
            event_id = line[3:].strip()

    if not event_type or not data:
        logger.debug(f"Dropping SSE frame without type or data: {frame!r}")
        return None

    try:
        payload = json.loads(data)
    except (ValueError, RecursionError):
        logger.debug(f"SSE data for '{event_type}' is not JSON, keeping raw text")
        payload = {"raw": data}

    if not isinstance(payload, dict):
        payload = {"raw": data}

    return StreamEvent(type=event_type, data=payload, id=event_id)


class SSEDecoder:
    """Turn a chunked SSE body into StreamEvents.

    One decoder belongs to exactly one stream. It keeps the text received so
    far that does not yet form a complete frame.

    Example:
        decoder = SSEDecoder()
        for chunk in response.iter_bytes():
            for event in decoder.feed(chunk):
                handle(event)
        for event in decoder.flush():
            handle(event)
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._codec = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def buffer(self) -> str:
        """Text received but not yet resolved into a frame."""
        return self._buffer

    def reset(self) -> None:
        """Discard all buffered input so the decoder can be reused."""
        self._buffer = ""
        self._codec.reset()

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        """Add a chunk of the body and return the events it completes.

        Args:
            chunk: Raw bytes (decoded as UTF-8) or already-decoded text

        Returns:
            Events for every frame completed by this chunk, in wire order
        """
        text = self._codec.decode(chunk) if isinstance(chunk, bytes) else chunk
        if not text:
            return []

        if self._buffer.endswith("\r"):
            # A CR left by the previous chunk may pair with an LF in this one
            self._buffer = self._buffer[:-1]
            text = "\r" + text
        if "\r" in text:
            text = text.replace("\r\n", "\n")

        # Only the last buffered character can start a terminator with new text
        start = max(len(self._buffer) - 1, 0)
        self._buffer += text

        events: list[StreamEvent] = []
        while True:
            pos = self._buffer.find(FRAME_TERMINATOR, start)
            if pos == -1:
                break

            frame = self._buffer[:pos]
            self._buffer = self._buffer[pos + len(FRAME_TERMINATOR) :]
            start = 0

            event = parse_frame(frame)
            if event is not None:
                events.append(event)

        return events

    def flush(self) -> list[StreamEvent]:
        """Signal end of input and return any event left in the buffer.

        Servers sometimes omit the blank line after the last frame; whatever
        is still buffered is parsed as one final frame.
        """
        events = self.feed(self._codec.decode(b"", final=True))

        remainder, self._buffer = self._buffer, ""
        if remainder.strip():
            event = parse_frame(remainder)
            if event is not None:
                events.append(event)

        return events
