"""Unit tests for the stream consumption strategies."""

from __future__ import annotations

import gc

import httpx
import pytest

from navi_sdk import APIConnectionError, APITimeoutError, EventStream, StreamEvent
from navi_sdk.streaming import collect_events, dispatch_events

# =============================================================================
# Test Fixtures
# =============================================================================


def frame(event_type: str, data: str) -> bytes:
    """Encode one SSE frame."""
    return f"event: {event_type}\ndata: {data}\n\n".encode()


DELTA_A = frame("response_delta", '{"text": "a"}')
DELTA_B = frame("response_delta", '{"text": "b"}')
COMPLETE = frame("complete", '{"executionId": "e1"}')
ERROR = frame("error", '{"error": "boom"}')
TRAILING = frame("response_delta", '{"text": "after"}')


class CallbackBoom(Exception):
    """Raised by test callbacks."""


# =============================================================================
# dispatch_events
# =============================================================================


class TestDispatchEvents:
    """Tests for the callback strategy."""

    def test_events_delivered_in_order(self, fake_response) -> None:
        """Test that the callback sees every event in wire order."""
        response = fake_response([DELTA_A, DELTA_B, COMPLETE])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert [e.type for e in received] == ["response_delta", "response_delta", "complete"]
        assert [e.get_text() for e in received[:2]] == ["a", "b"]
        assert response.close_calls == 1

    def test_frame_split_across_chunks(self, fake_response) -> None:
        """Test that a frame is delivered once its last chunk arrives."""
        body = DELTA_A + COMPLETE
        response = fake_response([body[:5], body[5:30], body[30:]])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert [e.type for e in received] == ["response_delta", "complete"]

    def test_stops_after_terminal_event(self, fake_response) -> None:
        """Test that nothing after complete is delivered or read."""
        response = fake_response([DELTA_A, COMPLETE + TRAILING, TRAILING])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert [e.type for e in received] == ["response_delta", "complete"]
        assert response.chunks_read == 2
        assert response.close_calls == 1

    def test_error_event_is_delivered_not_raised(self, fake_response) -> None:
        """Test in-band error handling."""
        response = fake_response([DELTA_A, ERROR, TRAILING])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert received[-1].is_error
        assert received[-1].get_error() == "boom"
        assert response.close_calls == 1

    def test_unterminated_last_frame_is_flushed(self, fake_response) -> None:
        """Test a body that ends without the final blank line."""
        response = fake_response([DELTA_A, COMPLETE.rstrip(b"\n")])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert [e.type for e in received] == ["response_delta", "complete"]
        assert response.close_calls == 1

    def test_body_ending_without_terminal_event(self, fake_response) -> None:
        """Test that the call returns when the server just stops."""
        response = fake_response([DELTA_A])
        received: list[StreamEvent] = []

        dispatch_events(response, received.append)

        assert len(received) == 1
        assert response.close_calls == 1

    def test_callback_exception_closes_and_propagates(self, fake_response) -> None:
        """Test that a failing callback stops consumption."""
        response = fake_response([DELTA_A, DELTA_B, COMPLETE])
        received: list[StreamEvent] = []

        def callback(event: StreamEvent) -> None:
            received.append(event)
            raise CallbackBoom("stop")

        with pytest.raises(CallbackBoom):
            dispatch_events(response, callback)

        assert len(received) == 1
        assert response.chunks_read == 1
        assert response.close_calls == 1

    def test_transport_error_is_wrapped(self, fake_response) -> None:
        """Test that a dropped connection surfaces as APIConnectionError."""
        response = fake_response([DELTA_A, httpx.ReadError("connection reset")])
        received: list[StreamEvent] = []

        with pytest.raises(APIConnectionError) as exc_info:
            dispatch_events(response, received.append)

        assert not isinstance(exc_info.value, APITimeoutError)
        assert len(received) == 1
        assert response.close_calls == 1


# =============================================================================
# EventStream
# =============================================================================


class TestEventStream:
    """Tests for the pull strategy."""

    def test_iterates_all_events(self, fake_response) -> None:
        """Test a full iteration."""
        response = fake_response([DELTA_A + DELTA_B, COMPLETE])

        with EventStream(response) as stream:
            events = list(stream)

        assert [e.type for e in events] == ["response_delta", "response_delta", "complete"]
        assert stream.closed
        assert response.close_calls == 1

    def test_reads_lazily(self, fake_response) -> None:
        """Test that chunks are read only when an event is requested."""
        response = fake_response([DELTA_A, DELTA_B, COMPLETE])
        stream = EventStream(response)

        assert response.chunks_read == 0
        first = next(stream)

        assert first.get_text() == "a"
        assert response.chunks_read == 1
        stream.close()

    def test_closes_after_terminal_event(self, fake_response) -> None:
        """Test that the stream ends at complete even with more data pending."""
        response = fake_response([DELTA_A, COMPLETE + TRAILING, TRAILING])
        stream = EventStream(response)

        events = list(stream)

        assert [e.type for e in events] == ["response_delta", "complete"]
        assert stream.closed
        assert response.chunks_read == 2
        assert response.close_calls == 1

    def test_exhausted_stream_keeps_raising_stop_iteration(self, fake_response) -> None:
        """Test that the stream cannot be restarted."""
        stream = EventStream(fake_response([COMPLETE]))
        list(stream)

        with pytest.raises(StopIteration):
            next(stream)
        assert list(stream) == []

    def test_early_break_closes_exactly_once(self, fake_response) -> None:
        """Test abandoning the iteration inside a with block."""
        response = fake_response([DELTA_A, DELTA_B, COMPLETE])

        with EventStream(response) as stream:
            for _event in stream:
                break

        assert stream.closed
        assert response.chunks_read == 1
        assert response.close_calls == 1

    def test_close_is_idempotent(self, fake_response) -> None:
        """Test repeated close calls."""
        response = fake_response([DELTA_A, COMPLETE])
        stream = EventStream(response)
        next(stream)

        stream.close()
        stream.close()

        assert response.close_calls == 1
        with pytest.raises(StopIteration):
            next(stream)

    def test_close_before_reading(self, fake_response) -> None:
        """Test closing a stream that was never iterated."""
        response = fake_response([DELTA_A])
        stream = EventStream(response)

        stream.close()

        assert response.chunks_read == 0
        assert response.close_calls == 1
        assert list(stream) == []

    def test_garbage_collection_closes(self, fake_response) -> None:
        """Test that a forgotten stream releases its connection."""
        response = fake_response([DELTA_A, COMPLETE])
        stream = EventStream(response)
        next(stream)

        del stream
        gc.collect()

        assert response.close_calls == 1

    def test_unterminated_last_frame_is_flushed(self, fake_response) -> None:
        """Test a body that ends without the final blank line."""
        response = fake_response([DELTA_A, b'event: complete\ndata: {"executionId": "e2"}'])

        events = list(EventStream(response))

        assert events[-1].is_complete
        assert events[-1].get_execution_id() == "e2"
        assert response.close_calls == 1

    def test_timeout_is_wrapped_and_closes(self, fake_response) -> None:
        """Test that a read timeout surfaces as APITimeoutError."""
        response = fake_response([DELTA_A, httpx.ReadTimeout("timed out")])
        stream = EventStream(response)

        assert next(stream).get_text() == "a"
        with pytest.raises(APITimeoutError):
            next(stream)

        assert stream.closed
        assert response.close_calls == 1


# =============================================================================
# collect_events
# =============================================================================


class TestCollectEvents:
    """Tests for the collect strategy."""

    def test_collects_until_terminal(self, fake_response) -> None:
        """Test that collection stops at the terminal event."""
        response = fake_response([DELTA_A, DELTA_B, ERROR, TRAILING])

        events = collect_events(EventStream(response))

        assert [e.type for e in events] == ["response_delta", "response_delta", "error"]
        assert response.close_calls == 1

    def test_empty_body(self, fake_response) -> None:
        """Test a stream without any event."""
        response = fake_response([])

        assert collect_events(EventStream(response)) == []
        assert response.close_calls == 1

    def test_transport_error_propagates(self, fake_response) -> None:
        """Test that a failure mid-stream raises instead of returning partial events."""
        response = fake_response([DELTA_A, httpx.RemoteProtocolError("peer closed")])

        with pytest.raises(APIConnectionError):
            collect_events(EventStream(response))

        assert response.close_calls == 1
