"""Buffered and relayed consumption of a fragment sequence."""
from __future__ import annotations
import json
from typing import Iterable, Iterator, Protocol

from ollama_bridge.common.schema import GenerationResult, StreamEvent

SSE_DONE = b"data: [DONE]\n\n"


class EventSink(Protocol):
    def send(self, event: StreamEvent) -> None: ...

    def close(self) -> None: ...


def aggregate(fragments: Iterable[str]) -> GenerationResult:
    """
    Join fragments in order and trim the result.

    Errors raised by the sequence propagate; nothing partial is returned.
    """
    return GenerationResult(text="".join(fragments).strip())


def relay_events(fragments: Iterable[str]) -> Iterator[StreamEvent]:
    """Yield one chunk event per fragment, then the sentinel on clean exhaustion."""
    for fragment in fragments:
        yield StreamEvent(chunk=fragment)
    yield StreamEvent.done()


def relay(fragments: Iterable[str], sink: EventSink) -> int:
    """
    Forward each fragment to `sink` as soon as it is produced.

    The sink is closed only after the sentinel. If the sequence fails, the
    error propagates, events already sent stay sent, and the sink receives
    neither sentinel nor close.

    Returns:
        Number of chunk events sent.
    """
    sent = 0
    for event in relay_events(fragments):
        sink.send(event)
        if not event.is_terminal:
            sent += 1
    sink.close()
    return sent


def encode_sse(event: StreamEvent) -> bytes:
    """Encode an event as one SSE `data:` frame."""
    if event.is_terminal:
        return SSE_DONE
    payload = json.dumps({"chunk": event.chunk}, ensure_ascii=False, separators=(",", ":"))
    return f"data: {payload}\n\n".encode("utf-8")
