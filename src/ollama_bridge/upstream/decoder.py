"""Incremental decoding of Ollama's newline-delimited JSON body.

Ollama answers /api/generate with one JSON object per line:

    {"model": "...", "response": "Hel", "done": false}
    {"model": "...", "response": "lo", "done": false}
    {"model": "...", "response": "", "done": true, ...}

The body is already fully read when decoding starts; FragmentStream hands the
fragments out one at a time so a relay can forward each before the next line
is parsed.
"""
from __future__ import annotations
import json
import logging
from typing import Iterator

from ollama_bridge.common.errors import MalformedStreamRecord

LOGGER = logging.getLogger("ollama_bridge.upstream.decoder")

FRAGMENT_FIELD = "response"


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


PENDING = "pending"
EXHAUSTED = "exhausted"
FAILED = "failed"


class FragmentStream:
    """
    Finite, non-restartable iterator of text fragments.

    `state` moves from "pending" to either "exhausted" (end of body reached)
    or "failed" (a line was not JSON). Once terminal, iteration stops.
    """

    def __init__(self, raw_body: str) -> None:
        self._lines = iter(enumerate(raw_body.split("\n"), start=1))
        self.state = PENDING
        self.done_seen = False
        self.emitted = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self.state != PENDING:
            raise StopIteration
        for line_no, line in self._lines:
            if not line.strip():
                continue
            try:
                record = json.loads(line, parse_constant=_reject_constant)
            except ValueError as e:
                self.state = FAILED
                LOGGER.error("Undecodable line %d after %d fragments: %s", line_no, self.emitted, e)
                raise MalformedStreamRecord(line_no, str(e)) from e
            if not isinstance(record, dict):
                continue
            if record.get("done") is True:
                # observed only; later lines are still decoded
                self.done_seen = True
            fragment = record.get(FRAGMENT_FIELD)
            if isinstance(fragment, str) and fragment:
                self.emitted += 1
                return fragment
        self.state = EXHAUSTED
        raise StopIteration


def decode(raw_body: str) -> FragmentStream:
    """Wrap a raw upstream body in a lazy fragment iterator."""
    return FragmentStream(raw_body)
