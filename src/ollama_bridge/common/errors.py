"""Error types raised by the bridge."""
from __future__ import annotations


class BridgeError(Exception):
    """Base class for every failure the bridge reports to callers."""


class ConfigError(BridgeError):
    """Invalid configuration value."""


class InvalidRequest(BridgeError):
    """Caller request is missing a required field."""


class UpstreamUnavailable(BridgeError):
    """Network failure, timeout or non-success status from Ollama."""


class MalformedStreamRecord(BridgeError):
    """A line of the upstream body is not valid JSON."""

    def __init__(self, line_no: int, detail: str) -> None:
        super().__init__(f"Malformed stream record at line {line_no}: {detail}")
        self.line_no = line_no
