"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9


class TaskKind(str, Enum):
    """How a prompt is assembled from the caller's fields."""
    REPHRASE = "rephrase"
    CUSTOM = "custom"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "TaskKind":
        """Map a task string to a kind; unknown strings become OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class GenerationOptions(BaseModel):
    """Sampling options forwarded to Ollama without range checks."""
    temperature: Optional[float] = None
    top_p: Optional[float] = Field(default=None, validation_alias=AliasChoices("top_p", "topP"))

    def to_upstream(self) -> dict[str, float]:
        return {
            "temperature": DEFAULT_TEMPERATURE if self.temperature is None else self.temperature,
            "top_p": DEFAULT_TOP_P if self.top_p is None else self.top_p,
        }


class GenerateIn(BaseModel):
    task: Optional[str] = None
    prompt: Optional[str] = None
    text: Optional[str] = None
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class GenerateOut(BaseModel):
    response: str


@dataclass
class GenerationRequest:
    """Validated generation call, built from a GenerateIn."""
    task: TaskKind
    prompt_text: str = ""
    context_text: str = ""
    options: GenerationOptions = field(default_factory=GenerationOptions)


@dataclass
class GenerationResult:
    """Buffered-mode output."""
    text: str


@dataclass(frozen=True)
class StreamEvent:
    """One relayed fragment, or the terminal sentinel when chunk is None."""
    chunk: Optional[str] = None

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(chunk=None)

    @property
    def is_terminal(self) -> bool:
        return self.chunk is None
