"""Prompt templating helpers."""
from __future__ import annotations
from typing import Callable, Mapping, Optional

from ollama_bridge.common.schema import TaskKind

REPHRASE_PREFIX = "rephrase : "
REVIEW_CLAUSE = "\nYou are a security expertRespond in the same sense and language as the text provided here : "

Context = Mapping[str, Optional[str]]


def _rephrase(context: Context) -> str:
    return REPHRASE_PREFIX + (context.get("text") or "")


def _custom(context: Context) -> str:
    prompt = context.get("prompt") or ""
    text = context.get("text")
    if text:
        return prompt + REVIEW_CLAUSE + text
    return prompt


def _passthrough(context: Context) -> str:
    return context.get("text") or ""


_RENDERERS: dict[TaskKind, Callable[[Context], str]] = {
    TaskKind.REPHRASE: _rephrase,
    TaskKind.CUSTOM: _custom,
    TaskKind.OTHER: _passthrough,
}

_missing = set(TaskKind) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"No prompt renderer for task kinds: {sorted(k.value for k in _missing)}")


def format_prompt(task: TaskKind | str, context: Context) -> str:
    """
    Build the final prompt for a task.

    Args:
        task: Task kind; plain strings outside the enum fall back to OTHER.
        context: Mapping with optional "prompt" and "text" entries.

    Returns:
        Prompt string sent to the model.
    """
    kind = task if isinstance(task, TaskKind) else TaskKind.parse(task)
    return _RENDERERS[kind](context)
