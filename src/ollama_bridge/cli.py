"""One-shot generation against Ollama from the command line."""
from __future__ import annotations
import argparse
import logging
import sys
from typing import TextIO

from ollama_bridge.common.config import load_settings
from ollama_bridge.common.errors import BridgeError
from ollama_bridge.common.logging_setup import setup_logging
from ollama_bridge.common.schema import GenerationOptions, StreamEvent, TaskKind
from ollama_bridge.common.templates import format_prompt
from ollama_bridge.upstream.client import OllamaClient
from ollama_bridge.upstream.consume import aggregate, relay
from ollama_bridge.upstream.decoder import decode

LOGGER = logging.getLogger("ollama_bridge.cli")


class ConsoleSink:
    """Writes each chunk as it arrives; a newline ends the stream."""

    def __init__(self, out: TextIO) -> None:
        self.out = out

    def send(self, event: StreamEvent) -> None:
        if not event.is_terminal:
            self.out.write(event.chunk)
            self.out.flush()

    def close(self) -> None:
        self.out.write("\n")
        self.out.flush()


def main(argv: list[str] | None = None, client: OllamaClient | None = None, out: TextIO | None = None) -> int:
    ap = argparse.ArgumentParser(description="Generate text through the Ollama bridge")
    ap.add_argument("--task", required=True, help="rephrase | custom | any other value for plain text")
    ap.add_argument("--prompt", default=None, help="Instruction used by the custom task")
    ap.add_argument("--text", default=None, help="Input text")
    ap.add_argument("--temperature", type=float, default=None)
    ap.add_argument("--top-p", type=float, default=None)
    ap.add_argument("--stream", action="store_true", help="Print fragments as they are decoded")
    ap.add_argument("--config", default=None, help="YAML config path")
    args = ap.parse_args(argv)
    out = out or sys.stdout

    try:
        settings = load_settings(args.config)
    except BridgeError as e:
        LOGGER.error("Invalid configuration: %s", e)
        return 1
    setup_logging(settings.log_level)
    client = client or OllamaClient(settings)

    prompt = format_prompt(TaskKind.parse(args.task), {"prompt": args.prompt, "text": args.text})
    options = GenerationOptions(temperature=args.temperature, top_p=args.top_p)

    try:
        raw_body = client.generate(prompt, options)
        if args.stream:
            n = relay(decode(raw_body), ConsoleSink(out))
            LOGGER.info("Relayed %d chunks", n)
        else:
            print(aggregate(decode(raw_body)).text, file=out)
    except BridgeError as e:
        LOGGER.error("Generation failed: %s", e)
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
