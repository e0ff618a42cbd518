"""Launch the bridge HTTP server with uvicorn."""
from __future__ import annotations
import argparse
import logging

import uvicorn

from ollama_bridge.common.config import load_settings
from ollama_bridge.common.logging_setup import setup_logging
from ollama_bridge.serve.fastapi_app import create_app

LOGGER = logging.getLogger("ollama_bridge.serve.server")

def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the Ollama bridge API")
    ap.add_argument("--config", default=None, help="YAML config path (default: $OLLAMA_BRIDGE_CONFIG)")
    ap.add_argument("--host", default="0.0.0.0")
    ap.add_argument("--port", type=int, default=8000)
    args = ap.parse_args()

    settings = load_settings(args.config)
    setup_logging(settings.log_level)
    LOGGER.info("Proxying %s (model %s, timeout %.1fs)", settings.ollama_host, settings.ollama_model, settings.timeout_s)

    app = create_app(settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())

if __name__ == "__main__":
    main()
