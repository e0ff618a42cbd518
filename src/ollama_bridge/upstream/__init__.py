"""Upstream Ollama access: HTTP client, body decoding and consumption."""
