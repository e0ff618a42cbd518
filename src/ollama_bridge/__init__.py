"""
Ollama bridge package.

Provides:
- Prompt formatting per task kind
- Ollama HTTP client with newline-delimited JSON decoding
- FastAPI surface with buffered and SSE generation modes
"""
