"""Domain models.

Why:
- Pure, strict data structures (Pydantic v2) for request and response payloads.
- The domain knows nothing about HTTP, the CLI, or the server process.
"""
