"""Domain models and entities.

Why:
- Plain, strict data structures live here (Pydantic v2).
- The domain knows nothing about HTTP, the CLI or SDKs: only the concepts of the problem.
"""
