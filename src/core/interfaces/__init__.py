"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) that concrete adapters implement.
- Inverts dependencies: services depend on abstractions, not on the OpenAI SDK
  or on the notes file format.
"""
