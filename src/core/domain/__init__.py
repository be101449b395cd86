"""Domain models and entities.

- Pure, strict data structures (Pydantic v2).
- The domain knows nothing about HTTP or the CLI.
"""
