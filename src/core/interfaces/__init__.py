"""Core interfaces/abstractions.

- Contracts (Protocol) implemented by concrete adapters.
- The core depends on these, never on a specific HTTP client.
"""
