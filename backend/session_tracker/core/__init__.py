"""Functional Core — pure domain logic for session entries.

Invariants:
    - No IO, no async, no DB access in this package
    - Shell layers (infrastructure/, services/, api/) depend on core, never the reverse
"""
