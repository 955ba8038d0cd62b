"""Infrastructure Layer — external clients and process-wide plumbing.

Invariants:
    - Every external failure is mapped to a core/errors.py exception before leaving this layer

Design Decisions:
    - Anthropic, database, logging and the rate-limit sweeper live here, never in core/
"""
