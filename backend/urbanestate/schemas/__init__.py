"""API Schemas — Pydantic request/response models for every route.

Invariants:
    - Request models validate shape and bounds; domain rules run in services
"""
