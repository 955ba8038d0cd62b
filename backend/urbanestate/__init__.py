"""UrbanEstate Application Package — rentals, household marketplace and AI-assisted listings.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
