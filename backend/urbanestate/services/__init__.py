"""Services Layer — async orchestration of database queries, core rules and model calls.

Invariants:
    - Services raise core/errors.py exceptions; routes never build error responses themselves
    - Model failures degrade to rule-based results wherever a rule-based result exists

Design Decisions:
    - Functions take an explicit AsyncSession and AuthContext instead of reading request state
"""
