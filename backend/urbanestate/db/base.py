"""SQLAlchemy Declarative Base — metadata for the hosted marketplace tables.

Invariants:
    - Every ORM model in urbanestate.models inherits from Base
    - Tables are owned by the hosted database; Base.metadata only creates them in tests

Design Decisions:
    - Own module: models import Base without importing each other
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for profiles, listings, bookings, leads and the marketplace."""
