"""ORM Models — SQLAlchemy declarative models mirroring the hosted database tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - The hosted database owns the schema; these models are used for queries and test databases

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from urbanestate.models.profile import Profile  # noqa: F401
from urbanestate.models.property import Property, PropertyPhoto, PropertyBlock  # noqa: F401
from urbanestate.models.availability_slot import AvailabilitySlot  # noqa: F401
from urbanestate.models.booking import Booking  # noqa: F401
from urbanestate.models.lead import Lead  # noqa: F401
from urbanestate.models.household_item import HouseholdItem  # noqa: F401
from urbanestate.models.marketplace_request import MarketplaceRequest  # noqa: F401
from urbanestate.models.audit_log import AuditLog  # noqa: F401
