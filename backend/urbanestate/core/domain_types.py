"""Domain Types — enums and identity types shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in services
    - Enum values match the string values stored by the hosted database

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProfileId = NewType("ProfileId", UUID)
PropertyId = NewType("PropertyId", UUID)
SlotId = NewType("SlotId", UUID)
BookingId = NewType("BookingId", UUID)
LeadId = NewType("LeadId", UUID)
ItemId = NewType("ItemId", UUID)


# ─── Accounts ────────────────────────────────────────────────────

class UserRole(str, Enum):
    CUSTOMER = "customer"
    AGENT = "agent"
    ADMIN = "admin"


# ─── Listings ────────────────────────────────────────────────────

class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    FLAT = "flat"


class ListingStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class ItemCategory(str, Enum):
    """Household marketplace categories."""
    FURNITURE = "furniture"
    ELECTRONICS = "electronics"
    APPLIANCES = "appliances"
    KITCHEN = "kitchen"
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    DECOR = "decor"
    LIGHTING = "lighting"
    STORAGE = "storage"
    OUTDOOR = "outdoor"
    KIDS = "kids"
    OTHER = "other"


class ItemCondition(str, Enum):
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"
    USED = "used"


class ItemStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    REMOVED = "removed"


# ─── Scheduling ──────────────────────────────────────────────────

class BookingStatus(str, Enum):
    """Visit booking lifecycle — pending until an agent confirms."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class RequestStatus(str, Enum):
    """Marketplace purchase request lifecycle."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ─── Leads ───────────────────────────────────────────────────────

class LeadTemperature(str, Enum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CLOSED = "closed"


# ─── AI features ─────────────────────────────────────────────────

class ListingTone(str, Enum):
    PREMIUM = "premium"
    FAMILY = "family"
    STUDENT = "student"


class ComplianceMode(str, Enum):
    """quick = regex only (as-you-type); full = regex + model (pre-publish);
    sanitize = regex result plus the text with flagged phrases removed."""
    QUICK = "quick"
    FULL = "full"
    SANITIZE = "sanitize"


class FraudRecommendation(str, Enum):
    APPROVE = "approve"
    REVIEW = "review"
    REJECT = "reject"
