"""Property Schemas — listing, block and photo models for the properties API.

Invariants:
    - Create requires title, type, rent, city; everything else has defaults
    - Update is partial: only fields explicitly sent are applied
    - Block ranges must satisfy start_date <= end_date
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from urbanestate.core.domain_types import ListingStatus, PropertyType


class PhotoIn(BaseModel):
    url: str = Field(min_length=1, max_length=2048)
    position: int = Field(0, ge=0)
    is_cover: bool = False


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    position: int
    is_cover: bool


class PropertyCreate(BaseModel):
    """New listing. Free-text fields are sanitized in the service."""
    title: str = Field(min_length=3, max_length=200)
    type: PropertyType
    rent: float = Field(gt=0)
    deposit: float | None = Field(None, ge=0)
    currency: str = Field("AED", min_length=3, max_length=3)
    city: str = Field(min_length=1, max_length=100)
    area: str | None = Field(None, max_length=100)
    street_address: str | None = Field(None, max_length=255)
    beds: int = Field(0, ge=0, le=50)
    baths: int = Field(0, ge=0, le=50)
    size_sqft: int | None = Field(None, gt=0)
    furnished: bool = False
    amenities: list[str] = Field(default_factory=list, max_length=50)
    description: str | None = Field(None, max_length=10_000)
    status: ListingStatus = ListingStatus.DRAFT
    photos: list[PhotoIn] = Field(default_factory=list, max_length=30)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class PropertyUpdate(BaseModel):
    title: str | None = Field(None, min_length=3, max_length=200)
    type: PropertyType | None = None
    rent: float | None = Field(None, gt=0)
    deposit: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    city: str | None = Field(None, min_length=1, max_length=100)
    area: str | None = Field(None, max_length=100)
    street_address: str | None = Field(None, max_length=255)
    beds: int | None = Field(None, ge=0, le=50)
    baths: int | None = Field(None, ge=0, le=50)
    size_sqft: int | None = Field(None, gt=0)
    furnished: bool | None = None
    amenities: list[str] | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=10_000)
    status: ListingStatus | None = None
    photos: list[PhotoIn] | None = Field(None, max_length=30)


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: UUID
    title: str
    type: str
    rent: float
    deposit: float | None
    currency: str
    city: str
    area: str | None
    street_address: str | None
    beds: int
    baths: int
    size_sqft: int | None
    furnished: bool
    amenities: list[str]
    description: str | None
    status: str
    photos: list[PhotoResponse] = []
    created_at: datetime


class PropertyListResponse(BaseModel):
    items: list[PropertyResponse]
    total: int
    page: int
    page_size: int


class BlockCreate(BaseModel):
    start_date: date
    end_date: date
    note: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_range(self) -> "BlockCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class BlockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    start_date: date
    end_date: date
    note: str | None
