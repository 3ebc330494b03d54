"""Listing models."""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


class ListingStatus(str, Enum):
    """Review workflow states."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    NEEDS_REVISION = "needs_revision"
    PUBLISHED = "published"
    REJECTED = "rejected"


class ListingType(str, Enum):
    """Listing type values."""
    RESALE = "resale"
    PRESELLING = "preselling"


class TransactionType(str, Enum):
    SALE = "sale"
    RENT = "rent"


class Furnishing(str, Enum):
    UNFURNISHED = "unfurnished"
    SEMI_FURNISHED = "semi_furnished"
    FULLY_FURNISHED = "fully_furnished"


class Tenure(str, Enum):
    FREEHOLD = "freehold"
    LEASEHOLD = "leasehold"


class TitleStatus(str, Enum):
    CLEAN = "clean"
    MORTGAGED = "mortgaged"


class PaymentTerm(str, Enum):
    CASH = "cash"
    BANK = "bank"
    PAGIBIG = "pagibig"
    DEFERRED = "deferred"


# Fields a preselling listing must leave empty
RESALE_ONLY_FIELDS: tuple[str, ...] = (
    "price",
    "price_per_sqm",
    "floor_area_sqm",
    "lot_area_sqm",
    "furnishing",
    "construction_year",
    "title_status",
    "property_owner_name",
    "property_owner_contact",
    "property_owner_notes",
)

# Fields a resale listing must leave empty
PRESELLING_ONLY_FIELDS: tuple[str, ...] = (
    "model_name",
    "indicative_price",
    "indicative_price_min",
    "indicative_price_max",
    "min_lot_area",
    "min_floor_area",
    "standard_inclusions",
    "preselling_notes",
)

# Computed on every write, never taken from user input
DERIVED_LOCATION_FIELDS: tuple[str, ...] = (
    "city_name",
    "barangay_name",
    "township",
    "estate",
)


class Listing(BaseModel):
    """Property listing moving through the review workflow."""
    id: Optional[str] = Field(None, description="Listing ID (text)")
    title: str = Field(..., max_length=120, description="Listing title")
    description: Optional[Any] = Field(None, description="Rich-text description")
    listing_type: ListingType = Field(default=ListingType.RESALE, description="resale or preselling")
    status: ListingStatus = Field(default=ListingStatus.DRAFT, description="Workflow status")
    transaction_type: Optional[TransactionType] = Field(None, description="sale or rent")
    created_by: Optional[str] = Field(None, description="Owning user ID (text FK)")

    # Resale pricing and area
    price: Optional[float] = Field(None, ge=0, description="Base price")
    price_per_sqm: Optional[float] = Field(None, ge=0)
    floor_area_sqm: Optional[float] = Field(None, ge=0)
    lot_area_sqm: Optional[float] = Field(None, ge=0)

    # Preselling pricing and area
    indicative_price: Optional[float] = Field(None, ge=0)
    indicative_price_min: Optional[float] = Field(None, ge=0)
    indicative_price_max: Optional[float] = Field(None, ge=0)
    min_floor_area: Optional[float] = Field(None, ge=0)
    min_lot_area: Optional[float] = Field(None, ge=0)

    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    parking_slots: Optional[int] = Field(None, ge=0)

    # Resale attributes
    furnishing: Optional[Furnishing] = None
    construction_year: Optional[int] = Field(None, ge=1900, le=2100)
    tenure: Optional[Tenure] = None
    title_status: Optional[TitleStatus] = None
    payment_terms: list[PaymentTerm] = Field(default_factory=list)
    property_owner_name: Optional[str] = None
    property_owner_contact: Optional[str] = None
    property_owner_notes: Optional[str] = None

    # Preselling attributes
    model_name: Optional[str] = Field(None, description="Unit model name, e.g. 2BR Unit Type A")
    standard_inclusions: Optional[Any] = None
    preselling_notes: Optional[str] = None

    # Classification
    property_category: Optional[str] = Field(None, description="PropertyCategory ID")
    property_type: Optional[str] = Field(None, description="PropertyType ID")
    property_subtype: Optional[str] = Field(None, description="PropertySubtype ID")

    # Location
    city: Optional[str] = Field(None, description="City PSGC code")
    barangay: Optional[str] = Field(None, description="Barangay PSGC code")
    development: Optional[str] = Field(None, description="Development ID")
    city_name: Optional[str] = Field(None, description="Derived from city code")
    barangay_name: Optional[str] = Field(None, description="Derived from barangay code")
    township: Optional[str] = Field(None, description="Derived Township ID")
    estate: Optional[str] = Field(None, description="Derived Estate ID")
    full_address: Optional[str] = None

    images: list[str] = Field(default_factory=list, description="Media IDs")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
