"""Curated shared search links and the filter set they carry."""

from typing import Optional
from pydantic import BaseModel, Field

from mls.models.listing import Listing, ListingType, TransactionType


class ListingSearchFilters(BaseModel):
    """Search filters over published listings."""
    listing_type: Optional[ListingType] = None
    transaction_type: Optional[TransactionType] = None

    # Direct location filters
    city: Optional[str] = Field(None, description="City PSGC code")
    barangay: Optional[str] = Field(None, description="Barangay PSGC code")
    development: Optional[str] = None

    # Expanded location filters
    township: Optional[str] = Field(None, description="Expands to covered barangays")
    estate: Optional[str] = Field(None, description="Expands to included developments")

    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    bedrooms_min: Optional[int] = Field(None, ge=0)
    bathrooms_min: Optional[int] = Field(None, ge=0)
    floor_area_min: Optional[float] = Field(None, ge=0)
    lot_area_min: Optional[float] = Field(None, ge=0)

    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(None, ge=1)


class SharedLink(BaseModel):
    """Read-only view of published listings for unauthenticated clients."""
    id: Optional[str] = None
    title: str = Field(..., description="e.g. Properties for John - Cagayan de Oro")
    slug: str = Field(..., description="Unique public identifier")
    filters: ListingSearchFilters = Field(default_factory=ListingSearchFilters)
    created_by: str = Field(..., description="Creator user ID")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ListingPage(BaseModel):
    """One page of search results with pagination metadata."""
    docs: list[Listing] = Field(default_factory=list)
    total_docs: int = 0
    limit: int
    page: int = 1
    total_pages: int = 0
    has_next_page: bool = False
    has_prev_page: bool = False
    next_page: Optional[int] = None
    prev_page: Optional[int] = None


class ExternalShareLink(BaseModel):
    """Tokenized link giving an external client read access to one published listing."""
    id: Optional[str] = None
    token: str = Field(..., description="URL-safe secret used in the share URL")
    listing: str = Field(..., description="Shared listing ID")
    created_by: str = Field(..., description="Creator user ID")
    expires_at: Optional[str] = Field(None, description="No expiry when empty")
    is_active: bool = Field(default=True, description="False once revoked")
    view_count: int = Field(default=0, ge=0)
    last_viewed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
