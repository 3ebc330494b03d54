"""Property classification master data: category -> type -> subtype."""

from typing import Optional
from pydantic import BaseModel, Field


class PropertyCategory(BaseModel):
    """Top-level classification (e.g. Residential, Commercial)."""
    id: str = Field(..., description="Category ID (text)")
    name: str = Field(..., description="Display name")
    slug: Optional[str] = None
    is_active: bool = True


class PropertyType(BaseModel):
    """Type within a category (e.g. House & Lot, Condominium)."""
    id: str = Field(..., description="Type ID (text)")
    name: str = Field(..., description="Display name")
    category: Optional[str] = Field(None, description="Parent PropertyCategory ID")
    slug: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    @property
    def is_lot_type(self) -> bool:
        """Lot/land types are priced per square metre of lot area."""
        lowered = self.name.lower()
        return "lot" in lowered or "land" in lowered


class PropertySubtype(BaseModel):
    """Subtype within a type (e.g. Townhouse, Studio)."""
    id: str = Field(..., description="Subtype ID (text)")
    name: str = Field(..., description="Display name")
    property_type: Optional[str] = Field(None, description="Parent PropertyType ID")
    slug: Optional[str] = None
    is_active: bool = True
