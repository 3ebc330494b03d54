"""Location master data models (PSGC-coded cities and barangays, local developments)."""

from typing import Optional
from pydantic import BaseModel, Field


class City(BaseModel):
    id: Optional[str] = None
    psgc_code: str = Field(..., description="PSGC city/municipality code")
    name: str
    province: Optional[str] = None
    is_active: bool = True


class Barangay(BaseModel):
    id: Optional[str] = None
    psgc_code: str = Field(..., description="PSGC barangay code")
    name: str
    city: Optional[str] = Field(None, description="Parent city PSGC code")
    is_active: bool = True


class Development(BaseModel):
    """A subdivision/project located in one barangay."""
    id: str = Field(..., description="Development ID (text)")
    name: str
    barangay: Optional[str] = Field(None, description="Barangay PSGC code")
    city: Optional[str] = None
    slug: Optional[str] = None
    is_active: bool = True


class Township(BaseModel):
    """Market-recognized area spanning multiple barangays."""
    id: str
    name: str
    slug: Optional[str] = None
    covered_barangays: list[str] = Field(default_factory=list, description="Barangay PSGC codes")
    is_active: bool = True

    def covers(self, barangay_code: str) -> bool:
        return barangay_code in self.covered_barangays


class Estate(BaseModel):
    """Branded grouping of multiple developments."""
    id: str
    name: str
    slug: Optional[str] = None
    included_developments: list[str] = Field(default_factory=list, description="Development IDs")
    is_active: bool = True

    def includes(self, development_id: str) -> bool:
        return development_id in self.included_developments
