"""
API request models using Pydantic.

Required business fields (names, area) are optional at this layer so that
their absence is reported by the services as a 400 with a clear message.
Unknown fields, including any client-supplied cost, are ignored.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from forge.domain.models import AreaUnit, BoundaryPoint


class SiteEvaluationCreateRequest(BaseModel):
    """Body for creating a site evaluation."""
    name: Optional[str] = Field(default=None, examples=["North plot"])
    area: Optional[float] = Field(default=None, description="Parcel area in area_unit", examples=[6])
    area_unit: Optional[AreaUnit] = None
    farm_id: Optional[str] = None
    boundary: List[BoundaryPoint] = Field(default_factory=list)
    slope: Optional[float] = Field(default=None, ge=0)
    infrastructure_recommendation: Optional[str] = Field(
        default=None,
        examples=["Shade Net"]
    )
    cost_currency: Optional[str] = None


class FarmCreateRequest(BaseModel):
    """Body for creating a farm."""
    name: Optional[str] = Field(default=None, examples=["Green Acres"])
    description: Optional[str] = None
    location: Optional[str] = None


class BoundaryRequest(BaseModel):
    """Boundary to measure."""
    boundary: List[BoundaryPoint] = Field(
        description="Ordered boundary points; the ring is closed implicitly"
    )
