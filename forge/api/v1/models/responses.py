"""
API response models using Pydantic.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from forge.domain.models import (
    AreaUnit,
    BoundaryPoint,
    EvaluationStatus,
    InfrastructureType,
)


class SiteEvaluationResponse(BaseModel):
    """A site evaluation as returned to clients."""
    id: str
    name: str
    farm_id: Optional[str] = None
    boundary: List[BoundaryPoint]
    area: float
    area_unit: AreaUnit
    slope: Optional[float] = None
    infrastructure_recommendation: Optional[InfrastructureType] = None
    cost_estimate: Optional[int] = Field(
        default=None,
        description="Server-computed cost estimate"
    )
    cost_currency: str
    status: EvaluationStatus
    created_at: datetime
    updated_at: datetime


class SiteEvaluationListResponse(BaseModel):
    count: int
    results: List[SiteEvaluationResponse]


class FarmResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class FarmListResponse(BaseModel):
    count: int
    results: List[FarmResponse]


class FormattedMeasureResponse(BaseModel):
    value: float
    unit: str


class PolygonMetricsResponse(BaseModel):
    """Measurements of a boundary polygon."""
    point_count: int
    area_sq_meters: float = Field(description="Enclosed area in m²")
    area_acres: float
    perimeter_meters: float
    formatted_area: FormattedMeasureResponse
    formatted_perimeter: FormattedMeasureResponse
    provider: str = Field(description="Geometry provider used for the measurement")

    class Config:
        json_schema_extra = {
            "example": {
                "point_count": 4,
                "area_sq_meters": 1000000.0,
                "area_acres": 247.11,
                "perimeter_meters": 4000.0,
                "formatted_area": {"value": 247.11, "unit": "acres"},
                "formatted_perimeter": {"value": 4.0, "unit": "km"},
                "provider": "spherical",
            }
        }


class SlopeResponse(BaseModel):
    """Slope estimate of a boundary from terrain elevations."""
    slope_percent: float
    min_elevation: Optional[float] = None
    max_elevation: Optional[float] = None
    elevations: List[float]


class MessageResponse(BaseModel):
    message: str
