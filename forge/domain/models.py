"""
Domain models for farms, boundaries and site evaluations.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, FrozenSet, List, Optional
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class InfrastructureType(str, Enum):
    """Closed set of infrastructure categories a site can be quoted for."""
    POLYHOUSE = "Polyhouse"
    SHADE_NET = "Shade Net"
    OPEN_FIELD = "Open Field"


class AreaUnit(str, Enum):
    ACRES = "acres"
    SQUARE_METERS = "sqmeters"


class EvaluationStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"


class BoundaryPoint(BaseModel):
    """Single vertex of a land boundary polygon."""
    lat: float = Field(ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(ge=-180, le=180, description="Longitude in degrees")
    id: str = Field(
        default_factory=lambda: f"point-{uuid.uuid4().hex[:8]}",
        description="Synthetic id used by the drawing UI"
    )


class Farm(BaseModel):
    """Named container grouping site evaluations."""
    id: str = Field(default_factory=new_id)
    owner_id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SiteEvaluation(BaseModel):
    """A surveyed land parcel with its derived area, recommendation and cost."""
    id: str = Field(default_factory=new_id)
    owner_id: str
    name: str
    farm_id: Optional[str] = None
    boundary: List[BoundaryPoint] = Field(default_factory=list)
    area: float = Field(ge=0)
    area_unit: AreaUnit = AreaUnit.ACRES
    slope: Optional[float] = Field(default=None, ge=0)
    infrastructure_recommendation: Optional[InfrastructureType] = None
    cost_estimate: Optional[int] = Field(
        default=None,
        ge=0,
        description="Server-computed cost, never accepted from a client"
    )
    cost_currency: str = "INR"
    status: EvaluationStatus = EvaluationStatus.DRAFT
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class EvaluationPatch(BaseModel):
    """
    Fields a client may change on an existing evaluation.

    Only fields present in ``model_fields_set`` are applied. Cost is
    not a patchable field.
    """
    name: Optional[str] = None
    farm_id: Optional[str] = None
    boundary: Optional[List[BoundaryPoint]] = None
    area: Optional[float] = None
    area_unit: Optional[AreaUnit] = None
    slope: Optional[float] = Field(default=None, ge=0)
    infrastructure_recommendation: Optional[str] = None
    cost_currency: Optional[str] = None

    # Fields that feed the cost computation
    COST_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"area", "area_unit", "infrastructure_recommendation"})
    # Fields frozen once an evaluation has been submitted
    LOCKED_AFTER_SUBMIT: ClassVar[FrozenSet[str]] = frozenset({"boundary", "area", "area_unit", "infrastructure_recommendation"})

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class FarmPatch(BaseModel):
    """Fields a client may change on an existing farm."""
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
