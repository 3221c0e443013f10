"""
Application service: Site evaluation lifecycle.

Coordinates the repositories with the cost engine and proposal renderer.
Cost estimates are only ever produced here, from the record's area and
infrastructure recommendation.
"""
import math
from typing import List, Optional, Sequence
import logging

import pydantic

from forge.config import settings
from forge.domain.errors import InvalidStateError, NotFoundError, ValidationError
from forge.domain.models import (
    AreaUnit,
    BoundaryPoint,
    EvaluationPatch,
    EvaluationStatus,
    InfrastructureType,
    SiteEvaluation,
)
from forge.infrastructure.repositories import EvaluationRepository, FarmRepository
from forge.services.domain.cost_engine import calculate_cost, parse_infrastructure
from forge.services.domain.geometry_engine import square_meters_to_acres
from forge.services.domain.proposal_renderer import ProposalDocument, ProposalRenderer

logger = logging.getLogger(__name__)


def _area_in_acres(area: float, unit: AreaUnit) -> float:
    if unit == AreaUnit.SQUARE_METERS:
        return square_meters_to_acres(area)
    return area


def _check_area(area: Optional[float]) -> float:
    if area is None:
        raise ValidationError("Area is required")
    if not math.isfinite(area) or area < 0:
        raise ValidationError("Area must be a finite number >= 0")
    return area


def _check_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Site name is required")
    return name.strip()


def _validated(data: dict) -> SiteEvaluation:
    try:
        return SiteEvaluation.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid site evaluation: {e.errors()[0]['msg']}") from e


class EvaluationService:
    """
    Application service owning the SiteEvaluation state machine.

    draft -> submitted is the only transition; submitted records keep
    their boundary, area and infrastructure frozen.
    """

    def __init__(
        self,
        evaluations: EvaluationRepository,
        farms: FarmRepository,
        renderer: Optional[ProposalRenderer] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            evaluations: Owner-scoped evaluation storage
            farms: Owner-scoped farm storage, used to resolve farm references
            renderer: Proposal PDF renderer
        """
        self.evaluations = evaluations
        self.farms = farms
        self.renderer = renderer or ProposalRenderer()

    def _require(self, owner_id: str, evaluation_id: str) -> SiteEvaluation:
        evaluation = self.evaluations.get(owner_id, evaluation_id)
        if evaluation is None:
            raise NotFoundError("Site evaluation not found")
        return evaluation

    def _require_farm(self, owner_id: str, farm_id: str) -> None:
        if self.farms.get(owner_id, farm_id) is None:
            raise NotFoundError("Farm not found")

    def list_evaluations(self, owner_id: str, farm_id: Optional[str] = None) -> List[SiteEvaluation]:
        return self.evaluations.list(owner_id, farm_id=farm_id)

    def get_evaluation(self, owner_id: str, evaluation_id: str) -> SiteEvaluation:
        return self._require(owner_id, evaluation_id)

    def create_evaluation(
        self,
        owner_id: str,
        name: Optional[str],
        area: Optional[float],
        boundary: Optional[Sequence[BoundaryPoint]] = None,
        infrastructure_recommendation: Optional[str] = None,
        farm_id: Optional[str] = None,
        area_unit: Optional[AreaUnit] = None,
        slope: Optional[float] = None,
        cost_currency: Optional[str] = None,
    ) -> SiteEvaluation:
        """
        Create a draft evaluation.

        The cost estimate is computed when both an area and an
        infrastructure recommendation are given, otherwise left unset.

        Raises:
            ValidationError: Missing name or area, negative area, unknown
                infrastructure category
            NotFoundError: farm_id does not name one of the owner's farms
        """
        name = _check_name(name)
        area = _check_area(area)
        area_unit = area_unit or AreaUnit.ACRES

        if farm_id is not None:
            self._require_farm(owner_id, farm_id)

        infrastructure: Optional[InfrastructureType] = None
        cost_estimate: Optional[int] = None
        if infrastructure_recommendation is not None:
            infrastructure = parse_infrastructure(infrastructure_recommendation)
            cost_estimate = calculate_cost(_area_in_acres(area, area_unit), infrastructure)

        evaluation = _validated({
            "owner_id": owner_id,
            "name": name,
            "farm_id": farm_id,
            "boundary": list(boundary or []),
            "area": area,
            "area_unit": area_unit,
            "slope": slope,
            "infrastructure_recommendation": infrastructure,
            "cost_estimate": cost_estimate,
            "cost_currency": cost_currency or settings.default_currency,
        })
        created = self.evaluations.create(evaluation)
        logger.info(f"Created site evaluation {created.id} for owner {owner_id}")
        return created

    def update_evaluation(
        self,
        owner_id: str,
        evaluation_id: str,
        patch: EvaluationPatch,
    ) -> SiteEvaluation:
        """
        Apply a partial update.

        Touching area, area unit or infrastructure recommendation
        recomputes the cost estimate from the resulting record. Nothing is
        written if any part of the update is invalid.

        Raises:
            NotFoundError: Evaluation (or referenced farm) not in the owner's scope
            InvalidStateError: Locked fields changed on a submitted evaluation
            ValidationError: Invalid field values or cost parameters
        """
        existing = self._require(owner_id, evaluation_id)
        changes = patch.changes()

        if existing.status == EvaluationStatus.SUBMITTED:
            locked = sorted(EvaluationPatch.LOCKED_AFTER_SUBMIT & changes.keys())
            if locked:
                raise InvalidStateError(
                    f"Submitted evaluations cannot change: {', '.join(locked)}"
                )

        if "name" in changes:
            changes["name"] = _check_name(changes["name"])
        if "area" in changes:
            changes["area"] = _check_area(changes["area"])
        for field in ("area_unit", "cost_currency", "boundary"):
            if field in changes and changes[field] is None:
                del changes[field]
        if changes.get("farm_id") is not None:
            self._require_farm(owner_id, changes["farm_id"])

        if "infrastructure_recommendation" in changes and changes["infrastructure_recommendation"] is not None:
            changes["infrastructure_recommendation"] = parse_infrastructure(
                changes["infrastructure_recommendation"]
            )

        if EvaluationPatch.COST_FIELDS & changes.keys():
            infrastructure = changes.get(
                "infrastructure_recommendation", existing.infrastructure_recommendation
            )
            area = changes.get("area", existing.area)
            unit = changes.get("area_unit", existing.area_unit)
            changes["cost_estimate"] = (
                calculate_cost(_area_in_acres(area, unit), infrastructure)
                if infrastructure is not None
                else None
            )

        _validated({**existing.model_dump(), **changes})

        updated = self.evaluations.update(owner_id, evaluation_id, changes)
        if updated is None:
            raise NotFoundError("Site evaluation not found")
        logger.info(f"Updated site evaluation {evaluation_id}: {sorted(changes)}")
        return updated

    def submit_evaluation(self, owner_id: str, evaluation_id: str) -> SiteEvaluation:
        """
        Move a draft evaluation to submitted.

        Raises:
            NotFoundError: Evaluation not in the owner's scope
            InvalidStateError: Evaluation already submitted
        """
        existing = self._require(owner_id, evaluation_id)
        if existing.status != EvaluationStatus.DRAFT:
            raise InvalidStateError("Site evaluation has already been submitted")

        updated = self.evaluations.update(
            owner_id, evaluation_id, {"status": EvaluationStatus.SUBMITTED}
        )
        if updated is None:
            raise NotFoundError("Site evaluation not found")
        logger.info(f"Submitted site evaluation {evaluation_id}")
        return updated

    def delete_evaluation(self, owner_id: str, evaluation_id: str) -> None:
        if not self.evaluations.delete(owner_id, evaluation_id):
            raise NotFoundError("Site evaluation not found")
        logger.info(f"Deleted site evaluation {evaluation_id}")

    def render_proposal_pdf(self, owner_id: str, evaluation_id: str) -> ProposalDocument:
        """
        Render the proposal PDF for a submitted evaluation.

        Raises:
            NotFoundError: Evaluation not in the owner's scope
            InvalidStateError: Evaluation is still a draft
        """
        evaluation = self._require(owner_id, evaluation_id)

        farm_name = None
        if evaluation.farm_id:
            farm = self.farms.get(owner_id, evaluation.farm_id)
            farm_name = farm.name if farm else None

        return self.renderer.render(evaluation, farm_name=farm_name)
