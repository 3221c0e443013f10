"""
API router for site evaluation endpoints.
"""
from fastapi import APIRouter, Path, Query, Response, status
from typing import Annotated, Optional

from forge.api.dependencies import EvaluationServiceDep, OwnerIdDep
from forge.api.v1.models.requests import SiteEvaluationCreateRequest
from forge.api.v1.models.responses import (
    MessageResponse,
    SiteEvaluationListResponse,
    SiteEvaluationResponse,
)
from forge.domain.models import EvaluationPatch


router = APIRouter(
    prefix="/site-evaluations",
    tags=["site-evaluations"],
    responses={
        404: {"description": "Site evaluation not found for this user"},
        429: {"description": "Rate limit exceeded"},
    },
)

EvaluationId = Annotated[str, Path(description="Site evaluation id")]


@router.get("", response_model=SiteEvaluationListResponse, summary="List site evaluations")
def list_site_evaluations(
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
    farm_id: Annotated[Optional[str], Query(description="Only evaluations of this farm")] = None,
) -> SiteEvaluationListResponse:
    """List the caller's evaluations, most recently updated first."""
    evaluations = service.list_evaluations(owner_id, farm_id=farm_id)
    return SiteEvaluationListResponse(
        count=len(evaluations),
        results=[SiteEvaluationResponse.model_validate(e.model_dump()) for e in evaluations],
    )


@router.post(
    "",
    response_model=SiteEvaluationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a site evaluation",
    description="""
    Create a draft site evaluation.

    When an infrastructure recommendation is given the cost estimate is
    computed from the area and the per-acre rate of that category. Any
    cost value sent by the client is ignored.
    """,
    responses={400: {"description": "Missing name/area or invalid cost parameters"}},
)
def create_site_evaluation(
    body: SiteEvaluationCreateRequest,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
):
    return service.create_evaluation(
        owner_id,
        name=body.name,
        area=body.area,
        boundary=body.boundary,
        infrastructure_recommendation=body.infrastructure_recommendation,
        farm_id=body.farm_id,
        area_unit=body.area_unit,
        slope=body.slope,
        cost_currency=body.cost_currency,
    )


@router.get("/{evaluation_id}", response_model=SiteEvaluationResponse, summary="Get a site evaluation")
def get_site_evaluation(
    evaluation_id: EvaluationId,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
):
    return service.get_evaluation(owner_id, evaluation_id)


@router.put(
    "/{evaluation_id}",
    response_model=SiteEvaluationResponse,
    summary="Update a site evaluation",
    description="""
    Partially update a site evaluation. Only the fields present in the body
    are changed.

    Changing the area, area unit or infrastructure recommendation
    recomputes the cost estimate. Submitted evaluations reject changes to
    boundary, area and infrastructure.
    """,
    responses={
        400: {"description": "Invalid field values or cost parameters"},
        409: {"description": "Evaluation already submitted"},
    },
)
def update_site_evaluation(
    evaluation_id: EvaluationId,
    body: EvaluationPatch,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
):
    return service.update_evaluation(owner_id, evaluation_id, body)


@router.post(
    "/{evaluation_id}/submit",
    response_model=SiteEvaluationResponse,
    summary="Submit a site evaluation",
    responses={409: {"description": "Evaluation already submitted"}},
)
def submit_site_evaluation(
    evaluation_id: EvaluationId,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
):
    return service.submit_evaluation(owner_id, evaluation_id)


@router.delete("/{evaluation_id}", response_model=MessageResponse, summary="Delete a site evaluation")
def delete_site_evaluation(
    evaluation_id: EvaluationId,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
) -> MessageResponse:
    service.delete_evaluation(owner_id, evaluation_id)
    return MessageResponse(message="Site evaluation deleted")


@router.get(
    "/{evaluation_id}/proposal.pdf",
    response_class=Response,
    summary="Download the proposal PDF",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Proposal document"},
        409: {"description": "Evaluation has not been submitted"},
    },
)
def download_proposal_pdf(
    evaluation_id: EvaluationId,
    owner_id: OwnerIdDep,
    service: EvaluationServiceDep,
) -> Response:
    document = service.render_proposal_pdf(owner_id, evaluation_id)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
