"""
API router for farm endpoints.
"""
from fastapi import APIRouter, Path, status
from typing import Annotated

from forge.api.dependencies import FarmServiceDep, OwnerIdDep
from forge.api.v1.models.requests import FarmCreateRequest
from forge.api.v1.models.responses import FarmListResponse, FarmResponse, MessageResponse
from forge.domain.models import FarmPatch


router = APIRouter(
    prefix="/farms",
    tags=["farms"],
    responses={
        404: {"description": "Farm not found for this user"},
        429: {"description": "Rate limit exceeded"},
    },
)

FarmId = Annotated[str, Path(description="Farm id")]


@router.get("", response_model=FarmListResponse, summary="List farms")
def list_farms(owner_id: OwnerIdDep, service: FarmServiceDep) -> FarmListResponse:
    farms = service.list_farms(owner_id)
    return FarmListResponse(
        count=len(farms),
        results=[FarmResponse.model_validate(f.model_dump()) for f in farms],
    )


@router.post(
    "",
    response_model=FarmResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a farm",
    responses={400: {"description": "Farm name missing"}},
)
def create_farm(body: FarmCreateRequest, owner_id: OwnerIdDep, service: FarmServiceDep):
    return service.create_farm(
        owner_id,
        name=body.name,
        description=body.description,
        location=body.location,
    )


@router.get("/{farm_id}", response_model=FarmResponse, summary="Get a farm")
def get_farm(farm_id: FarmId, owner_id: OwnerIdDep, service: FarmServiceDep):
    return service.get_farm(owner_id, farm_id)


@router.put("/{farm_id}", response_model=FarmResponse, summary="Update a farm")
def update_farm(farm_id: FarmId, body: FarmPatch, owner_id: OwnerIdDep, service: FarmServiceDep):
    return service.update_farm(owner_id, farm_id, body)


@router.delete("/{farm_id}", response_model=MessageResponse, summary="Delete a farm")
def delete_farm(farm_id: FarmId, owner_id: OwnerIdDep, service: FarmServiceDep) -> MessageResponse:
    service.delete_farm(owner_id, farm_id)
    return MessageResponse(message="Farm deleted")
