"""
Dependency injection for FastAPI.
"""
from functools import lru_cache
from typing import Annotated, Optional
from fastapi import Depends, Header, Query
from pymongo import MongoClient

from forge.config import settings
from forge.infrastructure.elevation_client import ElevationClient, get_elevation_client
from forge.infrastructure.repositories import RepositoryRegistry
from forge.services.application.evaluation_service import EvaluationService
from forge.services.application.farm_service import FarmService
from forge.services.domain.geometry_engine import GeometryEngine, get_map_provider
from forge.services.domain.proposal_renderer import ProposalRenderer


@lru_cache
def get_repositories() -> RepositoryRegistry:
    """
    Build the repositories for the configured storage backend once.

    Returns:
        RepositoryRegistry instance
    """
    if settings.storage_backend == "mongo":
        return RepositoryRegistry.mongo(MongoClient(settings.mongo_uri), settings.mongo_database)
    if settings.storage_backend == "memory":
        return RepositoryRegistry.in_memory()
    raise ValueError(f"Unknown storage backend '{settings.storage_backend}'")


def get_owner_id(
    x_user_id: Annotated[str, Header(alias="X-User-Id", min_length=1, description="Caller's owner id")],
) -> str:
    """Opaque identifier of the calling user; every record lookup is scoped by it."""
    return x_user_id


def get_geometry_engine(
    provider: Annotated[
        Optional[str],
        Query(description="Geometry provider ('spherical' or 'projected')"),
    ] = None,
) -> GeometryEngine:
    """
    Dependency factory for GeometryEngine.

    Args:
        provider: Optional per-request provider override

    Returns:
        GeometryEngine instance
    """
    return GeometryEngine(get_map_provider(provider))


def get_evaluation_service(
    repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
) -> EvaluationService:
    """
    Dependency factory for EvaluationService.

    Args:
        repositories: Storage backend (injected)

    Returns:
        EvaluationService instance
    """
    return EvaluationService(
        evaluations=repositories.evaluations,
        farms=repositories.farms,
        renderer=ProposalRenderer(),
    )


def get_farm_service(
    repositories: Annotated[RepositoryRegistry, Depends(get_repositories)],
) -> FarmService:
    return FarmService(farms=repositories.farms)


# Type aliases for cleaner route signatures
OwnerIdDep = Annotated[str, Depends(get_owner_id)]
EvaluationServiceDep = Annotated[EvaluationService, Depends(get_evaluation_service)]
FarmServiceDep = Annotated[FarmService, Depends(get_farm_service)]
GeometryEngineDep = Annotated[GeometryEngine, Depends(get_geometry_engine)]
ElevationClientDep = Annotated[ElevationClient, Depends(get_elevation_client)]
