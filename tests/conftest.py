"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample boundaries
- In-memory repositories and services
- Mock elevation client
- FastAPI test client
"""
import math
import os

# Rate limits are per process; keep them out of the way of the test suite
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from typing import Generator
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from forge.main import app
from forge.api.dependencies import get_elevation_client, get_repositories
from forge.domain.models import BoundaryPoint
from forge.infrastructure.elevation_client import ElevationClient
from forge.infrastructure.repositories import RepositoryRegistry
from forge.services.application.evaluation_service import EvaluationService
from forge.services.application.farm_service import FarmService
from forge.services.domain.proposal_renderer import ProposalRenderer
from forge.utils.spatial_helpers import EARTH_RADIUS_M


# One kilometer of arc on the mean-radius sphere, in degrees
KM_IN_DEGREES = math.degrees(1000 / EARTH_RADIUS_M)

OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def km_square() -> list[BoundaryPoint]:
    """A 1 km x 1 km square with its south-west corner on (0, 0)."""
    d = KM_IN_DEGREES
    return [
        BoundaryPoint(lat=0.0, lng=0.0, id="point-0"),
        BoundaryPoint(lat=0.0, lng=d, id="point-1"),
        BoundaryPoint(lat=d, lng=d, id="point-2"),
        BoundaryPoint(lat=d, lng=0.0, id="point-3"),
    ]


@pytest.fixture
def field_boundary() -> list[BoundaryPoint]:
    """A small quadrilateral field near Pune."""
    return [
        BoundaryPoint(lat=18.5200, lng=73.8560),
        BoundaryPoint(lat=18.5200, lng=73.8580),
        BoundaryPoint(lat=18.5185, lng=73.8582),
        BoundaryPoint(lat=18.5184, lng=73.8559),
    ]


# ============================================================
# Service Fixtures
# ============================================================

@pytest.fixture
def repositories() -> RepositoryRegistry:
    return RepositoryRegistry.in_memory()


@pytest.fixture
def evaluation_service(repositories) -> EvaluationService:
    return EvaluationService(
        evaluations=repositories.evaluations,
        farms=repositories.farms,
        renderer=ProposalRenderer(compress=False),
    )


@pytest.fixture
def farm_service(repositories) -> FarmService:
    return FarmService(farms=repositories.farms)


# ============================================================
# Mock Elevation Client Fixtures
# ============================================================

@pytest.fixture
def mock_elevation_client():
    """Create a mock elevation client."""
    mock_client = AsyncMock(spec=ElevationClient)
    mock_client.get_elevations.return_value = [100.0, 104.0, 110.0, 102.0]
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(repositories, mock_elevation_client) -> Generator[TestClient, None, None]:
    """Create a synchronous test client backed by fresh in-memory storage."""
    app.dependency_overrides[get_repositories] = lambda: repositories
    app.dependency_overrides[get_elevation_client] = lambda: mock_elevation_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"X-User-Id": OWNER_ID}


@pytest.fixture
def other_owner_headers() -> dict[str, str]:
    return {"X-User-Id": OTHER_OWNER_ID}
