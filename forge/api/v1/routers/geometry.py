"""
API router for boundary geometry endpoints.
"""
from fastapi import APIRouter

from forge.api.dependencies import ElevationClientDep, GeometryEngineDep
from forge.api.v1.models.requests import BoundaryRequest
from forge.api.v1.models.responses import (
    FormattedMeasureResponse,
    PolygonMetricsResponse,
    SlopeResponse,
)


router = APIRouter(
    prefix="/geometry",
    tags=["geometry"],
    responses={429: {"description": "Rate limit exceeded"}},
)


@router.post(
    "/metrics",
    response_model=PolygonMetricsResponse,
    summary="Measure a boundary polygon",
    description="""
    Compute the area and perimeter of a boundary drawn on the map.

    Fewer than three points enclose no area; fewer than two have no
    perimeter. Pass `provider=projected` to measure in the local UTM zone
    instead of on a spherical Earth.
    """,
)
def measure_boundary(
    body: BoundaryRequest,
    engine: GeometryEngineDep,
) -> PolygonMetricsResponse:
    metrics = engine.calculate_metrics(body.boundary)
    return PolygonMetricsResponse(
        point_count=len(body.boundary),
        area_sq_meters=metrics.area_sq_meters,
        area_acres=metrics.area_acres,
        perimeter_meters=metrics.perimeter_meters,
        formatted_area=FormattedMeasureResponse(**vars(metrics.formatted_area)),
        formatted_perimeter=FormattedMeasureResponse(**vars(metrics.formatted_perimeter)),
        provider=metrics.provider,
    )


@router.post(
    "/slope",
    response_model=SlopeResponse,
    summary="Estimate boundary slope",
    description="""
    Look up terrain elevation for every boundary point and estimate the
    parcel slope as elevation range over the widest horizontal span.
    """,
    responses={502: {"description": "Elevation service unavailable"}},
)
async def estimate_slope(
    body: BoundaryRequest,
    engine: GeometryEngineDep,
    elevation_client: ElevationClientDep,
) -> SlopeResponse:
    elevations = await elevation_client.get_elevations(
        [(point.lat, point.lng) for point in body.boundary]
    )
    return SlopeResponse(
        slope_percent=engine.estimate_slope(body.boundary, elevations),
        min_elevation=min(elevations) if elevations else None,
        max_elevation=max(elevations) if elevations else None,
        elevations=elevations,
    )
