"""
Infrastructure layer: Elevation lookup client with retry logic.
"""
from typing import List, Dict, Any, Optional, Sequence
from pydantic import BaseModel
import httpx
import logging
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from forge.config import settings
from forge.infrastructure.api_constants import APIConstants, ElevationAPIEndpoints

logger = logging.getLogger(__name__)


# Pydantic models for API payloads
class LookupLocation(BaseModel):
    latitude: float
    longitude: float


class ElevationResult(BaseModel):
    """Elevation of a single location."""
    latitude: float
    longitude: float
    elevation: float


class ElevationLookupResponse(BaseModel):
    """Response from the lookup endpoint."""
    results: List[ElevationResult]


class ExternalAPIError(Exception):
    """Raised when the elevation service cannot answer a lookup."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ElevationClient:
    """
    Client for an Open-Elevation compatible service.
    Implements retry logic with exponential backoff.
    """

    def __init__(self, base_url: Optional[str] = None):
        """Initialize the API client with configuration."""
        self.base_url = base_url or settings.elevation_api_base_url
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "accept": APIConstants.CONTENT_TYPE_JSON,
                "content-type": APIConstants.CONTENT_TYPE_JSON,
            },
            timeout=settings.elevation_api_timeout,
        )

    async def __aenter__(self) -> "ElevationClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.TransportError)),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request with retry logic.

        Server errors (5xx) and transport errors are retried; client
        errors (4xx) fail immediately.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            ExternalAPIError: If the request is rejected
            httpx.HTTPStatusError: If server errors persist after retries
            httpx.TransportError: If the service stays unreachable
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code >= 500:
                logger.warning(f"Elevation API returned {e.response.status_code}, retrying")
                raise
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )

    async def get_elevations(
        self,
        coordinates: Sequence[tuple[float, float]],
    ) -> List[float]:
        """
        Look up terrain elevation for a list of points.

        Args:
            coordinates: (latitude, longitude) tuples in degrees

        Returns:
            Elevation in meters for each point, in input order

        Raises:
            ExternalAPIError: If the lookup fails or returns a short result
        """
        if not coordinates:
            return []

        elevations: List[float] = []
        step = APIConstants.MAX_LOOKUP_LOCATIONS
        for start in range(0, len(coordinates), step):
            batch = coordinates[start:start + step]
            payload = {
                "locations": [
                    LookupLocation(latitude=lat, longitude=lng).model_dump()
                    for lat, lng in batch
                ]
            }
            try:
                data = await self._make_request(
                    "POST", ElevationAPIEndpoints.LOOKUP, json=payload
                )
            except (httpx.HTTPStatusError, httpx.TransportError) as e:
                raise ExternalAPIError(f"Elevation lookup failed: {e}") from e

            response = ElevationLookupResponse(**data)
            if len(response.results) != len(batch):
                raise ExternalAPIError(
                    f"Elevation lookup returned {len(response.results)} results "
                    f"for {len(batch)} locations"
                )
            elevations.extend(result.elevation for result in response.results)

        logger.debug(f"Fetched elevations for {len(elevations)} points")
        return elevations


# Singleton instance
_elevation_client: Optional[ElevationClient] = None


def get_elevation_client() -> ElevationClient:
    """
    Get or create the singleton elevation client instance.

    Returns:
        ElevationClient instance
    """
    global _elevation_client
    if _elevation_client is None:
        _elevation_client = ElevationClient()
    return _elevation_client


async def close_elevation_client() -> None:
    global _elevation_client
    if _elevation_client is not None:
        await _elevation_client.close()
        _elevation_client = None
