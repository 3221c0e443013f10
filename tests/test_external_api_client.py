"""
Unit tests for the elevation lookup client.

Tests cover:
- Successful lookups
- Batching of large requests
- Retry logic on 5xx errors
- No retry on 4xx errors
- Async context manager
- Error handling
"""
import pytest
import httpx
import respx
from unittest.mock import AsyncMock

from forge.infrastructure.api_constants import APIConstants, ElevationAPIEndpoints
from forge.infrastructure.elevation_client import (
    ElevationClient,
    ExternalAPIError,
    get_elevation_client,
)


BASE_URL = "https://elevation.test"
LOOKUP_URL = f"{BASE_URL}{ElevationAPIEndpoints.LOOKUP}"


def lookup_response(coordinates, elevation=100.0):
    return httpx.Response(200, json={
        "results": [
            {"latitude": lat, "longitude": lng, "elevation": elevation + i}
            for i, (lat, lng) in enumerate(coordinates)
        ]
    })


# ============================================================
# Client Initialization Tests
# ============================================================

class TestElevationClientInitialization:
    """Tests for client initialization."""

    def test_client_initialization(self):
        """Client should initialize with the configured base URL."""
        client = ElevationClient()

        assert client.base_url is not None
        assert client.client is not None

    def test_explicit_base_url(self):
        client = ElevationClient(base_url=BASE_URL)

        assert client.base_url == BASE_URL

    def test_singleton_pattern(self):
        """get_elevation_client should return the same instance."""
        import forge.infrastructure.elevation_client as module
        module._elevation_client = None

        client1 = get_elevation_client()
        client2 = get_elevation_client()

        assert client1 is client2
        module._elevation_client = None


# ============================================================
# Async Context Manager Tests
# ============================================================

class TestAsyncContextManager:
    """Tests for async context manager functionality."""

    @pytest.mark.asyncio
    async def test_context_manager_enter(self):
        """__aenter__ should return the client instance."""
        client = ElevationClient(base_url=BASE_URL)

        async with client as ctx_client:
            assert ctx_client is client

    @pytest.mark.asyncio
    async def test_context_manager_exit_closes_client(self):
        """__aexit__ should close the HTTP client."""
        client = ElevationClient(base_url=BASE_URL)
        client.close = AsyncMock()

        async with client:
            pass

        client.close.assert_called_once()


# ============================================================
# Lookup Tests
# ============================================================

class TestLookups:
    """Tests for elevation lookups."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_elevations_success(self):
        """Elevations come back in input order."""
        coordinates = [(18.52, 73.85), (18.53, 73.86)]
        route = respx.post(LOOKUP_URL).mock(return_value=lookup_response(coordinates))

        async with ElevationClient(base_url=BASE_URL) as client:
            result = await client.get_elevations(coordinates)

        assert result == [100.0, 101.0]
        assert route.call_count == 1
        sent = route.calls.last.request
        assert b'"latitude":18.52' in sent.content.replace(b" ", b"")

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_coordinates_skip_request(self):
        route = respx.post(LOOKUP_URL)

        async with ElevationClient(base_url=BASE_URL) as client:
            assert await client.get_elevations([]) == []

        assert route.call_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_large_request_is_batched(self):
        """Requests above the per-call limit are split into batches."""
        count = APIConstants.MAX_LOOKUP_LOCATIONS + 50
        coordinates = [(18.0 + i * 1e-4, 73.0) for i in range(count)]
        route = respx.post(LOOKUP_URL)
        route.side_effect = [
            lookup_response(coordinates[:APIConstants.MAX_LOOKUP_LOCATIONS]),
            lookup_response(coordinates[APIConstants.MAX_LOOKUP_LOCATIONS:]),
        ]

        async with ElevationClient(base_url=BASE_URL) as client:
            result = await client.get_elevations(coordinates)

        assert len(result) == count
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_short_result_rejected(self):
        """A response with fewer results than locations is an error."""
        coordinates = [(18.52, 73.85), (18.53, 73.86)]
        respx.post(LOOKUP_URL).mock(return_value=lookup_response(coordinates[:1]))

        async with ElevationClient(base_url=BASE_URL) as client:
            with pytest.raises(ExternalAPIError, match="1 results for 2 locations"):
                await client.get_elevations(coordinates)


# ============================================================
# Error Handling Tests
# ============================================================

class TestErrorHandling:
    """Tests for error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_error_no_retry(self):
        """4xx errors should not trigger retry."""
        client = ElevationClient(base_url=BASE_URL)

        respx.post(LOOKUP_URL).mock(
            return_value=httpx.Response(400, text="Bad Request")
        )

        with pytest.raises(ExternalAPIError, match="400") as exc_info:
            await client.get_elevations([(18.52, 73.85)])

        assert exc_info.value.status_code == 400
        # Should only be called once (no retry)
        assert respx.calls.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_error_triggers_retry(self):
        """5xx errors should trigger retry."""
        client = ElevationClient(base_url=BASE_URL)
        coordinates = [(18.52, 73.85)]

        # First call fails with 503, second succeeds
        route = respx.post(LOOKUP_URL)
        route.side_effect = [
            httpx.Response(503, text="Service Unavailable"),
            lookup_response(coordinates),
        ]

        result = await client.get_elevations(coordinates)

        assert result == [100.0]
        assert respx.calls.call_count == 2  # Retried once
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_wrapped(self):
        """Connection failures surface as ExternalAPIError after retries."""
        client = ElevationClient(base_url=BASE_URL)

        respx.post(LOOKUP_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ExternalAPIError, match="Elevation lookup failed"):
            await client.get_elevations([(18.52, 73.85)])

        await client.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
