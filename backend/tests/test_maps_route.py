import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport

from llm_maps.core.config import settings
from llm_maps.core.exceptions import ProviderError, ProviderQuotaExceeded
from llm_maps.main import app, lifespan
from llm_maps.models.intent_model import GeneralIntent, SearchPlacesIntent
from llm_maps.models.places_model import Place, PlaceLocation
from llm_maps.routes.maps_route import get_orchestrator
from llm_maps.services.search_service import SearchOrchestrator

MOCK_PLACE = Place(
    id="place1",
    name="Restaurant 1",
    address="123 Main St",
    rating=4.5,
    location=PlaceLocation(lat=40.7128, lng=-74.006),
    types=["restaurant"],
    maps_url="https://maps.google.com/test",
    embed_url="https://www.google.com/maps/embed/test",
)


@pytest.fixture
def resolver():
    mocked = MagicMock()
    mocked.resolve = AsyncMock(return_value=SearchPlacesIntent(
        category="restaurant", location="New York", refined_query="restaurants", suggestions=["Joe's"]
    ))
    return mocked


@pytest.fixture
def places():
    mocked = MagicMock()
    mocked.search_places = AsyncMock(return_value=[MOCK_PLACE])
    mocked.get_directions = AsyncMock(return_value={"status": "OK", "routes": [{"summary": "I-95"}]})
    mocked.get_place_details = AsyncMock(return_value={"name": "Restaurant 1"})
    return mocked


@pytest_asyncio.fixture
async def client(resolver, places):
    orchestrator = SearchOrchestrator(intent_resolver=resolver, places_service=places)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")


# --- POST /api/maps/search ---

@pytest.mark.asyncio
async def test_search_requires_query(client, resolver):
    response = await client.post("/api/maps/search", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Error"
    assert body["field"] == "query"
    resolver.resolve.assert_not_called()


@pytest.mark.asyncio
async def test_search_rejects_out_of_range_radius(client, resolver, places):
    response = await client.post("/api/maps/search", json={"query": "pizza", "radius": 60000})

    assert response.status_code == 400
    assert response.json()["field"] == "radius"
    resolver.resolve.assert_not_called()
    places.search_places.assert_not_called()


@pytest.mark.asyncio
async def test_search_rejects_non_numeric_radius(client):
    response = await client.post("/api/maps/search", json={"query": "pizza", "radius": "abc"})

    assert response.status_code == 400
    assert response.json()["field"] == "radius"


@pytest.mark.asyncio
async def test_search_success(client):
    response = await client.post("/api/maps/search", json={"query": "restaurants in New York"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["llmAnalysis"] == {
        "intent": "search_places",
        "category": "restaurant",
        "location": "New York",
        "query": "restaurants",
        "suggestions": ["Joe's"],
    }
    assert len(data["places"]) == 1
    place = data["places"][0]
    assert place["mapsUrl"] == "https://maps.google.com/test"
    assert place["embedUrl"] == "https://www.google.com/maps/embed/test"
    assert place["totalRatings"] is None
    assert data["searchMetadata"] == {
        "query": "restaurants in New York",
        "location": None,
        "radius": None,
        "resultCount": 1,
    }


@pytest.mark.asyncio
async def test_search_general_intent(client, resolver, places):
    resolver.resolve.return_value = GeneralIntent(response="This is a general response")

    response = await client.post("/api/maps/search", json={"query": "tell me a joke"})

    assert response.status_code == 200
    data = response.json()
    assert data["llmAnalysis"] == {"intent": "general", "response": "This is a general response"}
    assert data["places"] == []
    places.search_places.assert_not_called()


@pytest.mark.asyncio
async def test_search_provider_failure(client, places, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    places.search_places.side_effect = ProviderQuotaExceeded()

    response = await client.post("/api/maps/search", json={"query": "pizza"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to search for places",
        "message": "Google Maps API quota exceeded",
    }


@pytest.mark.asyncio
async def test_search_provider_failure_hides_detail_in_production(client, places, production):
    places.search_places.side_effect = ProviderError("UNKNOWN_ERROR", "internal detail")

    response = await client.post("/api/maps/search", json={"query": "pizza"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to search for places"}


# --- POST /api/maps/directions ---

@pytest.mark.asyncio
async def test_directions_success(client, places):
    response = await client.post("/api/maps/directions", json={"origin": "Monas", "destination": "Kota Tua"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "directions": {"status": "OK", "routes": [{"summary": "I-95"}]}}
    places.get_directions.assert_awaited_once_with("Monas", "Kota Tua")


@pytest.mark.asyncio
async def test_directions_requires_both_ends(client):
    response = await client.post("/api/maps/directions", json={"origin": "Monas"})

    assert response.status_code == 400
    assert response.json()["field"] == "destination"


@pytest.mark.asyncio
async def test_directions_failure(client, places):
    places.get_directions.side_effect = ProviderError("HTTP_ERROR", "Failed to get directions")

    response = await client.post("/api/maps/directions", json={"origin": "A1", "destination": "B2"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get directions"


# --- GET /api/maps/places/{placeId} ---

@pytest.mark.asyncio
async def test_place_details_success(client, places):
    response = await client.get("/api/maps/places/abc123")

    assert response.status_code == 200
    assert response.json() == {"success": True, "place": {"name": "Restaurant 1"}}
    places.get_place_details.assert_awaited_once_with("abc123")


@pytest.mark.asyncio
async def test_place_details_rejects_long_id(client):
    response = await client.get("/api/maps/places/" + "p" * 101)

    assert response.status_code == 400
    assert response.json()["field"] == "placeId"


@pytest.mark.asyncio
async def test_place_details_failure(client, places):
    places.get_place_details.side_effect = ProviderError("NOT_FOUND", "Failed to get place details")

    response = await client.get("/api/maps/places/abc123")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get place details"


# --- Cross-cutting ---

@pytest.mark.asyncio
async def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "CLIENT_API_KEY", "client-secret")

    denied = await client.post("/api/maps/search", json={"query": "pizza"})
    assert denied.status_code == 401
    assert denied.json() == {"error": "Invalid API key"}

    allowed = await client.post(
        "/api/maps/search", json={"query": "pizza"}, headers={"x-api-key": "client-secret"}
    )
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_health_and_config(client):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "OK"
    assert health.json()["service"] == "LLM Maps Backend"

    config = await client.get("/api/config")
    assert "googleMapsClientKey" in config.json()


@pytest.mark.asyncio
async def test_unknown_route(client):
    response = await client.get("/api/maps/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found", "path": "/api/maps/unknown"}


@pytest.mark.asyncio
@pytest.mark.parametrize("radius", [True, False, 2.5, [100]])
async def test_search_rejects_non_integer_radius(client, places, radius):
    response = await client.post("/api/maps/search", json={"query": "coffee", "radius": radius})

    assert response.status_code == 400
    assert response.json()["field"] == "radius"
    places.search_places.assert_not_called()


@pytest.mark.asyncio
async def test_search_accepts_numeric_string_radius(client, places):
    response = await client.post("/api/maps/search", json={"query": "coffee", "radius": "1500"})

    assert response.status_code == 200
    assert response.json()["searchMetadata"]["radius"] == 1500
    places.search_places.assert_awaited_once_with("restaurants", "New York", 1500)


@pytest.mark.asyncio
async def test_lifespan_builds_orchestrator_once():
    async with lifespan(app):
        orchestrator = app.state.search_orchestrator
        assert isinstance(orchestrator, SearchOrchestrator)
        assert orchestrator.intent_resolver.cache is orchestrator.places_service.cache


@pytest.mark.asyncio
async def test_search_rejects_query_that_is_only_markup(client, resolver):
    response = await client.post("/api/maps/search", json={"query": "<>"})

    assert response.status_code == 400
    assert response.json()["field"] == "query"
    resolver.resolve.assert_not_called()
