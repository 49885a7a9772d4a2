import logging
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from llm_maps.core.config import settings
from llm_maps.core.exceptions import InvalidApiKey, ProviderError
from llm_maps.core.logger import logs
from llm_maps.models.search_model import (
    DirectionsRequest,
    DirectionsResponse,
    PlaceDetailsResponse,
    SearchRequest,
    SearchResponse,
)
from llm_maps.services.search_service import SearchOrchestrator

# --- Dependency Injection Helpers ---
def get_orchestrator(request: Request) -> SearchOrchestrator:
    """The orchestrator is built once at startup and kept on the app state."""
    return request.app.state.search_orchestrator

async def validate_api_key(x_api_key: str | None = Header(default=None)):
    if settings.CLIENT_API_KEY and x_api_key != settings.CLIENT_API_KEY:
        raise InvalidApiKey()

router = APIRouter(prefix="/api/maps", dependencies=[Depends(validate_api_key)])

def provider_failure(error: str, exc: ProviderError) -> JSONResponse:
    """500 response for provider errors; detail is only exposed in development."""
    logs.log(logging.ERROR, f"{error}: [{exc.status}] {exc.message}")
    body = {"error": error}
    if settings.is_development:
        body["message"] = exc.message
    return JSONResponse(status_code=500, content=body)

# --- The Endpoints ---
@router.post("/search", response_model=SearchResponse)
async def search_places_endpoint(
    request: SearchRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator)
):
    try:
        result = await orchestrator.handle_search(request.query, request.location, request.radius)
    except ProviderError as e:
        return provider_failure("Failed to search for places", e)

    return SearchResponse(
        llm_analysis=result.intent,
        places=result.places,
        search_metadata=result.metadata
    )

@router.post("/directions", response_model=DirectionsResponse)
async def directions_endpoint(
    request: DirectionsRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator)
):
    try:
        directions = await orchestrator.handle_directions(request.origin, request.destination)
    except ProviderError as e:
        return provider_failure("Failed to get directions", e)

    return DirectionsResponse(directions=directions)

@router.get("/places/{place_id}", response_model=PlaceDetailsResponse)
async def place_details_endpoint(
    place_id: str,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator)
):
    try:
        details = await orchestrator.handle_place_details(place_id)
    except ProviderError as e:
        return provider_failure("Failed to get place details", e)

    return PlaceDetailsResponse(place=details)
