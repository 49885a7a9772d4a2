import logging
from llm_maps.core.logger import logs
from llm_maps.models.intent_model import GeneralIntent, SearchPlacesIntent
from llm_maps.models.places_model import Place
from llm_maps.models.search_model import SearchMetadata, SearchResult
from llm_maps.services.intent_service import IntentResolver
from llm_maps.services.places_service import PlacesService
from llm_maps.utils.validation import (
    validate_location,
    validate_origin_destination,
    validate_place_id,
    validate_query,
    validate_radius,
)

class SearchOrchestrator:
    def __init__(self, intent_resolver: IntentResolver, places_service: PlacesService):
        self.intent_resolver = intent_resolver
        self.places_service = places_service

    async def handle_search(self, query, location=None, radius=None) -> SearchResult:
        """
        Validate -> classify -> (maybe) search.
        Validation errors are raised before any outbound call; provider errors
        during a place search propagate to the caller.
        """
        clean_query = validate_query(query)
        clean_location = validate_location(location)
        clean_radius = validate_radius(radius)

        intent = await self.intent_resolver.resolve(clean_query)

        places: list[Place] = []
        if isinstance(intent, SearchPlacesIntent):
            search_query = intent.refined_query or clean_query
            search_location = clean_location or intent.location
            places = await self.places_service.search_places(search_query, search_location, clean_radius)
        elif isinstance(intent, GeneralIntent):
            logs.log(logging.INFO, "General intent, skipping place search")
        else:
            raise TypeError(f"Unhandled intent type: {type(intent).__name__}")

        logs.log(logging.INFO, f"Search for '{clean_query}' returned {len(places)} places")

        return SearchResult(
            intent=intent,
            places=places,
            metadata=SearchMetadata(
                query=clean_query,
                location=clean_location,
                radius=clean_radius,
                result_count=len(places)
            )
        )

    async def handle_directions(self, origin, destination) -> dict:
        clean_origin, clean_destination = validate_origin_destination(origin, destination)
        return await self.places_service.get_directions(clean_origin, clean_destination)

    async def handle_place_details(self, place_id) -> dict:
        clean_place_id = validate_place_id(place_id)
        return await self.places_service.get_place_details(clean_place_id)
