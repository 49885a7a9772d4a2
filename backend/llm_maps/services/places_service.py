import httpx
import logging
from urllib.parse import quote
from llm_maps.core.config import settings
from llm_maps.core.exceptions import ProviderAuthError, ProviderError, ProviderQuotaExceeded
from llm_maps.core.logger import logs
from llm_maps.models.places_model import Place, PlaceLocation
from llm_maps.repos.cache_repo import ResponseCache

# Characters encodeURIComponent leaves untouched besides the RFC 3986 unreserved set
_URI_COMPONENT_SAFE = "!~*'()"

class PlacesService:
    def __init__(
        self,
        api_key: str = settings.GOOGLE_MAPS_API_KEY,
        embed_key: str = settings.GOOGLE_MAPS_CLIENT_KEY,
        cache: ResponseCache | None = None,
        max_results: int = settings.MAX_RESULTS,
        timeout: float = settings.PROVIDER_TIMEOUT,
        embed_mode: str = settings.MAP_EMBED_MODE
    ):
        self.api_key = api_key
        # URLs handed to browsers use the client key when one is configured
        self.embed_key = embed_key or api_key
        self.cache = cache
        self.max_results = max_results
        self.timeout = timeout
        self.embed_mode = embed_mode
        self.places_url = settings.PLACES_ENDPOINT
        self.details_url = settings.DETAILS_ENDPOINT
        self.directions_url = settings.DIRECTIONS_ENDPOINT
        logs.log(logging.INFO, f"Google Maps Service initialized with API key: {'Present' if self.api_key else 'MISSING'}")

    async def search_places(self, query: str, location: str = None, radius: int = None) -> list[Place]:
        search_query = f"{query} in {location}" if location else query

        # 1. Check Cache
        cache_key = f"places:{search_query}:{radius}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logs.log(logging.INFO, f"✓ Places cache HIT for '{search_query}'")
                return list(cached)

        # 2. Call Google Places Text Search
        params = {"query": search_query, "key": self.api_key}
        if radius:
            params["radius"] = radius

        logs.log(
            logging.INFO,
            "Searching places",
            extra={"query": search_query, "hasLocation": bool(location), "hasRadius": bool(radius)}
        )

        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(self.places_url, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.ERROR, f"Google Places request failed: {str(e)}")
                raise ProviderError("HTTP_ERROR", f"Failed to search places: {str(e)}") from e

        if not isinstance(data, dict):
            raise ProviderError("INVALID_RESPONSE", "Google Places API returned an unexpected body")

        # 3. Map provider status to outcomes
        status = data.get("status")
        logs.log(logging.INFO, f"Google API Response status: {status}")

        if status == "REQUEST_DENIED":
            raise ProviderAuthError(f"API Key rejected: {data.get('error_message')}")

        if status == "OVER_QUERY_LIMIT":
            raise ProviderQuotaExceeded()

        if status == "ZERO_RESULTS":
            logs.log(logging.INFO, f"No results found for query: {search_query}")
            return []

        if status != "OK":
            raise ProviderError(
                str(status),
                f"Google Places API error: {status} - {data.get('error_message')}"
            )

        # 4. Normalize, keeping provider order
        limited_results = data.get("results", [])[:self.max_results]
        places = self.format_places_response(limited_results)

        if self.cache is not None:
            self.cache.set(cache_key, tuple(places))

        return places

    async def get_place_details(self, place_id: str) -> dict:
        params = {
            "place_id": place_id,
            "fields": settings.DETAILS_FIELDS,
            "key": self.api_key
        }
        data = await self._get_json(self.details_url, params, "place details")
        return data.get("result") or {}

    async def get_directions(self, origin: str, destination: str) -> dict:
        params = {
            "origin": origin,
            "destination": destination,
            "key": self.api_key
        }
        return await self._get_json(self.directions_url, params, "directions")

    async def _get_json(self, url: str, params: dict, label: str) -> dict:
        """Thin pass-through GET; every failure is reported as a generic ProviderError."""
        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.ERROR, f"Error getting {label}: {str(e)}")
                raise ProviderError("HTTP_ERROR", f"Failed to get {label}") from e

        if not isinstance(data, dict):
            logs.log(logging.ERROR, f"Error getting {label}: unexpected body")
            raise ProviderError("INVALID_RESPONSE", f"Failed to get {label}")

        status = data.get("status")
        if status != "OK":
            logs.log(logging.ERROR, f"Error getting {label}: {status} - {data.get('error_message')}")
            raise ProviderError(str(status), f"Failed to get {label}")
        return data

    def format_places_response(self, results: list[dict]) -> list[Place]:
        places = []
        for raw in results:
            coords = (raw.get("geometry") or {}).get("location")
            if not coords:
                logs.log(logging.WARNING, f"Skipping place without coordinates: {raw.get('place_id')}")
                continue

            lat, lng = coords["lat"], coords["lng"]
            name = raw.get("name", "")
            places.append(Place(
                id=raw.get("place_id", ""),
                name=name,
                address=raw.get("formatted_address", ""),
                rating=raw.get("rating"),
                total_ratings=raw.get("user_ratings_total"),
                location=PlaceLocation(lat=lat, lng=lng),
                types=tuple(dict.fromkeys(raw.get("types", []))),
                open_now=(raw.get("opening_hours") or {}).get("open_now"),
                maps_url=self.generate_maps_url(lat, lng, name),
                embed_url=self._map_url(lat, lng)
            ))
        return places

    def _map_url(self, lat: float, lng: float) -> str:
        if self.embed_mode == "static":
            return self.generate_static_map_url(lat, lng)
        return self.generate_embed_url(lat, lng)

    def generate_maps_url(self, lat: float, lng: float, place_name: str) -> str:
        encoded_name = quote(place_name, safe=_URI_COMPONENT_SAFE)
        return f"https://www.google.com/maps/search/?api=1&query={lat},{lng}&query_place_id={encoded_name}"

    def generate_embed_url(self, lat: float, lng: float, zoom: int = 15) -> str:
        return f"https://www.google.com/maps/embed/v1/view?key={self.embed_key}&center={lat},{lng}&zoom={zoom}"

    # Static map for clients that cannot render embedded maps
    def generate_static_map_url(self, lat: float, lng: float, zoom: int = 15, width: int = 400, height: int = 300) -> str:
        return (
            f"https://maps.googleapis.com/maps/api/staticmap?center={lat},{lng}&zoom={zoom}"
            f"&size={width}x{height}&markers=color:red%7C{lat},{lng}&key={self.embed_key}"
        )
