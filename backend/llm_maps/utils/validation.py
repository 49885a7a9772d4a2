"""
Input validation and sanitization for request fields.
Every function either returns the sanitized value or raises InvalidInput.
"""
import math

from llm_maps.core.exceptions import InvalidInput

MAX_QUERY_LENGTH = 500
MIN_QUERY_LENGTH = 2
MAX_LOCATION_LENGTH = 200
MAX_PLACE_ID_LENGTH = 100
MIN_RADIUS = 1
MAX_RADIUS = 50000


def _strip_markup(value: str) -> str:
    return value.replace("<", "").replace(">", "").strip()


def validate_query(raw) -> str:
    if not raw or not isinstance(raw, str):
        raise InvalidInput("query", "Query is required and must be a string")

    if len(raw) > MAX_QUERY_LENGTH:
        raise InvalidInput("query", f"Query is too long (max {MAX_QUERY_LENGTH} characters)")

    # Minimum length applies to what survives sanitization, so "<>" is rejected
    query = _strip_markup(raw)
    if len(query) < MIN_QUERY_LENGTH:
        raise InvalidInput("query", f"Query must be at least {MIN_QUERY_LENGTH} characters long")

    return query


def validate_location(raw) -> str | None:
    if raw is None or raw == "":
        return None

    if not isinstance(raw, str):
        raise InvalidInput("location", "Location must be a string")

    if len(raw) > MAX_LOCATION_LENGTH:
        raise InvalidInput("location", f"Location is too long (max {MAX_LOCATION_LENGTH} characters)")

    return _strip_markup(raw) or None


def validate_origin_destination(origin, destination) -> tuple[str, str]:
    if not origin or not isinstance(origin, str) or not origin.strip():
        raise InvalidInput("origin", "Origin is required and must be a string")

    if not destination or not isinstance(destination, str) or not destination.strip():
        raise InvalidInput("destination", "Destination is required and must be a string")

    if len(origin) > MAX_LOCATION_LENGTH or len(destination) > MAX_LOCATION_LENGTH:
        raise InvalidInput(
            "origin_destination",
            f"Origin and destination must be less than {MAX_LOCATION_LENGTH} characters",
        )

    return _strip_markup(origin), _strip_markup(destination)


def validate_place_id(raw) -> str:
    if not raw or not isinstance(raw, str) or not raw.strip():
        raise InvalidInput("placeId", "Place ID is required")

    if len(raw) > MAX_PLACE_ID_LENGTH:
        raise InvalidInput("placeId", f"Place ID is too long (max {MAX_PLACE_ID_LENGTH} characters)")

    return raw.strip()


def validate_radius(raw) -> int | None:
    if raw is None:
        return None

    message = f"Radius must be a number between {MIN_RADIUS} and {MAX_RADIUS} meters"

    if isinstance(raw, bool):
        raise InvalidInput("radius", message)

    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            raise InvalidInput("radius", message) from None

    if not isinstance(raw, (int, float)) or not math.isfinite(raw) or int(raw) != raw:
        raise InvalidInput("radius", message)

    radius = int(raw)
    if radius < MIN_RADIUS or radius > MAX_RADIUS:
        raise InvalidInput("radius", message)

    return radius
