import httpx
import pytest

from llm_maps.core.llm_providers import BaseLLMProvider


class FakeLLMProvider(BaseLLMProvider):
    """Classifier stand-in: scripted availability and reply, records calls."""

    def __init__(self, available=True, payload=None, error=None):
        self.available = available
        self.payload = payload
        self.error = error
        self.generate_calls = []

    async def is_available(self) -> bool:
        return self.available

    async def generate(self, messages: list, temperature: float = 0.1, top_p: float = 0.9) -> dict:
        self.generate_calls.append({"messages": messages, "temperature": temperature, "top_p": top_p})
        if self.error is not None:
            raise self.error
        return self.payload

    def get_provider_name(self) -> str:
        return "Fake"


@pytest.fixture
def fake_provider():
    return FakeLLMProvider


@pytest.fixture
def raw_place():
    """Build a Google Places text-search record."""
    def _build(index: int = 0, **overrides) -> dict:
        record = {
            "place_id": f"place-{index}",
            "name": f"Place {index}",
            "formatted_address": f"{index} Main St",
            "rating": 4.5,
            "user_ratings_total": 120,
            "geometry": {"location": {"lat": 40.7128 + index / 1000, "lng": -74.006}},
            "types": ["restaurant", "food", "point_of_interest"],
            "opening_hours": {"open_now": True},
        }
        record.update(overrides)
        return record
    return _build


@pytest.fixture
def json_response():
    """Build an httpx.Response the way AsyncClient.get/post would return it."""
    def _build(payload, status_code: int = 200, method: str = "GET", url: str = "https://example.test"):
        return httpx.Response(status_code, json=payload, request=httpx.Request(method, url))
    return _build
