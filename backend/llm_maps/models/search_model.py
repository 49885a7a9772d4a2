from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

from llm_maps.models.intent_model import GeneralIntent, Intent
from llm_maps.models.places_model import Place

# --- Domain Models ---
class SearchMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    query: str
    location: Optional[str] = None
    radius: Optional[int] = None
    result_count: int

class SearchResult(BaseModel):
    """Outcome of one search request: the resolved intent and the places found for it"""
    model_config = ConfigDict(frozen=True)

    intent: Intent
    places: List[Place] = []
    metadata: SearchMetadata

    @model_validator(mode="after")
    def check_places_match_intent(self):
        if isinstance(self.intent, GeneralIntent) and self.places:
            raise ValueError("A general intent cannot carry places")
        if self.metadata.result_count != len(self.places):
            raise ValueError("result_count must equal the number of places")
        return self

# --- API Request/Response Models ---
class SearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Free-text user query")
    location: Optional[str] = Field(None, description="Location that overrides the one found in the query")
    # Coerced by validate_radius; lax int parsing would turn true into 1
    radius: Optional[Any] = Field(None, description="Search radius in meters")

class DirectionsRequest(BaseModel):
    origin: Optional[str] = None
    destination: Optional[str] = None

class SearchResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    llm_analysis: Intent
    places: List[Place]
    search_metadata: SearchMetadata

class DirectionsResponse(BaseModel):
    success: bool = True
    directions: Dict[str, Any]

class PlaceDetailsResponse(BaseModel):
    success: bool = True
    place: Optional[Dict[str, Any]] = None
