from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Literal, Optional, Tuple, Union
from enum import Enum

# --- Enums ---
class PlaceCategory(str, Enum):
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    PARK = "park"
    MUSEUM = "museum"
    HOTEL = "hotel"
    SHOPPING = "shopping"
    ATTRACTION = "attraction"
    POINT_OF_INTEREST = "point_of_interest"

# --- Intent Variants ---
class SearchPlacesIntent(BaseModel):
    """The query asks for real-world places."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    intent: Literal["search_places"] = "search_places"
    # Free text: classifier categories outside PlaceCategory are passed through
    category: Optional[str] = PlaceCategory.POINT_OF_INTEREST.value
    location: Optional[str] = None
    refined_query: Optional[str] = Field(default=None, alias="query")
    suggestions: Tuple[str, ...] = ()

class GeneralIntent(BaseModel):
    """The query is not about places; the classifier answered directly."""
    model_config = ConfigDict(frozen=True)

    intent: Literal["general"] = "general"
    response: str

Intent = Annotated[Union[SearchPlacesIntent, GeneralIntent], Field(discriminator="intent")]
