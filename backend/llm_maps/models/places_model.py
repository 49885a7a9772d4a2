from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, Tuple

class PlaceLocation(BaseModel):
    lat: float
    lng: float

class Place(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    address: str = ""
    rating: Optional[float] = None
    total_ratings: Optional[int] = None
    location: PlaceLocation
    types: Tuple[str, ...] = ()
    open_now: Optional[bool] = None
    maps_url: str
    embed_url: str
