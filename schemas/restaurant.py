from pydantic import Field, field_validator
from typing import Optional
from schemas.base import CamelModel, LocationIn, LocationOut, location_to_dict

class RestaurantCreate(CamelModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    location: Optional[LocationIn] = None

class RestaurantUpdate(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[LocationIn] = None

class RestaurantOut(CamelModel):
    id: int
    owner_id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[LocationOut] = None

    @field_validator("location", mode="before")
    @classmethod
    def unpack_location(cls, value):
        return location_to_dict(value)

class NearbyRestaurantOut(RestaurantOut):
    distance_km: float

class EligibilityOut(CamelModel):
    restaurant_id: int
    eligible: bool
    distance_km: Optional[float] = None
    max_radius_km: float

