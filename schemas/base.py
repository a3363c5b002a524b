from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from utils.geo import Location

class CamelModel(BaseModel):
    """Поля в JSON передаются в camelCase, как их отправляет фронтенд"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class LocationIn(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None

    def to_location(self) -> Location:
        return Location(self.lat, self.lng, self.address)

class LocationOut(CamelModel):
    lat: float
    lng: float
    address: Optional[str] = None

def location_to_dict(value):
    if isinstance(value, Location):
        return value._asdict()
    return value
