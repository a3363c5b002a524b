from pydantic import Field
from datetime import datetime
from typing import Optional
from schemas.base import CamelModel

class MenuItemCreate(CamelModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    is_veg: bool = True
    is_best_seller: bool = False

class AvailabilityUpdate(CamelModel):
    is_available: bool

class MenuItemOut(CamelModel):
    id: int
    restaurant_id: int
    name: str
    price: float
    description: Optional[str] = None
    image: Optional[str] = None
    is_veg: bool
    is_best_seller: bool
    is_available: bool
    created_at: Optional[datetime] = None
