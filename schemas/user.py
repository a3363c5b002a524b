from pydantic import EmailStr, Field, field_validator
from typing import Optional
from models.user import UserRole
from schemas.base import CamelModel, LocationIn, LocationOut, location_to_dict

class LoginRequest(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: UserRole = UserRole.USER
    avatar_url: Optional[str] = None

class AddressIn(CamelModel):
    flat: Optional[str] = None
    area: Optional[str] = None
    locality: Optional[str] = None
    pincode: Optional[str] = None

class ProfileUpdate(CamelModel):
    phone: Optional[str] = None
    address: Optional[AddressIn] = None
    location: Optional[LocationIn] = None

class UserOut(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole
    phone: Optional[str] = None
    address: Optional[AddressIn] = None
    location: Optional[LocationOut] = None

    @field_validator("location", mode="before")
    @classmethod
    def unpack_location(cls, value):
        return location_to_dict(value)

class TokenResponse(CamelModel):
    token: str
    user: UserOut
