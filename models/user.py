from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from database.base import Base
from models.location import LocationMixin

class UserRole(enum.Enum):
    USER = "USER"
    RESTAURANT = "RESTAURANT"

class User(LocationMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    phone = Column(String, nullable=True)
    address_flat = Column(String, nullable=True)
    address_area = Column(String, nullable=True)
    address_locality = Column(String, nullable=True)
    address_pincode = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    restaurant = relationship("Restaurant", back_populates="owner", uselist=False)
    orders = relationship("Order", back_populates="user")

    @property
    def address(self) -> dict | None:
        parts = {
            "flat": self.address_flat,
            "area": self.address_area,
            "locality": self.address_locality,
            "pincode": self.address_pincode,
        }
        if not any(parts.values()):
            return None
        return parts
