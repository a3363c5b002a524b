from sqlalchemy import Column, Float, String
from utils.geo import Location

class LocationMixin:
    """Точка на карте: координаты и читаемый адрес из выбора на карте"""
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    location_address = Column(String, nullable=True)

    @property
    def location(self) -> Location | None:
        if self.lat is None or self.lng is None:
            return None
        return Location(self.lat, self.lng, self.location_address)

    def set_location(self, location: Location | None) -> None:
        if location is None:
            self.lat = None
            self.lng = None
            self.location_address = None
            return
        self.lat = location.lat
        self.lng = location.lng
        self.location_address = location.address
