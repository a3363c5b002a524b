"""
Геометрия доставки: расстояние между точками и проверка радиуса доставки
"""
import math
from typing import NamedTuple, Optional

EARTH_RADIUS_KM = 6371.0
DEFAULT_DELIVERY_RADIUS_KM = 5.0

class Location(NamedTuple):
    lat: Optional[float]
    lng: Optional[float]
    address: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

class Eligibility(NamedTuple):
    eligible: bool
    distance_km: Optional[float]

def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Расстояние по большому кругу между двумя точками (формула гаверсинуса)

    Args:
        lat1, lng1: Координаты первой точки в градусах
        lat2, lng2: Координаты второй точки в градусах

    Returns:
        float: Расстояние в километрах
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # округление может дать a чуть больше 1 для антиподов
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

def check_delivery_eligibility(
    user_location: Optional[Location],
    restaurant_location: Optional[Location],
    max_radius_km: float = DEFAULT_DELIVERY_RADIUS_KM
) -> Eligibility:
    """
    Проверяет, входит ли ресторан в радиус доставки пользователя.
    Если хотя бы одна точка неизвестна, расстояние не считается и доставка недоступна.
    """
    if user_location is None or restaurant_location is None:
        return Eligibility(False, None)
    if not user_location.has_coordinates or not restaurant_location.has_coordinates:
        return Eligibility(False, None)

    distance = calculate_distance(
        user_location.lat,
        user_location.lng,
        restaurant_location.lat,
        restaurant_location.lng
    )
    return Eligibility(distance <= max_radius_km, distance)
