from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from loguru import logger
from models.restaurant import Restaurant
from models.user import User, UserRole
from utils.errors import AccessDenied, NotFound, ValidationError
from utils.geo import Location, calculate_distance
from utils.validators import validate_coordinates
from typing import List, Optional, Tuple

def ensure_restaurant_role(actor: User) -> None:
    if actor.role != UserRole.RESTAURANT:
        raise AccessDenied("Access denied. Restaurant owners only.")

def _check_location(location: Optional[Location]) -> None:
    if location is None:
        return
    is_valid, error_msg = validate_coordinates(location.lat, location.lng)
    if not is_valid:
        raise ValidationError(error_msg)

async def get_restaurant_by_id(session: AsyncSession, restaurant_id: int) -> Optional[Restaurant]:
    result = await session.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    return result.scalar_one_or_none()

async def get_restaurant_by_owner(session: AsyncSession, owner_id: int) -> Optional[Restaurant]:
    result = await session.execute(select(Restaurant).where(Restaurant.owner_id == owner_id))
    return result.scalar_one_or_none()

async def get_owned_restaurant(session: AsyncSession, actor: User) -> Restaurant:
    ensure_restaurant_role(actor)
    restaurant = await get_restaurant_by_owner(session, actor.id)
    if not restaurant:
        raise NotFound("No restaurant found for this owner")
    return restaurant

async def get_all_restaurants(session: AsyncSession) -> List[Restaurant]:
    result = await session.execute(select(Restaurant).order_by(Restaurant.name))
    return list(result.scalars().all())

async def create_restaurant(
    session: AsyncSession,
    actor: User,
    name: str,
    address: str,
    phone: str,
    location: Optional[Location] = None
) -> Restaurant:
    """
    Создает ресторан владельца. У каждого владельца может быть только один ресторан.
    """
    ensure_restaurant_role(actor)
    if not name or not address or not phone:
        raise ValidationError("Name, address, and phone are required")
    _check_location(location)

    if await get_restaurant_by_owner(session, actor.id):
        raise ValidationError("You have already created a restaurant")

    restaurant = Restaurant(owner_id=actor.id, name=name, address=address, phone=phone)
    restaurant.set_location(location)
    session.add(restaurant)
    await session.commit()
    await session.refresh(restaurant)
    logger.info(f"Владелец {actor.id} создал ресторан {restaurant.id} ({name})")
    return restaurant

async def update_restaurant(
    session: AsyncSession,
    actor: User,
    name: Optional[str] = None,
    address: Optional[str] = None,
    phone: Optional[str] = None,
    location: Optional[Location] = None
) -> Restaurant:
    ensure_restaurant_role(actor)
    restaurant = await get_restaurant_by_owner(session, actor.id)
    if not restaurant:
        raise NotFound("No restaurant found. Please create one first.")
    _check_location(location)

    if name:
        restaurant.name = name
    if address:
        restaurant.address = address
    if phone:
        restaurant.phone = phone
    if location is not None:
        restaurant.set_location(location)

    await session.commit()
    await session.refresh(restaurant)
    return restaurant

async def get_restaurants_near(
    session: AsyncSession,
    location: Location,
    radius_km: float
) -> List[Tuple[Restaurant, float]]:
    """
    Рестораны в радиусе от точки, отсортированные по расстоянию.
    Рестораны без координат пропускаются.
    """
    nearby = []
    for restaurant in await get_all_restaurants(session):
        restaurant_location = restaurant.location
        if restaurant_location is None:
            continue
        distance = calculate_distance(location.lat, location.lng, restaurant_location.lat, restaurant_location.lng)
        if distance <= radius_km:
            nearby.append((restaurant, distance))
    nearby.sort(key=lambda pair: pair[1])
    return nearby
