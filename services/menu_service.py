from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from loguru import logger
from models.menu_item import MenuItem
from models.user import User
from services.restaurant_service import get_owned_restaurant
from utils.errors import AccessDenied, NotFound, ValidationError
from typing import List, Optional

async def get_menu_for_restaurant(
    session: AsyncSession,
    restaurant_id: int,
    available_only: bool = True
) -> List[MenuItem]:
    query = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
    if available_only:
        query = query.where(MenuItem.is_available == True)
    query = query.order_by(MenuItem.is_best_seller.desc(), MenuItem.name)
    result = await session.execute(query)
    return list(result.scalars().all())

async def get_menu_item_by_id(session: AsyncSession, item_id: int) -> Optional[MenuItem]:
    result = await session.execute(select(MenuItem).where(MenuItem.id == item_id))
    return result.scalar_one_or_none()

async def add_menu_item(
    session: AsyncSession,
    actor: User,
    name: str,
    price: float,
    description: Optional[str] = None,
    image: Optional[str] = None,
    is_veg: bool = True,
    is_best_seller: bool = False
) -> MenuItem:
    restaurant = await get_owned_restaurant(session, actor)
    if not name:
        raise ValidationError("Menu item name is required")
    if price is None or price < 0:
        raise ValidationError("Price must not be negative")

    item = MenuItem(
        restaurant_id=restaurant.id,
        name=name,
        price=price,
        description=description,
        image=image or "",
        is_veg=is_veg,
        is_best_seller=is_best_seller,
        is_available=True
    )
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return item

async def _get_owned_item(session: AsyncSession, actor: User, item_id: int) -> MenuItem:
    restaurant = await get_owned_restaurant(session, actor)
    item = await get_menu_item_by_id(session, item_id)
    if not item:
        raise NotFound("Menu item not found")
    if item.restaurant_id != restaurant.id:
        raise AccessDenied("You can only manage menu items of your own restaurant")
    return item

async def set_menu_item_availability(session: AsyncSession, actor: User, item_id: int, is_available: bool) -> MenuItem:
    item = await _get_owned_item(session, actor, item_id)
    item.is_available = is_available
    await session.commit()
    await session.refresh(item)
    return item

async def delete_menu_item(session: AsyncSession, actor: User, item_id: int) -> None:
    item = await _get_owned_item(session, actor, item_id)
    await session.delete(item)
    await session.commit()
    logger.info(f"Владелец {actor.id} удалил позицию меню {item_id}")
