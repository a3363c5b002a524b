from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from database.database import get_session
from handlers.dependencies import get_current_user
from models.user import User
from schemas.menu import AvailabilityUpdate, MenuItemCreate, MenuItemOut
from services.menu_service import (
    add_menu_item,
    delete_menu_item,
    get_menu_for_restaurant,
    set_menu_item_availability,
)

router = APIRouter(prefix="/menu", tags=["menu"])

@router.get("/{restaurant_id}", response_model=List[MenuItemOut])
async def get_menu(restaurant_id: int, session: AsyncSession = Depends(get_session)):
    return [MenuItemOut.model_validate(item) for item in await get_menu_for_restaurant(session, restaurant_id)]

@router.post("/add", response_model=MenuItemOut)
async def add_item(
    body: MenuItemCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    item = await add_menu_item(
        session,
        user,
        body.name,
        body.price,
        description=body.description,
        image=body.image,
        is_veg=body.is_veg,
        is_best_seller=body.is_best_seller
    )
    return MenuItemOut.model_validate(item)

@router.patch("/{item_id}/availability", response_model=MenuItemOut)
async def update_availability(
    item_id: int,
    body: AvailabilityUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    item = await set_menu_item_availability(session, user, item_id, body.is_available)
    return MenuItemOut.model_validate(item)

@router.delete("/{item_id}")
async def delete_item(
    item_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    await delete_menu_item(session, user, item_id)
    return {"message": "Deleted"}
