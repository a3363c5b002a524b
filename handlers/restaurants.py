from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from config.settings import settings
from database.database import get_session
from handlers.dependencies import get_current_user
from models.user import User
from schemas.restaurant import (
    EligibilityOut,
    NearbyRestaurantOut,
    RestaurantCreate,
    RestaurantOut,
    RestaurantUpdate,
)
from services.order_service import check_order_eligibility
from services.restaurant_service import (
    create_restaurant,
    get_all_restaurants,
    get_owned_restaurant,
    get_restaurants_near,
    update_restaurant,
)
from utils.errors import ValidationError

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

@router.get("", response_model=List[RestaurantOut])
async def list_restaurants(session: AsyncSession = Depends(get_session)):
    return [RestaurantOut.model_validate(r) for r in await get_all_restaurants(session)]

@router.get("/my", response_model=RestaurantOut)
async def my_restaurant(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    return RestaurantOut.model_validate(await get_owned_restaurant(session, user))

@router.get("/nearby", response_model=List[NearbyRestaurantOut])
async def nearby_restaurants(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    location = user.location
    if location is None:
        raise ValidationError("Please set your delivery location in your profile")
    nearby = await get_restaurants_near(session, location, settings.DELIVERY_RADIUS_KM)
    return [
        NearbyRestaurantOut(**RestaurantOut.model_validate(r).model_dump(), distance_km=round(d, 2))
        for r, d in nearby
    ]

@router.post("/create", response_model=RestaurantOut, status_code=status.HTTP_201_CREATED)
async def create_my_restaurant(
    body: RestaurantCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    restaurant = await create_restaurant(
        session,
        user,
        body.name,
        body.address,
        body.phone,
        body.location.to_location() if body.location else None
    )
    return RestaurantOut.model_validate(restaurant)

@router.put("/update", response_model=RestaurantOut)
async def update_my_restaurant(
    body: RestaurantUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    restaurant = await update_restaurant(
        session,
        user,
        name=body.name,
        address=body.address,
        phone=body.phone,
        location=body.location.to_location() if body.location else None
    )
    return RestaurantOut.model_validate(restaurant)

@router.get("/{restaurant_id}/eligibility", response_model=EligibilityOut)
async def delivery_eligibility(
    restaurant_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    eligibility = await check_order_eligibility(session, user, restaurant_id)
    return EligibilityOut(
        restaurant_id=restaurant_id,
        eligible=eligibility.eligible,
        distance_km=eligibility.distance_km,
        max_radius_km=settings.DELIVERY_RADIUS_KM
    )
