from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from database.database import get_session
from handlers.dependencies import get_current_user
from models.order import OrderStatus
from models.user import User
from schemas.order import (
    OrderListResponse,
    OrderOut,
    OrderResponse,
    PlaceOrderRequest,
    RestaurantCancelRequest,
    UpdateStatusRequest,
)
from services.order_service import (
    advance_order_status,
    cancel_order_by_restaurant,
    cancel_order_by_user,
    get_order_for_actor,
    get_restaurant_orders,
    get_user_orders,
    place_order,
)

router = APIRouter(prefix="/orders", tags=["orders"])

def _order_response(order, message: Optional[str] = None) -> OrderResponse:
    return OrderResponse(success=True, message=message, order=OrderOut.model_validate(order))

def _list_response(orders) -> OrderListResponse:
    return OrderListResponse(success=True, orders=[OrderOut.model_validate(o) for o in orders])

@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    body: PlaceOrderRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    order = await place_order(
        session,
        user,
        body.restaurant_id,
        [item.model_dump() for item in body.items],
        total=body.total,
        subtotal=body.subtotal,
        taxes=body.taxes,
        delivery_fee=body.delivery_fee,
        delivery_address=body.delivery_address
    )
    return _order_response(order, "Order placed successfully")

@router.get("/my-orders", response_model=OrderListResponse)
async def my_orders(
    status: Optional[OrderStatus] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    return _list_response(await get_user_orders(session, user, status))

@router.get("/restaurant/{restaurant_id}", response_model=OrderListResponse)
async def restaurant_orders(
    restaurant_id: int,
    status: Optional[OrderStatus] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    return _list_response(await get_restaurant_orders(session, user, restaurant_id, status))

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    return _order_response(await get_order_for_actor(session, user, order_id))

@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_status(
    order_id: int,
    body: UpdateStatusRequest,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    order = await advance_order_status(session, user, order_id, body.status)
    return _order_response(order, "Order status updated successfully")

@router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    order = await cancel_order_by_user(session, user, order_id)
    return _order_response(order, "Order cancelled successfully")

@router.patch("/{order_id}/restaurant-cancel", response_model=OrderResponse)
async def restaurant_cancel(
    order_id: int,
    body: Optional[RestaurantCancelRequest] = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    reason = body.reason if body else None
    order = await cancel_order_by_restaurant(session, user, order_id, reason)
    return _order_response(order, "Order cancelled successfully")
