"""
Сервис для работы с заказами
Обеспечивает оформление заказа, переходы по статусам и отмену заказов
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload
from datetime import datetime, timezone
from loguru import logger
from config.settings import settings
from models.order import (
    Order,
    OrderItem,
    OrderStatus,
    CancelledBy,
    DEFAULT_RESTAURANT_CANCEL_REASON,
)
from models.restaurant import Restaurant
from models.user import User, UserRole
from services.restaurant_service import get_restaurant_by_id, ensure_restaurant_role
from utils.errors import AccessDenied, InvalidTransition, NotFound, OutOfDeliveryRange, ValidationError
from utils.geo import Eligibility, check_delivery_eligibility
from utils.validators import validate_amounts, validate_order_can_be_cancelled, validate_quantity
from typing import List, Dict, Optional, Any

def _order_query():
    return select(Order).options(
        selectinload(Order.items),
        selectinload(Order.restaurant),
        selectinload(Order.user)
    )

async def get_order_by_id(session: AsyncSession, order_id: int) -> Optional[Order]:
    result = await session.execute(
        _order_query()
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def _get_order_or_404(session: AsyncSession, order_id: int) -> Order:
    order = await get_order_by_id(session, order_id)
    if not order:
        raise NotFound("Order not found")
    return order

def _ensure_restaurant_owner(actor: User, restaurant: Restaurant, message: str) -> None:
    ensure_restaurant_role(actor)
    if restaurant.owner_id != actor.id:
        raise AccessDenied(message)

def _parse_status(value: Any) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")

async def check_order_eligibility(
    session: AsyncSession,
    actor: User,
    restaurant_id: int,
    max_radius_km: Optional[float] = None
) -> Eligibility:
    """
    Проверяет, доставляет ли ресторан по координатам пользователя
    """
    restaurant = await get_restaurant_by_id(session, restaurant_id)
    if not restaurant:
        raise NotFound("Restaurant not found")
    radius = settings.DELIVERY_RADIUS_KM if max_radius_km is None else max_radius_km
    return check_delivery_eligibility(actor.location, restaurant.location, radius)

async def place_order(
    session: AsyncSession,
    actor: User,
    restaurant_id: int,
    items: List[Dict[str, Any]],
    total: Optional[float],
    subtotal: float = 0.0,
    taxes: float = 0.0,
    delivery_fee: float = 0.0,
    delivery_address: Optional[str] = None,
    enforce_radius: Optional[bool] = None
) -> Order:
    """
    Оформляет новый заказ в статусе PLACED

    Args:
        session: Сессия базы данных
        actor: Покупатель (роль USER)
        restaurant_id: ID ресторана
        items: Позиции заказа [{"menu_item_id": int, "name": str, "price": float, "quantity": int, "image": str}]
        total: Итоговая сумма, присланная клиентом
        subtotal, taxes, delivery_fee: Составляющие суммы
        delivery_address: Адрес доставки (снимок на момент заказа)
        enforce_radius: Проверять радиус доставки на сервере (по умолчанию из настроек)

    Returns:
        Order: Созданный заказ

    Raises:
        ValidationError: Не хватает обязательных полей или ресторан вне зоны доставки
        AccessDenied: Заказ оформляет не покупатель
        NotFound: Ресторан не найден
    """
    if actor.role != UserRole.USER:
        raise AccessDenied("Only customers can place orders")
    if not restaurant_id or not items:
        raise ValidationError("Missing required order information")

    for item in items:
        is_valid, error_msg = validate_quantity(item.get("quantity", 0), settings.MAX_ITEM_QUANTITY)
        if not is_valid:
            raise ValidationError(error_msg)
        if item.get("price") is None or item["price"] < 0:
            raise ValidationError("Item price must not be negative")
        if not item.get("name"):
            raise ValidationError("Item name is required")

    subtotal = subtotal or 0.0
    taxes = taxes or 0.0
    delivery_fee = delivery_fee or 0.0
    is_valid, error_msg = validate_amounts(subtotal, taxes, delivery_fee, total)
    if not is_valid:
        raise ValidationError(error_msg)

    restaurant = await get_restaurant_by_id(session, restaurant_id)
    if not restaurant:
        raise NotFound("Restaurant not found")

    if settings.ENFORCE_DELIVERY_RADIUS if enforce_radius is None else enforce_radius:
        eligibility = check_delivery_eligibility(actor.location, restaurant.location, settings.DELIVERY_RADIUS_KM)
        if not eligibility.eligible:
            if eligibility.distance_km is None:
                raise OutOfDeliveryRange("Please set your delivery location to check delivery availability")
            raise OutOfDeliveryRange(
                f"Sorry, this restaurant is {eligibility.distance_km:.1f} km away. "
                f"We only deliver within {settings.DELIVERY_RADIUS_KM:g} km.",
                distance_km=eligibility.distance_km
            )

    now = datetime.now(timezone.utc)
    order = Order(
        user_id=actor.id,
        restaurant_id=restaurant.id,
        subtotal=subtotal,
        taxes=taxes,
        delivery_fee=delivery_fee,
        total=total,
        delivery_address=delivery_address or None,
        status=OrderStatus.PLACED,
        version=1,
        order_date=now,
        status_updated_at=now
    )
    order.items = [
        OrderItem(
            menu_item_id=item["menu_item_id"],
            name=item["name"],
            price=item["price"],
            quantity=item["quantity"],
            image=item.get("image")
        )
        for item in items
    ]
    session.add(order)
    await session.commit()

    logger.info(f"Пользователь {actor.id} оформил заказ {order.id} в ресторане {restaurant.id} на сумму {total}")
    return await _get_order_or_404(session, order.id)

async def _transition(
    session: AsyncSession,
    order: Order,
    new_status: OrderStatus,
    **values: Any
) -> Order:
    """
    Меняет статус заказа сравнением с текущим статусом и версией.
    Если заказ успели изменить параллельно, ничего не записывается.
    """
    # rollback помечает загруженные объекты устаревшими, дальше к order не обращаемся
    order_id = order.id
    old_status = order.status
    result = await session.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.status == old_status,
            Order.version == order.version
        )
        .values(
            status=new_status,
            status_updated_at=datetime.now(timezone.utc),
            version=Order.version + 1,
            **values
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        logger.warning(f"Конфликт при смене статуса заказа {order_id}: {old_status.value} -> {new_status.value}")
        raise InvalidTransition("Order was modified concurrently. Please reload and try again")

    await session.commit()
    logger.info(f"Заказ {order_id}: {old_status.value} -> {new_status.value}")
    return await _get_order_or_404(session, order_id)

async def advance_order_status(
    session: AsyncSession,
    actor: User,
    order_id: int,
    target_status: Any,
    strict: Optional[bool] = None
) -> Order:
    """
    Обновление статуса заказа владельцем ресторана

    Args:
        session: Сессия базы данных
        actor: Владелец ресторана
        order_id: ID заказа
        target_status: Новый статус (OrderStatus или его строковое значение)
        strict: Разрешать только следующий статус цепочки (по умолчанию из настроек)

    Returns:
        Order: Обновленный заказ
    """
    ensure_restaurant_role(actor)
    new_status = _parse_status(target_status)
    order = await _get_order_or_404(session, order_id)
    _ensure_restaurant_owner(actor, order.restaurant, "You can only update orders for your own restaurant")

    if order.status.is_terminal:
        raise InvalidTransition("Cannot update status of completed or cancelled orders")

    strict = settings.STRICT_STATUS_TRANSITIONS if strict is None else strict
    if strict and new_status != order.status.next_status():
        raise InvalidTransition(
            f"Order in status {order.status.value} can only move to {order.status.next_status().value}"
        )

    values: Dict[str, Any] = {}
    if new_status == OrderStatus.CANCELLED:
        values["cancelled_by"] = CancelledBy.RESTAURANT
        values["cancellation_reason"] = DEFAULT_RESTAURANT_CANCEL_REASON
    return await _transition(session, order, new_status, **values)

async def cancel_order_by_user(session: AsyncSession, actor: User, order_id: int) -> Order:
    order = await _get_order_or_404(session, order_id)
    if order.user_id != actor.id:
        raise AccessDenied("Access denied")

    can_cancel, _ = validate_order_can_be_cancelled(order.status)
    if not can_cancel:
        raise InvalidTransition("Order cannot be cancelled at this stage")

    return await _transition(session, order, OrderStatus.CANCELLED, cancelled_by=CancelledBy.USER)

async def cancel_order_by_restaurant(
    session: AsyncSession,
    actor: User,
    order_id: int,
    reason: Optional[str] = None
) -> Order:
    ensure_restaurant_role(actor)
    order = await _get_order_or_404(session, order_id)
    _ensure_restaurant_owner(actor, order.restaurant, "You can only cancel orders for your own restaurant")

    can_cancel, error_msg = validate_order_can_be_cancelled(order.status)
    if not can_cancel:
        raise InvalidTransition(error_msg)

    reason = (reason or "").strip() or DEFAULT_RESTAURANT_CANCEL_REASON
    return await _transition(
        session,
        order,
        OrderStatus.CANCELLED,
        cancelled_by=CancelledBy.RESTAURANT,
        cancellation_reason=reason
    )

async def get_order_for_actor(session: AsyncSession, actor: User, order_id: int) -> Order:
    """Заказ виден покупателю и владельцу ресторана, в который он оформлен"""
    order = await _get_order_or_404(session, order_id)
    if order.user_id == actor.id:
        return order
    if actor.role == UserRole.RESTAURANT and order.restaurant.owner_id == actor.id:
        return order
    raise AccessDenied("Access denied")

async def get_user_orders(
    session: AsyncSession,
    actor: User,
    status: Optional[OrderStatus] = None
) -> List[Order]:
    query = _order_query().where(Order.user_id == actor.id)
    if status:
        query = query.where(Order.status == status)
    query = query.order_by(Order.order_date.desc(), Order.id.desc())

    result = await session.execute(query)
    return list(result.scalars().all())

async def get_restaurant_orders(
    session: AsyncSession,
    actor: User,
    restaurant_id: int,
    status: Optional[OrderStatus] = None
) -> List[Order]:
    ensure_restaurant_role(actor)
    restaurant = await get_restaurant_by_id(session, restaurant_id)
    if not restaurant:
        raise NotFound("Restaurant not found")
    _ensure_restaurant_owner(actor, restaurant, "You can only view orders for your own restaurant")

    query = _order_query().where(Order.restaurant_id == restaurant_id)
    if status:
        query = query.where(Order.status == status)
    query = query.order_by(Order.order_date.desc(), Order.id.desc())

    result = await session.execute(query)
    return list(result.scalars().all())
