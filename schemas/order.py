from pydantic import Field
from datetime import datetime
from typing import List, Optional
from models.order import OrderStatus, CancelledBy
from schemas.base import CamelModel

class LineItemIn(CamelModel):
    menu_item_id: int
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image: Optional[str] = None

class PlaceOrderRequest(CamelModel):
    restaurant_id: int
    items: List[LineItemIn] = Field(..., min_length=1)
    subtotal: float = Field(0.0, ge=0)
    taxes: float = Field(0.0, ge=0)
    delivery_fee: float = Field(0.0, ge=0)
    total: float = Field(..., ge=0)
    delivery_address: Optional[str] = None

class UpdateStatusRequest(CamelModel):
    status: str

class RestaurantCancelRequest(CamelModel):
    reason: Optional[str] = None

class OrderItemOut(CamelModel):
    menu_item_id: int
    name: str
    price: float
    quantity: int
    image: Optional[str] = None

class RestaurantSummary(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

class CustomerSummary(CamelModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None

class OrderOut(CamelModel):
    id: int
    user_id: int
    restaurant_id: int
    restaurant: Optional[RestaurantSummary] = None
    user: Optional[CustomerSummary] = None
    items: List[OrderItemOut]
    subtotal: float
    taxes: float
    delivery_fee: float
    total: float
    delivery_address: Optional[str] = None
    status: OrderStatus
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[CancelledBy] = None
    version: int
    order_date: datetime
    status_updated_at: datetime

class OrderResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    order: OrderOut

class OrderListResponse(CamelModel):
    success: bool = True
    orders: List[OrderOut]
