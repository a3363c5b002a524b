from typing import Optional, Tuple
from models.order import OrderStatus

def validate_quantity(quantity: int, max_quantity: Optional[int] = None) -> Tuple[bool, str]:
    if quantity < 1:
        return False, "Quantity must be at least 1"
    if max_quantity and quantity > max_quantity:
        return False, f"Maximum quantity per item: {max_quantity}"
    return True, ""

def validate_coordinates(lat: Optional[float], lng: Optional[float]) -> Tuple[bool, str]:
    if lat is None or lng is None:
        return False, "Location must have lat and lng"
    if not -90 <= lat <= 90:
        return False, "Latitude must be between -90 and 90"
    if not -180 <= lng <= 180:
        return False, "Longitude must be between -180 and 180"
    return True, ""

def validate_amounts(subtotal: float, taxes: float, delivery_fee: float, total: Optional[float]) -> Tuple[bool, str]:
    if total is None:
        return False, "Missing required order information"
    for name, value in (("subtotal", subtotal), ("taxes", taxes), ("deliveryFee", delivery_fee), ("total", total)):
        if value < 0:
            return False, f"Amount '{name}' must not be negative"
    return True, ""

def validate_order_can_be_cancelled(status: OrderStatus) -> Tuple[bool, str]:
    if status.is_cancellable:
        return True, ""
    if status.is_terminal:
        return False, "Cannot update status of completed or cancelled orders"
    return False, "Can only cancel orders that are PLACED or CONFIRMED"
