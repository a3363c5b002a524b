"""
Корзина клиента

Корзина принадлежит клиентской сессии и привязана к одному ресторану.
При оформлении она явно превращается в запрос на создание заказа.
"""
from typing import Dict, List, Optional
from config.settings import settings
from models.menu_item import MenuItem
from schemas.order import LineItemIn, PlaceOrderRequest
from utils.errors import ValidationError
from utils.validators import validate_quantity

class CartLine:
    def __init__(self, menu_item_id: int, name: str, price: float, quantity: int = 1, image: Optional[str] = None):
        self.menu_item_id = menu_item_id
        self.name = name
        self.price = price
        self.quantity = quantity
        self.image = image

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

class Cart:
    def __init__(self, restaurant_id: int, tax_rate: Optional[float] = None, delivery_fee: Optional[float] = None):
        self.restaurant_id = restaurant_id
        self.tax_rate = settings.TAX_RATE if tax_rate is None else tax_rate
        self.flat_delivery_fee = settings.DELIVERY_FEE if delivery_fee is None else delivery_fee
        self._lines: Dict[int, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def add(self, item: MenuItem, quantity: int = 1) -> CartLine:
        if item.restaurant_id != self.restaurant_id:
            raise ValidationError("Cart can only hold items from one restaurant")
        if not item.is_available:
            raise ValidationError(f"'{item.name}' is not available right now")

        line = self._lines.get(item.id)
        new_quantity = quantity + (line.quantity if line else 0)
        is_valid, error_msg = validate_quantity(new_quantity, settings.MAX_ITEM_QUANTITY)
        if not is_valid:
            raise ValidationError(error_msg)

        if line:
            line.quantity = new_quantity
        else:
            line = CartLine(item.id, item.name, item.price, new_quantity, item.image)
            self._lines[item.id] = line
        return line

    def update_quantity(self, menu_item_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove(menu_item_id)
            return
        if menu_item_id not in self._lines:
            raise ValidationError("Item is not in the cart")
        is_valid, error_msg = validate_quantity(quantity, settings.MAX_ITEM_QUANTITY)
        if not is_valid:
            raise ValidationError(error_msg)
        self._lines[menu_item_id].quantity = quantity

    def remove(self, menu_item_id: int) -> None:
        self._lines.pop(menu_item_id, None)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def subtotal(self) -> float:
        return sum(line.line_total for line in self._lines.values())

    @property
    def taxes(self) -> float:
        return self.subtotal * self.tax_rate

    @property
    def delivery_fee(self) -> float:
        return self.flat_delivery_fee if self.subtotal > 0 else 0.0

    @property
    def total(self) -> float:
        return self.subtotal + self.taxes + self.delivery_fee

    def to_order_request(self, delivery_address: Optional[str] = None) -> PlaceOrderRequest:
        if not self._lines:
            raise ValidationError("Cart is empty")
        return PlaceOrderRequest(
            restaurant_id=self.restaurant_id,
            items=[
                LineItemIn(
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    price=line.price,
                    quantity=line.quantity,
                    image=line.image
                )
                for line in self._lines.values()
            ],
            subtotal=self.subtotal,
            taxes=self.taxes,
            delivery_fee=self.delivery_fee,
            total=self.total,
            delivery_address=delivery_address
        )
