import pytest
from services.menu_service import (
    add_menu_item,
    delete_menu_item,
    get_menu_for_restaurant,
    get_menu_item_by_id,
    set_menu_item_availability,
)
from utils.errors import AccessDenied, NotFound, ValidationError

async def test_add_menu_item(session, owner, restaurant):
    item = await add_menu_item(session, owner, "Masala Dosa", 90.0, description="Crispy", is_best_seller=True)

    assert item.restaurant_id == restaurant.id
    assert item.is_available is True
    assert item.is_veg is True
    assert item.image == ""

async def test_menu_lists_available_items_only(session, owner, restaurant):
    dosa = await add_menu_item(session, owner, "Masala Dosa", 90.0)
    idli = await add_menu_item(session, owner, "Idli", 60.0)
    await set_menu_item_availability(session, owner, idli.id, False)

    menu = await get_menu_for_restaurant(session, restaurant.id)
    full_menu = await get_menu_for_restaurant(session, restaurant.id, available_only=False)

    assert [i.id for i in menu] == [dosa.id]
    assert len(full_menu) == 2

async def test_negative_price_rejected(session, owner, restaurant):
    with pytest.raises(ValidationError):
        await add_menu_item(session, owner, "Free Lunch", -1.0)

async def test_owner_without_restaurant(session, other_owner):
    with pytest.raises(NotFound):
        await add_menu_item(session, other_owner, "Masala Dosa", 90.0)

async def test_customer_cannot_add(session, customer):
    with pytest.raises(AccessDenied):
        await add_menu_item(session, customer, "Masala Dosa", 90.0)

async def test_delete_menu_item(session, owner, restaurant):
    item = await add_menu_item(session, owner, "Masala Dosa", 90.0)
    await delete_menu_item(session, owner, item.id)
    assert await get_menu_item_by_id(session, item.id) is None

async def test_cannot_delete_foreign_item(session, owner, restaurant, other_owner, far_restaurant):
    item = await add_menu_item(session, owner, "Masala Dosa", 90.0)
    with pytest.raises(AccessDenied):
        await delete_menu_item(session, other_owner, item.id)

async def test_delete_unknown_item(session, owner, restaurant):
    with pytest.raises(NotFound):
        await delete_menu_item(session, owner, 9999)
