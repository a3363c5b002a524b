import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from database.database import init_db, close_db, get_session
from models.menu_item import MenuItem
from models.order import Order, OrderItem
from models.restaurant import Restaurant
from models.user import User, UserRole
from utils.geo import Location
from sqlalchemy import select, delete

DEMO_RESTAURANTS = [
    {
        "owner": {"email": "owner.spice@example.com", "name": "Spice Route Owner"},
        "name": "Spice Route",
        "address": "Sitabuldi Main Road",
        "phone": "+91 98220 00001",
        "location": Location(21.1458, 79.0882, "Sitabuldi, Nagpur"),
        "menu": [
            {"name": "Paneer Butter Masala", "price": 220.0, "is_veg": True, "is_best_seller": True},
            {"name": "Chicken Biryani", "price": 260.0, "is_veg": False, "is_best_seller": True},
            {"name": "Butter Naan", "price": 40.0, "is_veg": True},
            {"name": "Dal Tadka", "price": 160.0, "is_veg": True},
        ],
    },
    {
        "owner": {"email": "owner.dosa@example.com", "name": "Dosa Corner Owner"},
        "name": "Dosa Corner",
        "address": "Dharampeth Extension",
        "phone": "+91 98220 00002",
        "location": Location(21.1390, 79.0650, "Dharampeth, Nagpur"),
        "menu": [
            {"name": "Masala Dosa", "price": 90.0, "is_veg": True, "is_best_seller": True},
            {"name": "Idli Sambar", "price": 60.0, "is_veg": True},
            {"name": "Filter Coffee", "price": 30.0, "is_veg": True},
        ],
    },
    {
        "owner": {"email": "owner.highway@example.com", "name": "Highway Dhaba Owner"},
        "name": "Highway Dhaba",
        "address": "Wardha Road, Butibori",
        "phone": "+91 98220 00003",
        "location": Location(20.9500, 79.0000, "Butibori, Nagpur"),
        "menu": [
            {"name": "Tandoori Roti", "price": 20.0, "is_veg": True},
            {"name": "Mutton Curry", "price": 320.0, "is_veg": False},
        ],
    },
]

DEMO_CUSTOMER = {
    "email": "customer@example.com",
    "name": "Demo Customer",
    "location": Location(21.1500, 79.0800, "Civil Lines, Nagpur"),
}

async def seed_demo_data(session, force: bool = False) -> bool:
    """
    Создает демонстрационные данные:
    - владельцев ресторанов и их рестораны с координатами
    - меню каждого ресторана
    - покупателя с точкой доставки

    Args:
        session: Сессия базы данных
        force: Если True, удаляет существующие данные и создает заново

    Returns:
        bool: True, если данные были созданы
    """
    result = await session.execute(select(Restaurant))
    existing = result.scalars().all()

    if existing and not force:
        print("[WARNING] Демонстрационные данные уже существуют")
        print("[TIP] Используйте --force для пересоздания данных")
        return False

    if force:
        print("[INFO] Удаление существующих данных...")
        # массовый delete идет мимо ORM-каскадов, поэтому позиции заказов удаляем явно
        await session.execute(delete(OrderItem))
        await session.execute(delete(Order))
        await session.execute(delete(MenuItem))
        await session.execute(delete(Restaurant))
        await session.execute(delete(User))
        await session.commit()
        print("[OK] Старые данные удалены")

    for data in DEMO_RESTAURANTS:
        owner = User(email=data["owner"]["email"], name=data["owner"]["name"], role=UserRole.RESTAURANT)
        session.add(owner)
        await session.flush()

        restaurant = Restaurant(owner_id=owner.id, name=data["name"], address=data["address"], phone=data["phone"])
        restaurant.set_location(data["location"])
        session.add(restaurant)
        await session.flush()

        for item in data["menu"]:
            session.add(MenuItem(restaurant_id=restaurant.id, **item))
        print(f"[OK] Ресторан {data['name']}: {len(data['menu'])} позиций меню")

    customer = User(email=DEMO_CUSTOMER["email"], name=DEMO_CUSTOMER["name"], role=UserRole.USER)
    customer.set_location(DEMO_CUSTOMER["location"])
    session.add(customer)

    await session.commit()
    print(f"[OK] Покупатель {DEMO_CUSTOMER['email']} создан")
    print("\n[DONE] Демонстрационные данные готовы!")
    return True

async def create_test_data(force: bool = False):
    print("[INFO] Инициализация базы данных...")
    await init_db()
    try:
        async for session in get_session():
            await seed_demo_data(session, force)
    finally:
        await close_db()

if __name__ == "__main__":
    asyncio.run(create_test_data(force="--force" in sys.argv))
