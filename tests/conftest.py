import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
import models  # noqa: F401
from database.base import Base
from models.restaurant import Restaurant
from models.user import User, UserRole
from utils.geo import Location

CUSTOMER_LOCATION = Location(21.1500, 79.0800, "Civil Lines, Nagpur")
NEAR_RESTAURANT_LOCATION = Location(21.1458, 79.0882, "Sitabuldi, Nagpur")
FAR_RESTAURANT_LOCATION = Location(20.9500, 79.0000, "Butibori, Nagpur")

@pytest.fixture
async def test_db():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_session

    await engine.dispose()

@pytest.fixture
async def session(test_db):
    async with test_db() as session:
        yield session

async def _add_user(session, email, role, location=None):
    user = User(email=email, name=email.split("@")[0], role=role)
    user.set_location(location)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user

async def _add_restaurant(session, owner, name, location):
    restaurant = Restaurant(owner_id=owner.id, name=name, address="Main Road", phone="+91 90000 00000")
    restaurant.set_location(location)
    session.add(restaurant)
    await session.commit()
    await session.refresh(restaurant)
    return restaurant

@pytest.fixture
async def customer(session):
    return await _add_user(session, "customer@example.com", UserRole.USER, CUSTOMER_LOCATION)

@pytest.fixture
async def other_customer(session):
    return await _add_user(session, "other.customer@example.com", UserRole.USER, CUSTOMER_LOCATION)

@pytest.fixture
async def owner(session):
    return await _add_user(session, "owner@example.com", UserRole.RESTAURANT)

@pytest.fixture
async def other_owner(session):
    return await _add_user(session, "other.owner@example.com", UserRole.RESTAURANT)

@pytest.fixture
async def restaurant(session, owner):
    return await _add_restaurant(session, owner, "Spice Route", NEAR_RESTAURANT_LOCATION)

@pytest.fixture
async def far_restaurant(session, other_owner):
    return await _add_restaurant(session, other_owner, "Highway Dhaba", FAR_RESTAURANT_LOCATION)

SAMPLE_ITEMS = [
    {"menu_item_id": 1, "name": "Paneer Tikka", "price": 100.0, "quantity": 2, "image": "paneer.jpg"},
    {"menu_item_id": 2, "name": "Butter Naan", "price": 50.0, "quantity": 1, "image": None},
]

@pytest.fixture
def make_order(session, customer, restaurant):
    from services.order_service import place_order

    async def _make(actor=None, restaurant_id=None, **kwargs):
        params = {
            "items": SAMPLE_ITEMS,
            "subtotal": 250.0,
            "taxes": 12.5,
            "delivery_fee": 40.0,
            "total": 302.5,
            "delivery_address": "Civil Lines, Nagpur",
        }
        params.update(kwargs)
        items = params.pop("items")
        return await place_order(session, actor or customer, restaurant_id or restaurant.id, items, **params)

    return _make
