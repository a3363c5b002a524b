"""
Интеграционные тесты HTTP API
Приложение поднимается поверх тестовой базы в памяти, запросы идут через ASGI-транспорт httpx
"""
import pytest
from httpx import ASGITransport, AsyncClient
from config.settings import settings

NEAR = {"lat": 21.1458, "lng": 79.0882, "address": "Sitabuldi, Nagpur"}
FAR = {"lat": 20.9500, "lng": 79.0000, "address": "Butibori, Nagpur"}
HOME = {"lat": 21.1500, "lng": 79.0800, "address": "Civil Lines, Nagpur"}

@pytest.fixture
async def client(test_db, monkeypatch):
    import database.database as database
    from main import create_app

    monkeypatch.setattr(database, "async_session", test_db)
    monkeypatch.setattr(settings, "DEV_LOGIN_ENABLED", True)
    app = create_app(use_lifespan=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

async def login(client, email, role="USER", name="Test"):
    response = await client.post("/api/auth/login", json={"email": email, "name": name, "role": role})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}

async def setup_restaurant(client, email="owner@example.com", location=NEAR):
    headers = await login(client, email, role="RESTAURANT", name="Owner")
    response = await client.post(
        "/api/restaurants/create",
        json={"name": "Spice Route", "address": "Sitabuldi", "phone": "+91 90000 00001", "location": location},
        headers=headers
    )
    assert response.status_code == 201, response.text
    return headers, response.json()["id"]

async def setup_customer(client, email="customer@example.com", location=HOME):
    headers = await login(client, email)
    if location is not None:
        response = await client.put("/api/profile/update", json={"location": location}, headers=headers)
        assert response.status_code == 200, response.text
    return headers

def order_payload(restaurant_id):
    return {
        "restaurantId": restaurant_id,
        "items": [
            {"menuItemId": 1, "name": "Paneer Tikka", "price": 100, "quantity": 2, "image": "paneer.jpg"},
            {"menuItemId": 2, "name": "Butter Naan", "price": 50, "quantity": 1},
        ],
        "subtotal": 250,
        "taxes": 12.5,
        "deliveryFee": 40,
        "total": 302.5,
        "deliveryAddress": "Civil Lines, Nagpur",
    }

async def place(client, headers, restaurant_id):
    response = await client.post("/api/orders", json=order_payload(restaurant_id), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["order"]

async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

async def test_unauthenticated(client):
    response = await client.get("/api/orders/my-orders")
    assert response.status_code == 401
    assert response.json()["kind"] == "Unauthenticated"

async def test_invalid_token(client):
    response = await client.get("/api/orders/my-orders", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401

async def test_login_and_profile(client):
    headers = await setup_customer(client)
    response = await client.get("/api/profile/me", headers=headers)
    body = response.json()
    assert body["email"] == "customer@example.com"
    assert body["role"] == "USER"
    assert body["location"]["lat"] == HOME["lat"]

async def test_profile_location_requires_coordinates(client):
    headers = await login(client, "customer@example.com")
    response = await client.put("/api/profile/update", json={"location": {"lat": 21.1}}, headers=headers)
    assert response.status_code == 400
    assert response.json()["kind"] == "ValidationError"

async def test_place_order(client):
    _, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)

    response = await client.post("/api/orders", json=order_payload(restaurant_id), headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    order = body["order"]
    assert order["status"] == "PLACED"
    assert order["total"] == 302.5
    assert order["restaurant"]["name"] == "Spice Route"
    assert [i["quantity"] for i in order["items"]] == [2, 1]

async def test_place_order_validation(client):
    _, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    payload = order_payload(restaurant_id)
    payload["items"] = []

    response = await client.post("/api/orders", json=payload, headers=headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "ValidationError"

async def test_place_order_out_of_range(client, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_DELIVERY_RADIUS", True)
    _, restaurant_id = await setup_restaurant(client, location=FAR)
    headers = await setup_customer(client)

    response = await client.post("/api/orders", json=order_payload(restaurant_id), headers=headers)

    assert response.status_code == 400
    assert response.json()["distanceKm"] > 5

async def test_restaurant_cannot_place_order(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    response = await client.post("/api/orders", json=order_payload(restaurant_id), headers=owner_headers)
    assert response.status_code == 403

async def test_eligibility_endpoint(client):
    _, near_id = await setup_restaurant(client)
    _, far_id = await setup_restaurant(client, email="far.owner@example.com", location=FAR)
    headers = await setup_customer(client)

    near = (await client.get(f"/api/restaurants/{near_id}/eligibility", headers=headers)).json()
    far = (await client.get(f"/api/restaurants/{far_id}/eligibility", headers=headers)).json()

    assert near["eligible"] is True
    assert far["eligible"] is False
    assert far["maxRadiusKm"] == settings.DELIVERY_RADIUS_KM

    nearby = (await client.get("/api/restaurants/nearby", headers=headers)).json()
    assert [r["id"] for r in nearby] == [near_id]

async def test_status_flow(client, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", True)
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    for status in ("CONFIRMED", "PREPARING", "OUT_FOR_DELIVERY", "DELIVERED"):
        response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": status}, headers=owner_headers)
        assert response.status_code == 200, response.text
        assert response.json()["order"]["status"] == status

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "CONFIRMED"}, headers=owner_headers)
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidTransition"

async def test_invalid_status_value(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "SHIPPED"}, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid status"

async def test_foreign_restaurant_cannot_update(client):
    _, restaurant_id = await setup_restaurant(client)
    other_headers, _ = await setup_restaurant(client, email="other.owner@example.com")
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "CONFIRMED"}, headers=other_headers)

    assert response.status_code == 403
    assert response.json()["kind"] == "AccessDenied"

async def test_user_cancel(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    response = await client.patch(f"/api/orders/{order['id']}/cancel", headers=headers)

    assert response.status_code == 200
    assert response.json()["order"]["status"] == "CANCELLED"
    assert response.json()["order"]["cancelledBy"] == "USER"

async def test_user_cannot_cancel_preparing(client, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", True)
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)
    for status in ("CONFIRMED", "PREPARING"):
        await client.patch(f"/api/orders/{order['id']}/status", json={"status": status}, headers=owner_headers)

    response = await client.patch(f"/api/orders/{order['id']}/cancel", headers=headers)

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidTransition"

async def test_restaurant_cancel_with_reason(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)
    await client.patch(f"/api/orders/{order['id']}/status", json={"status": "CONFIRMED"}, headers=owner_headers)

    response = await client.patch(
        f"/api/orders/{order['id']}/restaurant-cancel", json={"reason": "Out of stock"}, headers=owner_headers
    )

    assert response.status_code == 200
    cancelled = response.json()["order"]
    assert cancelled["status"] == "CANCELLED"
    assert cancelled["cancelledBy"] == "RESTAURANT"
    assert cancelled["cancellationReason"] == "Out of stock"

async def test_restaurant_cancel_without_body(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    response = await client.patch(f"/api/orders/{order['id']}/restaurant-cancel", headers=owner_headers)

    assert response.status_code == 200
    assert response.json()["order"]["cancellationReason"] == "Cancelled by restaurant"

async def test_order_lists_and_visibility(client):
    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    stranger = await setup_customer(client, email="stranger@example.com")
    first = await place(client, headers, restaurant_id)
    second = await place(client, headers, restaurant_id)

    mine = (await client.get("/api/orders/my-orders", headers=headers)).json()["orders"]
    assert [o["id"] for o in mine] == [second["id"], first["id"]]

    restaurant_orders = await client.get(f"/api/orders/restaurant/{restaurant_id}", headers=owner_headers)
    assert restaurant_orders.status_code == 200
    assert restaurant_orders.json()["orders"][0]["user"]["email"] == "customer@example.com"

    assert (await client.get(f"/api/orders/{first['id']}", headers=headers)).status_code == 200
    assert (await client.get(f"/api/orders/{first['id']}", headers=owner_headers)).status_code == 200
    assert (await client.get(f"/api/orders/{first['id']}", headers=stranger)).status_code == 403
    assert (await client.get("/api/orders/9999", headers=headers)).status_code == 404

async def test_customer_cannot_list_restaurant_orders(client):
    _, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    response = await client.get(f"/api/orders/restaurant/{restaurant_id}", headers=headers)
    assert response.status_code == 403

async def test_menu_management(client):
    owner_headers, restaurant_id = await setup_restaurant(client)

    response = await client.post("/api/menu/add", json={"name": "Masala Dosa", "price": 90, "isBestSeller": True}, headers=owner_headers)
    assert response.status_code == 200
    item = response.json()
    assert item["isBestSeller"] is True

    menu = (await client.get(f"/api/menu/{restaurant_id}")).json()
    assert [i["name"] for i in menu] == ["Masala Dosa"]

    response = await client.patch(f"/api/menu/{item['id']}/availability", json={"isAvailable": False}, headers=owner_headers)
    assert response.status_code == 200
    assert (await client.get(f"/api/menu/{restaurant_id}")).json() == []

    response = await client.delete(f"/api/menu/{item['id']}", headers=owner_headers)
    assert response.json() == {"message": "Deleted"}

async def test_rate_limit(test_db, monkeypatch):
    import database.database as database
    from main import create_app

    monkeypatch.setattr(database, "async_session", test_db)
    monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 2)
    app = create_app(use_lifespan=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        assert (await client.get("/")).status_code == 200
        assert (await client.get("/")).status_code == 200
        response = await client.get("/")
        assert response.status_code == 429
        assert response.json()["kind"] == "RateLimited"

async def test_concurrent_status_change_is_invalid_transition(client, monkeypatch):
    from sqlalchemy import update
    import services.order_service as order_service
    from models.order import Order

    owner_headers, restaurant_id = await setup_restaurant(client)
    headers = await setup_customer(client)
    order = await place(client, headers, restaurant_id)

    original_transition = order_service._transition

    async def transition_after_concurrent_write(session, stale_order, new_status, **values):
        # параллельный запрос успел подтвердить заказ между чтением и записью
        await session.execute(
            update(Order)
            .where(Order.id == stale_order.id)
            .values(status=Order.status, version=Order.version + 1)
            .execution_options(synchronize_session=False)
        )
        await session.commit()
        return await original_transition(session, stale_order, new_status, **values)

    monkeypatch.setattr(order_service, "_transition", transition_after_concurrent_write)
    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "CONFIRMED"}, headers=owner_headers)
    monkeypatch.setattr(order_service, "_transition", original_transition)

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidTransition"

    reloaded = (await client.get(f"/api/orders/{order['id']}", headers=headers)).json()["order"]
    assert reloaded["status"] == "PLACED"

async def test_dev_login_disabled_by_default(test_db, monkeypatch):
    import database.database as database
    from main import create_app
    from models.user import User, UserRole
    from utils.security import create_access_token

    monkeypatch.setattr(database, "async_session", test_db)
    monkeypatch.setattr(settings, "DEV_LOGIN_ENABLED", False)
    async with test_db() as session:
        owner = User(email="owner@example.com", name="Owner", role=UserRole.RESTAURANT)
        session.add(owner)
        await session.commit()
        token = create_access_token(owner)

    app = create_app(use_lifespan=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/auth/login", json={"email": "owner@example.com", "name": "Intruder"})
        assert response.status_code in (404, 405)

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "owner@example.com"

async def test_dev_login_enabled(client):
    headers = await login(client, "customer@example.com")
    response = await client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["role"] == "USER"
