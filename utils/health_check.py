"""
Модуль для проверки работоспособности системы
Используется для мониторинга и health checks
"""
from datetime import datetime
from database.database import get_session
from sqlalchemy import text
from loguru import logger

async def check_database_connection() -> tuple[bool, str]:
    """
    Проверяет подключение к базе данных

    Returns:
        tuple[bool, str]: (успешно ли подключение, сообщение)
    """
    try:
        async for session in get_session():
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            return True, "Database is reachable"
    except Exception as e:
        logger.error(f"Ошибка подключения к БД: {e}")
        return False, f"Database connection failed: {e}"
    return False, "Database session is not available"

async def check_system_health() -> dict:
    """
    Проверяет общее состояние системы

    Returns:
        dict: Словарь с результатами проверок
    """
    db_status, db_message = await check_database_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "checks": {
            "database": {
                "status": "ok" if db_status else "error",
                "message": db_message
            }
        }
    }

def get_system_info() -> dict:
    """
    Возвращает информацию о конфигурации сервиса

    Returns:
        dict: Информация о системе
    """
    from config.settings import settings

    return {
        "database_type": "PostgreSQL" if settings.DATABASE_URL.startswith("postgresql") else "SQLite",
        "delivery_radius_km": settings.DELIVERY_RADIUS_KM,
        "enforce_delivery_radius": settings.ENFORCE_DELIVERY_RADIUS,
        "strict_status_transitions": settings.STRICT_STATUS_TRANSITIONS,
        "tax_rate": settings.TAX_RATE,
        "delivery_fee": settings.DELIVERY_FEE,
    }
