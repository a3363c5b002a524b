from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from config.settings import settings
from database.base import Base
from utils.errors import DeliveryError, StorageError
from loguru import logger

engine = None
async_session = None

async def init_db():
    """
    Инициализация подключения к базе данных
    Поддерживает SQLite (для разработки) и PostgreSQL (для продакшена)
    """
    global engine, async_session

    import models  # noqa: F401  регистрирует таблицы в Base.metadata

    database_url = settings.DATABASE_URL

    if database_url.startswith("sqlite"):
        if "+aiosqlite" not in database_url:
            database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
        logger.info("Используется SQLite база данных (локальная разработка)")
        engine = create_async_engine(
            database_url,
            echo=False,
            poolclass=NullPool,
            connect_args={"check_same_thread": False}
        )
    elif database_url.startswith("postgresql://") or database_url.startswith("postgresql+asyncpg://"):
        if not database_url.startswith("postgresql+asyncpg://"):
            database_url = database_url.replace("postgresql://", "postgresql+asyncpg://")

        logger.info("Используется PostgreSQL база данных (продакшен)")
        engine = create_async_engine(
            database_url,
            echo=False,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    else:
        logger.warning(f"Неизвестный тип базы данных: {database_url}. Используются стандартные настройки.")
        engine = create_async_engine(database_url, echo=False)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("База данных инициализирована успешно")
    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        raise

async def close_db():
    global engine, async_session
    if engine is not None:
        await engine.dispose()
        logger.info("Соединения с базой данных закрыты")
    engine = None
    async_session = None

async def get_session():
    if async_session is None:
        logger.error("База данных не инициализирована! Вызовите init_db() перед использованием.")
        raise RuntimeError("База данных не инициализирована. Вызовите init_db() перед использованием.")

    async with async_session() as session:
        try:
            yield session
        except DeliveryError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Ошибка в сессии базы данных: {e}", exc_info=True)
            raise StorageError("Database operation failed") from e
