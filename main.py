import sys
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from config.settings import settings
from database.database import init_db, close_db
from handlers import auth, health, menu, orders, profile, restaurants
from middleware.error_middleware import register_error_handlers
from middleware.logging_middleware import LoggingMiddleware
from middleware.rate_limit_middleware import RateLimitMiddleware

def setup_logging() -> None:
    Path("logs").mkdir(exist_ok=True)
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL
    )
    logger.add(
        "logs/api_{time:YYYY-MM-DD}.log",
        rotation="00:00",
        retention="30 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="DEBUG"
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Инициализация базы данных...")
    await init_db()
    logger.info("✅ База данных инициализирована")
    logger.info(f"🚀 API запущен, радиус доставки {settings.DELIVERY_RADIUS_KM:g} км")
    yield
    await close_db()

def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title="Local Delivery API", lifespan=lifespan if use_lifespan else None)

    app.add_middleware(RateLimitMiddleware, max_requests=settings.RATE_LIMIT_REQUESTS, time_window=settings.RATE_LIMIT_WINDOW)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router)
    for module in (auth, profile, restaurants, menu, orders):
        app.include_router(module.router, prefix="/api")
    if settings.DEV_LOGIN_ENABLED:
        app.include_router(auth.dev_login_router, prefix="/api")
        logger.warning("⚠️ Включен вход по email без пароля (DEV_LOGIN_ENABLED), не используйте в продакшене")
    logger.info("✅ Все роутеры зарегистрированы")

    @app.get("/")
    def root():
        return {"service": "Local Delivery API", "status": "ok"}

    return app

app = create_app()

if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
