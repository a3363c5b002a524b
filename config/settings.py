import os
from dotenv import load_dotenv

load_dotenv()

def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./local_delivery.db")
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev_secret_change_me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
    DELIVERY_RADIUS_KM: float = float(os.getenv("DELIVERY_RADIUS_KM", "5"))
    TAX_RATE: float = float(os.getenv("TAX_RATE", "0.05"))
    DELIVERY_FEE: float = float(os.getenv("DELIVERY_FEE", "40"))
    ENFORCE_DELIVERY_RADIUS: bool = _get_bool("ENFORCE_DELIVERY_RADIUS", "true")
    STRICT_STATUS_TRANSITIONS: bool = _get_bool("STRICT_STATUS_TRANSITIONS", "true")
    # 0 снимает ограничение на количество одной позиции
    MAX_ITEM_QUANTITY: int = int(os.getenv("MAX_ITEM_QUANTITY", "0"))
    # вход по email без пароля, только для локальной разработки
    DEV_LOGIN_ENABLED: bool = _get_bool("DEV_LOGIN_ENABLED", "false")
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
    RATE_LIMIT_WINDOW: int = int(os.getenv("RATE_LIMIT_WINDOW", "60"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
