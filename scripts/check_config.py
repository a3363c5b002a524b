"""
Скрипт для проверки конфигурации проекта
Проверяет наличие всех необходимых переменных окружения и их корректность
"""
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

def check_env_file():
    """Проверяет наличие .env файла"""
    env_path = Path(".env")
    if not env_path.exists():
        print("⚠️  Файл .env не найден, будут использованы значения по умолчанию")
        return True
    print("✅ Файл .env найден")
    return True

def check_jwt_secret():
    """Проверяет JWT_SECRET"""
    secret = os.getenv("JWT_SECRET", "")
    if not secret or secret == "dev_secret_change_me":
        print("❌ JWT_SECRET не установлен или имеет значение по умолчанию")
        print("   Установите секрет для подписи токенов в .env файле")
        return False
    if len(secret) < 32:
        print("⚠️  JWT_SECRET слишком короткий (меньше 32 символов)")
        return False
    print("✅ JWT_SECRET установлен")
    return True

def check_database_url():
    """Проверяет DATABASE_URL"""
    db_url = os.getenv("DATABASE_URL", "")
    if not db_url:
        print("⚠️  DATABASE_URL не установлен, будет использовано значение по умолчанию (SQLite)")
        return True

    if db_url.startswith("sqlite"):
        print("✅ DATABASE_URL: SQLite (для разработки)")
    elif db_url.startswith("postgresql"):
        print("✅ DATABASE_URL: PostgreSQL (для продакшена)")
    else:
        print("⚠️  DATABASE_URL имеет нестандартный формат")

    return True

def check_delivery_settings():
    """Проверяет радиус доставки и ставки"""
    values = {
        "DELIVERY_RADIUS_KM": os.getenv("DELIVERY_RADIUS_KM", "5"),
        "TAX_RATE": os.getenv("TAX_RATE", "0.05"),
        "DELIVERY_FEE": os.getenv("DELIVERY_FEE", "40"),
    }

    try:
        parsed = {name: float(value) for name, value in values.items()}
    except ValueError:
        print("❌ Настройки доставки содержат некорректные значения")
        return False

    if parsed["DELIVERY_RADIUS_KM"] <= 0:
        print("❌ DELIVERY_RADIUS_KM должен быть положительным")
        return False
    if parsed["TAX_RATE"] < 0 or parsed["DELIVERY_FEE"] < 0:
        print("❌ TAX_RATE и DELIVERY_FEE не могут быть отрицательными")
        return False

    print(f"✅ Радиус доставки: {parsed['DELIVERY_RADIUS_KM']:g} км")
    return True

def check_rate_limit():
    """Проверяет настройки ограничения запросов"""
    try:
        requests = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
        window = int(os.getenv("RATE_LIMIT_WINDOW", "60"))
    except ValueError:
        print("❌ RATE_LIMIT_* содержат некорректные значения")
        return False
    if requests <= 0:
        print("⚠️  Ограничение запросов отключено")
        return True
    print(f"✅ Ограничение запросов: {requests} за {window} сек")
    return True

def check_dev_login():
    """Проверяет, что вход без пароля выключен"""
    if os.getenv("DEV_LOGIN_ENABLED", "false").strip().lower() in ("1", "true", "yes", "on"):
        print("⚠️  DEV_LOGIN_ENABLED включен: токены выдаются по email без пароля")
        print("   Используйте только для локальной разработки")
        return False
    print("✅ Вход без пароля выключен")
    return True

def check_directories():
    """Проверяет наличие необходимых директорий"""
    dir_path = Path("logs")
    if not dir_path.exists():
        dir_path.mkdir(exist_ok=True)
        print("✅ Создана директория: logs")
    else:
        print("✅ Директория logs существует")
    return True

def main():
    """Главная функция проверки"""
    print("Проверка конфигурации проекта...\n")

    load_dotenv()

    checks = [
        ("Файл .env", check_env_file),
        ("JWT_SECRET", check_jwt_secret),
        ("DATABASE_URL", check_database_url),
        ("Настройки доставки", check_delivery_settings),
        ("Ограничение запросов", check_rate_limit),
        ("Вход для разработки", check_dev_login),
        ("Директории", check_directories),
    ]

    results = []
    for name, check_func in checks:
        try:
            result = check_func()
            results.append((name, result))
        except Exception as e:
            print(f"❌ Ошибка при проверке {name}: {e}")
            results.append((name, False))
        print()

    print("=" * 50)
    print("📊 Результаты проверки:")
    print("=" * 50)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✅" if result else "❌"
        print(f"{status} {name}")

    print("=" * 50)
    print(f"Пройдено: {passed}/{total}")

    if passed == total:
        print("\n✅ Все проверки пройдены! Проект готов к запуску.")
        return 0
    else:
        print("\n⚠️  Некоторые проверки не пройдены. Исправьте ошибки перед запуском.")
        return 1

if __name__ == "__main__":
    sys.exit(main())
