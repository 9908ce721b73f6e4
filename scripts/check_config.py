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
        print("❌ Файл .env не найден!")
        print("   Создайте его на основе env.example:")
        print("   cp env.example .env")
        return False
    print("✅ Файл .env найден")
    return True

def check_bot_token():
    token = os.getenv("BOT_TOKEN", "")
    if not token or token == "your_bot_token_here":
        print("❌ BOT_TOKEN не установлен или имеет значение по умолчанию")
        return False
    if len(token) < 40:
        print("⚠️  BOT_TOKEN выглядит некорректно (слишком короткий)")
        return False
    print("✅ BOT_TOKEN установлен")
    return True

def check_storage():
    """Проверяет STORAGE_BACKEND и DATABASE_URL"""
    backend = os.getenv("STORAGE_BACKEND", "sql").lower()
    if backend == "memory":
        print("⚠️  STORAGE_BACKEND=memory: данные пропадут после перезапуска")
        return True
    if backend != "sql":
        print(f"❌ STORAGE_BACKEND имеет неизвестное значение: {backend} (ожидается sql или memory)")
        return False

    db_url = os.getenv("DATABASE_URL", "")
    if not db_url:
        print("⚠️  DATABASE_URL не установлен, будет использовано значение по умолчанию (SQLite)")
    elif db_url.startswith("sqlite"):
        print("✅ DATABASE_URL: SQLite (для разработки)")
    elif db_url.startswith("postgresql"):
        print("✅ DATABASE_URL: PostgreSQL (для продакшена)")
    else:
        print("⚠️  DATABASE_URL имеет нестандартный формат")
    return True

def check_admin_ids():
    admin_ids_str = os.getenv("ADMIN_IDS", "")
    if not admin_ids_str:
        print("⚠️  ADMIN_IDS не установлен")
        print("   Бот будет работать, но админ-панель будет недоступна")
        return True

    try:
        admin_ids = [int(id.strip()) for id in admin_ids_str.split(",") if id.strip()]
    except ValueError:
        print("❌ ADMIN_IDS содержит некорректные значения")
        print("   Формат: ADMIN_IDS=123456789,987654321")
        return False
    print(f"✅ ADMIN_IDS установлен: {len(admin_ids)} администратор(ов)")
    return True

def check_booking_settings():
    """Проверяет правила бронирования"""
    try:
        duration = int(os.getenv("DEFAULT_BOOKING_DURATION", "120"))
        min_size = int(os.getenv("MIN_PARTY_SIZE", "1"))
        max_size = int(os.getenv("MAX_PARTY_SIZE", "10"))
        horizon = int(os.getenv("BOOKING_HORIZON_DAYS", "30"))
    except ValueError:
        print("❌ Настройки бронирования содержат некорректные значения")
        return False

    if not 0 < duration <= 24 * 60:
        print(f"❌ DEFAULT_BOOKING_DURATION должна быть от 1 до 1440 минут, сейчас {duration}")
        return False
    if min_size < 1 or max_size < min_size:
        print(f"❌ Некорректный диапазон гостей: {min_size}-{max_size}")
        return False
    if horizon < 0:
        print("❌ BOOKING_HORIZON_DAYS не может быть отрицательным")
        return False
    print(f"✅ Бронь {duration} мин., гостей {min_size}-{max_size}, горизонт {horizon} дн.")
    return True

def check_directories():
    dir_path = Path("logs")
    if not dir_path.exists():
        dir_path.mkdir(exist_ok=True)
        print("✅ Создана директория: logs")
    else:
        print("✅ Директория logs существует")
    return True

def main():
    print("Проверка конфигурации проекта...\n")

    load_dotenv()

    checks = [
        ("Файл .env", check_env_file),
        ("BOT_TOKEN", check_bot_token),
        ("Хранилище", check_storage),
        ("ADMIN_IDS", check_admin_ids),
        ("Правила бронирования", check_booking_settings),
        ("Директории", check_directories),
    ]

    results = []
    for name, check_func in checks:
        results.append((name, check_func()))
        print()

    print("=" * 50)
    print("📊 Результаты проверки:")
    print("=" * 50)

    passed = sum(1 for _, result in results if result)
    for name, result in results:
        print(f"{'✅' if result else '❌'} {name}")

    print("=" * 50)
    print(f"Пройдено: {passed}/{len(results)}")

    if passed == len(results):
        print("\n✅ Все проверки пройдены! Проект готов к запуску.")
        return 0
    print("\n⚠️  Некоторые проверки не пройдены. Исправьте ошибки перед запуском.")
    return 1

if __name__ == "__main__":
    sys.exit(main())
