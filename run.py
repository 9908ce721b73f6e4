"""
Скрипт для запуска бота бронирования с правильной настройкой путей
"""
import sys
from pathlib import Path

# Корень проекта должен быть в PYTHONPATH: пакеты лежат плоско
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    from main import main
    import asyncio
    asyncio.run(main())
