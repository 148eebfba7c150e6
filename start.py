#!/usr/bin/env python3
"""
Запуск приложения: API сервер журнала посещаемости
Универсальный скрипт для Docker и локального запуска
"""
import os
import sys
import signal
import traceback
from pathlib import Path

import uvicorn

from backend.config import SERVER_HOST, SERVER_PORT
from journal.database import init_db
from journal.logger import log_backend_info, log_backend_error

project_root = Path(__file__).parent


def run_backend():
    """Запуск FastAPI бэкенда"""

    def signal_handler(sig, frame):
        """Обработчик сигнала для корректного завершения"""
        print("\n🛑 [API] Получен сигнал остановки сервера...", flush=True)
        log_backend_info(
            "Получен сигнал остановки сервера",
            f"Сигнал: {sig}, остановка API сервера"
        )
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Получаем порт из переменных окружения (Docker/Render/Fly.io устанавливают автоматически)
    port = int(os.getenv("PORT", SERVER_PORT))
    host = os.getenv("HOST", SERVER_HOST)

    print("=" * 60, flush=True)
    print(f"🌐 [API] Запуск FastAPI сервера", flush=True)
    print(f"🌐 [API] Адрес: http://{host}:{port}", flush=True)
    print(f"🌐 [API] Документация: http://{host}:{port}/docs", flush=True)
    print("=" * 60, flush=True)

    log_backend_info("Запуск API сервера", f"Сервер запускается на {host}:{port}")
    try:
        uvicorn.run(
            "backend.app:app",
            host=host,
            port=port,
            reload=False,
            log_level="info",
            access_log=True
        )
    except KeyboardInterrupt:
        log_backend_info("API сервер остановлен", "Сервер корректно завершил работу")
        raise
    except Exception as e:
        print(f"❌ Ошибка в бэкенде: {e}")
        log_backend_error(
            f"Ошибка в бэкенде: {str(e)}",
            error=e,
            description="Критическая ошибка в API сервере"
        )
        raise


if __name__ == "__main__":
    data_dir = project_root / "data"
    if not data_dir.exists():
        data_dir.mkdir(parents=True, exist_ok=True)
        print(f"📁 Создана директория: {data_dir}")

    print("=" * 60, flush=True)
    print("🚀 [STARTUP] Запуск журнала посещаемости", flush=True)
    print("=" * 60, flush=True)
    print("📊 [STARTUP] Инициализация базы данных логов...", flush=True)
    try:
        init_db()
        print("✅ [STARTUP] База данных готова", flush=True)
        log_backend_info(
            "Инициализация базы данных",
            "База данных инициализирована, все таблицы созданы"
        )
    except Exception as e:
        print(f"⚠️  [STARTUP] Предупреждение при инициализации БД: {e}", flush=True)
        print("   [STARTUP] Продолжаем запуск...", flush=True)

    try:
        run_backend()
    except KeyboardInterrupt:
        print("\n🛑 [SHUTDOWN] Получен сигнал остановки...", flush=True)
        print("✅ Приложение остановлено")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ Критическая ошибка: {e}")
        traceback.print_exc()
        sys.exit(1)
