"""
FastAPI приложение журнала посещаемости
"""
import os
from fastapi import FastAPI
from backend.config import setup_cors
from backend.routes import attendance, report, journal_config, students, subjects
from backend.utils.auth import get_or_create_token, load_tokens, TOKEN_FILE
from journal.database import init_db
from journal.logger import log_backend_error

# Создаем FastAPI приложение
app = FastAPI(
    title="El-Jurnal API",
    version="1.0.0",
    description="API журнала посещаемости группы поверх Google Sheets"
)

# Настраиваем CORS
setup_cors(app)

# Таблицы логов и токен доступа создаются при импорте:
# на serverless-платформах startup events не вызываются
try:
    init_db()
except Exception as e:
    print(f"⚠️ Не удалось инициализировать БД логов: {e}")

if not os.getenv("VERCEL"):
    try:
        token = get_or_create_token()
        print(f"\n{'='*60}")
        print(f"🔑 ТОКЕН ДОСТУПА К API")
        print(f"{'='*60}")
        print(f"Токен: {token}")
        print(f"📁 Файл с токенами: {TOKEN_FILE}")
        print(f"📝 Заголовок: Authorization: Bearer {token}")
        print(f"{'='*60}\n")
    except OSError as e:
        log_backend_error("Не удалось создать токен доступа", error=e)

# Подключаем роуты
app.include_router(attendance.router)
app.include_router(report.router)
app.include_router(journal_config.router)
app.include_router(students.router)
app.include_router(subjects.router)


@app.get("/")
async def root():
    """Корневой эндпоинт (публичный, не требует токена)"""
    return {
        "message": "El-Jurnal API",
        "version": "1.0.0",
        "docs": "/docs",
        "auth_required": True,
        "endpoints": {
            "get_token": "/api/token (публичный, без авторизации)",
            "attendance": "/api/attendance?date=YYYY-MM-DD",
            "attendance_lint": "/api/attendance/lint?month=M&year=YYYY",
            "report": "/api/report (POST {month, year})",
            "config": "/api/config",
            "students": "/api/students",
            "subjects": "/api/subjects"
        },
        "note": "Все эндпоинты (кроме / и /api/token) требуют токен доступа в заголовке Authorization: Bearer <token>"
    }


@app.get("/api/token")
async def get_token():
    """
    Получить текущий токен доступа (публичный эндпоинт, не требует авторизации)

    Returns:
        dict: Информация о токене доступа
    """
    token = get_or_create_token()
    token_info = load_tokens().get(token, {})

    return {
        "token": token,
        "created_at": token_info.get("created_at"),
        "last_used": token_info.get("last_used"),
        "usage": "Используйте этот токен в заголовке: Authorization: Bearer <token>",
        "example": f"Authorization: Bearer {token}"
    }
