"""
Конфигурация бэкенда
"""
import os
from fastapi.middleware.cors import CORSMiddleware

# Базовые CORS настройки (локальная разработка фронтенда)
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]

# Дополнительные домены через запятую: CORS_ORIGINS=https://journal.example.ru,https://...
CORS_ORIGINS.extend(
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
)

# Настройки сервера
# Render.com и Fly.io автоматически устанавливают переменную PORT
SERVER_HOST = os.getenv("HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("PORT", 5000))


def setup_cors(app):
    """Настройка CORS для приложения"""
    allow_origins = CORS_ORIGINS.copy()

    # Добавляем кастомный домен из переменных окружения (если указан)
    custom_domain = os.getenv("CUSTOM_DOMAIN", "")
    if custom_domain:
        if not custom_domain.startswith("http"):
            allow_origins.append(f"https://{custom_domain}")
        else:
            allow_origins.append(custom_domain)

    # Разрешаем все домены только если установлена переменная ALLOW_ALL_ORIGINS=true
    if os.getenv("ALLOW_ALL_ORIGINS", "false").lower() == "true":
        allow_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
