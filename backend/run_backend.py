#!/usr/bin/env python3
"""
Запуск FastAPI бэкенда
"""
import uvicorn
from backend.config import SERVER_HOST, SERVER_PORT

if __name__ == "__main__":
    print("🚀 Запуск FastAPI бэкенда...")
    print(f"🌐 API доступен на http://{SERVER_HOST}:{SERVER_PORT}")
    print(f"📚 Документация: http://{SERVER_HOST}:{SERVER_PORT}/docs")
    print("")

    uvicorn.run(
        "backend.app:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True
    )
