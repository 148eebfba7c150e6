"""
МОДЕЛИ БАЗЫ ДАННЫХ
==================

Использует SQLAlchemy ORM. Сами данные журнала живут в Google Sheets,
в БД хранится только служебная информация.

Структура БД:
- ReportLog (история генерации отчетов)
- AppLog (логи приложения)

Логика:
- init_db() - создает таблицы в БД
- get_db() - возвращает сессию для работы с БД
"""

import os
from datetime import datetime
from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from journal.config import DATABASE_URL

Base = declarative_base()


class ReportLog(Base):
    """Модель лога генерации отчетов"""
    __tablename__ = 'report_log'

    id = Column(Integer, primary_key=True)
    generated_at = Column(DateTime, nullable=False, default=datetime.now)  # Время генерации
    period = Column(String, nullable=False)  # Лист периода "MM.YY"
    students_count = Column(Integer, nullable=False, default=0)
    subjects_count = Column(Integer, nullable=False, default=0)
    total_hours = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="success")  # Статус: success, error
    error_message = Column(String, nullable=True)  # Сообщение об ошибке, если есть


class AppLog(Base):
    """Универсальная модель логов приложения (журнал, бэкенд)"""
    __tablename__ = 'app_logs'

    id = Column(Integer, primary_key=True)
    timestamp = Column(DateTime, nullable=False, default=datetime.now)  # Время события
    module = Column(String, nullable=False)  # Модуль: 'journal', 'backend'
    level = Column(String, nullable=False)  # Уровень: 'INFO', 'WARNING', 'ERROR', 'DEBUG'
    message = Column(String, nullable=False)  # Сообщение лога
    description = Column(String, nullable=True)  # Дополнительное описание
    details = Column(String, nullable=True)  # Детали (JSON строка)
    error_traceback = Column(String, nullable=True)  # Трассировка ошибки (если есть)


def _make_engine(url: str):
    if url.startswith("sqlite:///"):
        # Папка data/ может еще не существовать
        db_dir = os.path.dirname(url[len("sqlite:///"):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return create_engine(url, echo=False)


# Создание движка и сессии для работы с БД
engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine)


def init_db():
    """Инициализация базы данных - создает все таблицы"""
    Base.metadata.create_all(engine)


def get_db():
    """Получение сессии БД для выполнения запросов"""
    return SessionLocal()
