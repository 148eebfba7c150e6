"""
Система логирования в БД для всех модулей приложения
"""
import json
import traceback
from datetime import datetime
from typing import Optional, Dict, Any

from journal.database import get_db, AppLog, ReportLog


def log_to_db(
    module: str,
    level: str,
    message: str,
    description: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    error: Optional[Exception] = None
):
    """
    Сохраняет лог в базу данных

    Args:
        module: Модуль ('journal', 'backend')
        level: Уровень лога ('INFO', 'WARNING', 'ERROR', 'DEBUG')
        message: Основное сообщение
        description: Дополнительное описание
        details: Дополнительные данные (словарь)
        error: Объект исключения (если есть)
    """
    db = get_db()
    try:
        error_traceback = None
        if error:
            error_traceback = ''.join(traceback.format_exception(
                type(error), error, error.__traceback__
            ))

        details_json = None
        if details:
            details_json = json.dumps(details, ensure_ascii=False, default=str)

        log_entry = AppLog(
            timestamp=datetime.now(),
            module=module,
            level=level,
            message=message,
            description=description,
            details=details_json,
            error_traceback=error_traceback
        )

        db.add(log_entry)
        db.commit()
    except Exception as e:
        # Если не удалось сохранить лог в БД, выводим в консоль
        print(f"⚠️ Ошибка при сохранении лога в БД: {e}")
        db.rollback()
    finally:
        db.close()


def log_report(period: str, status: str, students_count: int = 0, subjects_count: int = 0,
               total_hours: int = 0, error_message: str = None):
    """Запись в историю генерации отчетов"""
    db = get_db()
    try:
        db.add(ReportLog(
            generated_at=datetime.now(),
            period=period,
            students_count=students_count,
            subjects_count=subjects_count,
            total_hours=total_hours,
            status=status,
            error_message=error_message
        ))
        db.commit()
    except Exception as e:
        print(f"⚠️ Ошибка при сохранении лога отчета в БД: {e}")
        db.rollback()
    finally:
        db.close()


def log_journal_info(message: str, description: str = None, details: Dict[str, Any] = None):
    """Лог информации журнала"""
    log_to_db('journal', 'INFO', message, description, details)


def log_journal_warning(message: str, error: Exception = None, description: str = None, details: Dict[str, Any] = None):
    """Лог предупреждения журнала"""
    log_to_db('journal', 'WARNING', message, description, details, error=error)


def log_journal_error(message: str, error: Exception = None, description: str = None, details: Dict[str, Any] = None):
    """Лог ошибки журнала"""
    log_to_db('journal', 'ERROR', message, description, details, error=error)


def log_backend_info(message: str, description: str = None, details: Dict[str, Any] = None):
    """Лог информации бэкенда"""
    log_to_db('backend', 'INFO', message, description, details)


def log_backend_error(message: str, error: Exception = None, description: str = None, details: Dict[str, Any] = None):
    """Лог ошибки бэкенда"""
    log_to_db('backend', 'ERROR', message, description, details, error=error)
