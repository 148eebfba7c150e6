"""
Вспомогательные функции
"""
from datetime import date, datetime
from fastapi import HTTPException

from journal.attendance import DateSlotNotFoundError
from journal.logger import log_backend_error
from journal.report import PeriodNotFoundError
from journal.sheets.store import StoreError


def parse_date(value: str) -> date:
    """Дата запроса в формате YYYY-MM-DD"""
    try:
        return datetime.strptime(value.strip(), '%Y-%m-%d').date()
    except (AttributeError, ValueError):
        raise HTTPException(status_code=400, detail="Некорректная дата, ожидается YYYY-MM-DD")


def http_error(error: Exception, where: str) -> HTTPException:
    """
    Ошибка ядра журнала -> HTTP ответ

    - нет листа периода / нет даты на листе -> 404
    - пустые списки и прочие ошибки ввода -> 400
    - ошибки Google Sheets и все остальное -> 500 (с записью в лог)
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, (PeriodNotFoundError, DateSlotNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=400, detail=str(error))

    log_backend_error(f"{where}: {error}", error=error)
    if isinstance(error, StoreError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail="Внутренняя ошибка сервера")
