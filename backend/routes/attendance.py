"""
Роуты для работы с посещаемостью за день
"""
from typing import Dict, List
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from journal.attendance import PairAttendance, read_day, write_day, find_unrecognized_marks
from journal.config import SheetLayout
from journal.sheets.store import CellStore
from backend.utils.auth import verify_token
from backend.utils.helpers import parse_date, http_error
from backend.utils.sheets import get_store, get_layout

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


# Pydantic модели для валидации запросов
class PairPayload(BaseModel):
    """Одна пара дня"""
    pairNumber: int = Field(..., ge=1, description="Номер пары (1..4)")
    subject: str = Field("", description="Предмет (пусто - пары нет)")
    attendance: Dict[int, str] = Field(default_factory=dict, description="ID студента -> 'Н' или 'У'")


class DayPayload(BaseModel):
    """Посещаемость за день (полная замена всех пар даты)"""
    date: str = Field(..., description="Дата в формате YYYY-MM-DD")
    pairs: List[PairPayload] = Field(default_factory=list)


@router.get("")
def get_attendance(
    date: str = Query(..., description="Дата в формате YYYY-MM-DD"),
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Получить посещаемость за дату

    Returns:
        dict: {
            "date": "2025-01-13",
            "pairs": [{"pairNumber": 1, "subject": "Математика", "attendance": {"3": "Н"}}, ...],
            "pairCount": 2
        }
        Если даты нет на листе - pairs пустой и pairCount = 0
    """
    day = parse_date(date)
    try:
        return read_day(store, day, layout).to_dict()
    except Exception as e:
        raise http_error(e, "Ошибка чтения посещаемости") from e


@router.post("")
def save_attendance(
    payload: DayPayload,
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Сохранить посещаемость за дату

    ВАЖНО: слот даты перезаписывается целиком. Пары, которых нет в запросе,
    будут очищены - отправляйте полный набор пар дня.

    Raises:
        HTTPException 404: Если дата не найдена на листе периода
        HTTPException 500: При ошибке Google Sheets
    """
    day = parse_date(payload.date)
    pairs = [
        PairAttendance(pair_number=p.pairNumber, subject=p.subject, attendance=dict(p.attendance))
        for p in payload.pairs
    ]
    try:
        message = write_day(store, day, pairs, layout)
    except Exception as e:
        raise http_error(e, "Ошибка сохранения посещаемости") from e
    return {"success": True, "message": message}


@router.get("/lint")
def lint_attendance(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000),
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Найти нераспознанные отметки за месяц (все, кроме пусто/Н/У)

    Returns:
        dict: {"month": "01.25", "problems": [{"studentId", "studentName", "cell", "value"}, ...]}
    """
    try:
        problems = find_unrecognized_marks(store, month, year, layout)
    except Exception as e:
        raise http_error(e, "Ошибка проверки отметок") from e
    return {"month": f"{month:02d}.{year % 100:02d}", "problems": problems}
