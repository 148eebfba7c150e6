"""
Роуты для работы со студентами
"""
from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from journal.config import SheetLayout
from journal.roster import read_students, update_student_names
from journal.sheets.store import CellStore
from backend.utils.auth import verify_token
from backend.utils.helpers import http_error
from backend.utils.sheets import get_store, get_layout

router = APIRouter(prefix="/api/students", tags=["students"])


class StudentItem(BaseModel):
    id: int = Field(..., gt=0, description="Номер студента в списке")
    name: str = Field(..., min_length=1, description="ФИО")


class StudentsUpdate(BaseModel):
    students: List[StudentItem]


@router.get("")
def get_students(
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Получить список студентов последнего периода

    Returns:
        dict: {"students": [{"id": 1, "name": "..."}, ...]}
    """
    try:
        students = read_students(store, layout=layout)
    except Exception as e:
        raise http_error(e, "Ошибка чтения студентов") from e
    return {"students": [s.to_dict() for s in students]}


@router.put("")
def put_students(
    payload: StudentsUpdate,
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """Переименовать студентов (перезаписывает A:B последнего периода с начала блока)"""
    students = [s.model_dump() for s in payload.students]
    try:
        update_student_names(store, students, layout)
    except Exception as e:
        raise http_error(e, "Ошибка обновления студентов") from e
    return {"success": True, "students": students}
