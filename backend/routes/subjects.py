"""
Роуты для работы со списком предметов
"""
from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from journal.config import SheetLayout
from journal.roster import read_subject_list, update_subject_list
from journal.sheets.store import CellStore
from backend.utils.auth import verify_token
from backend.utils.helpers import http_error
from backend.utils.sheets import get_store, get_layout

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


class SubjectsUpdate(BaseModel):
    subjects: List[str]


@router.get("")
def get_subjects(
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Получить список предметов (нумерованный блок под студентами)

    Returns:
        dict: {"subjects": ["Математика", ...]}
    """
    try:
        subjects = read_subject_list(store, layout=layout)
    except Exception as e:
        raise http_error(e, "Ошибка чтения предметов") from e
    return {"subjects": subjects}


@router.put("")
def put_subjects(
    payload: SubjectsUpdate,
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """Заменить список предметов последнего периода"""
    subjects = [s.strip() for s in payload.subjects if s and s.strip()]
    try:
        update_subject_list(store, subjects, layout)
    except Exception as e:
        raise http_error(e, "Ошибка обновления предметов") from e
    return {"success": True, "subjects": subjects}
