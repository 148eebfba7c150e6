"""
Роут с настройками журнала (группа, студенты, предметы, куратор, месяцы)
"""
from fastapi import APIRouter, Depends

from journal.config import SheetLayout
from journal.roster import read_journal_config
from journal.sheets.store import CellStore
from backend.utils.auth import verify_token
from backend.utils.helpers import http_error
from backend.utils.sheets import get_store, get_layout

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("")
def get_config(
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """Настройки журнала по последнему листу периода"""
    try:
        return read_journal_config(store, layout)
    except Exception as e:
        raise http_error(e, "Ошибка чтения настроек журнала") from e
