"""
Роуты для генерации отчетов
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from journal.config import SheetLayout
from journal.report_writer import generate_reports
from journal.sheets.store import CellStore
from backend.utils.auth import verify_token
from backend.utils.helpers import http_error
from backend.utils.sheets import get_store, get_layout

router = APIRouter(prefix="/api/report", tags=["report"])


class ReportRequest(BaseModel):
    month: int = Field(..., ge=1, le=12, description="Месяц 1-12")
    year: int = Field(..., ge=2000, description="Полный год, например 2025")


@router.post("")
def create_report(
    payload: ReportRequest,
    store: CellStore = Depends(get_store),
    layout: SheetLayout = Depends(get_layout),
    token: str = Depends(verify_token)
):
    """
    Сгенерировать листы "MM.YYОтчет" и "MM.YYПодробно" за месяц

    Returns:
        dict: {
            "success": true,
            "message": "Отчёт за январь 2025 сгенерирован",
            "report": {"month", "year", "group", "curator", "subjects",
                       "subjectHours", "totalHours", "rows"}
        }

    Raises:
        HTTPException 404: Если нет листа периода
        HTTPException 500: При ошибке Google Sheets
    """
    try:
        data = generate_reports(store, payload.month, payload.year, layout)
    except Exception as e:
        raise http_error(e, "Ошибка генерации отчета") from e

    return {
        "success": True,
        "message": f"Отчёт за {data.month_name} {payload.year} сгенерирован",
        "report": data.to_dict(),
    }
