"""
ЗАПИСЬ ЛИСТОВ ОТЧЕТА
====================

Два листа на период, оба строятся из одного ReportData:

"MM.YYОтчет" (сводный):
    Строка 1:    заголовок (объединен на всю ширину)
    Строка 2:    пусто
    Строки 3-6:  шапка, каждая колонка объединена по вертикали на 4 строки
    Строка 7:    часы по предметам
    Строки 8+:   студенты
    Колонки: №, ФИО, по колонке на предмет, ИТОГО, из них уважит., % пропусков, % неуважит.

"MM.YYПодробно":
    Строки 1-2:  пусто
    Строка 3:    предметы, каждый объединен на 3 колонки (Ч, Н, У)
    Строка 4:    подзаголовки Ч / Н / У
    Строки 5+:   студенты
    Последняя:   часы (B - всего за период, Ч предмета - часы предмета)

Запись идет в две фазы:
1. commit_values() - лист очищается целиком и значения записываются заново.
   Повторная генерация не оставляет старых значений, даже если предметов стало меньше
2. apply_formatting() - снятие старых объединений и границ, новые объединения,
   выравнивание шапки, границы. Ошибки этой фазы только логируются:
   данные к этому моменту уже записаны
"""

from dataclasses import dataclass, field
from typing import Any, List

from journal.config import DEFAULT_LAYOUT, SheetLayout
from journal.logger import log_journal_info, log_journal_warning, log_report
from journal.report import ReportData, compute_report_data
from journal.sheets.addressing import a1_range, quote_sheet, sheet_names
from journal.sheets.store import CellStore, GridRegion, BORDER_NONE

SUMMARY_HEADER_ROWS = 4
SUMMARY_FIRST_STUDENT_ROW = 8
DETAILED_FIRST_STUDENT_ROW = 5
DETAILED_SUB_HEADERS = ("Ч", "Н", "У")


@dataclass
class SheetPlan:
    """Все, что нужно записать на лист отчета: значения и оформление"""
    sheet: str
    values: List[List[Any]]
    end_col: int
    end_row: int
    header: GridRegion
    borders: GridRegion
    merges: List[GridRegion] = field(default_factory=list)
    wrap_header: bool = False


def report_title(data: ReportData) -> str:
    return (
        f"Анализ посещаемости занятий в группе {data.group_name}  "
        f"за {data.month_name} месяц   {data.academic_year}  уч.года\n"
        f"Куратор - {data.curator}"
    )


def build_summary_plan(sheet: str, data: ReportData) -> SheetPlan:
    """Раскладка сводного листа "Отчет" """
    subjects = data.subjects
    end_col = 2 + len(subjects) + 4  # №, ФИО, предметы, ИТОГО, уважит., % проп., % неуважит.
    end_row = SUMMARY_FIRST_STUDENT_ROW - 1 + len(data.report_rows)

    rows: List[List[Any]] = [[report_title(data)], []]
    rows.append([
        "№",
        "Предмет,\nкол. час\nФИО\nстудента",
        *subjects,
        "ИТОГО",
        "Из них по\nуважит.",
        "% пропусков",
        "% неуважит.\nпроп.",
    ])
    rows.extend([] for _ in range(SUMMARY_HEADER_ROWS - 1))
    rows.append(["", "", *[data.subject_hours.get(s, 0) for s in subjects], data.total_hours, "", "", ""])

    for number, report_row in enumerate(data.report_rows, 1):
        rows.append([
            number,
            report_row.student_name,
            *[report_row.by_subject.get(s) or "" for s in subjects],
            report_row.total or "",
            report_row.excused or "",
            report_row.total_percent,
            report_row.unexcused_percent,
        ])

    header_start = 2
    header_end = header_start + SUMMARY_HEADER_ROWS
    merges = [GridRegion(0, 1, 0, end_col)]
    merges.extend(GridRegion(header_start, header_end, col, col + 1) for col in range(end_col))

    return SheetPlan(
        sheet=sheet,
        values=rows,
        end_col=end_col,
        end_row=end_row,
        header=GridRegion(header_start, header_end, 0, end_col),
        borders=GridRegion(header_start, end_row, 0, end_col),
        merges=merges,
        wrap_header=True,
    )


def build_detailed_plan(sheet: str, data: ReportData) -> SheetPlan:
    """Раскладка листа "Подробно" """
    subjects = data.subjects
    end_col = 2 + len(subjects) * 3
    end_row = DETAILED_FIRST_STUDENT_ROW - 1 + len(data.detailed_rows) + 1

    rows: List[List[Any]] = [[], []]
    subject_header: List[Any] = ["№", "ФИО"]
    sub_header: List[Any] = ["", ""]
    for subject in subjects:
        subject_header.extend([subject, "", ""])
        sub_header.extend(DETAILED_SUB_HEADERS)
    rows.append(subject_header)
    rows.append(sub_header)

    for number, detailed_row in enumerate(data.detailed_rows, 1):
        row: List[Any] = [number, detailed_row.student_name]
        for subject in subjects:
            absence = detailed_row.by_subject[subject]
            row.extend([absence.hours or "", absence.unexcused or "", absence.excused or ""])
        rows.append(row)

    hours_row: List[Any] = ["", data.total_hours]
    for subject in subjects:
        hours_row.extend([data.subject_hours.get(subject, 0), "", ""])
    rows.append(hours_row)

    merges = [GridRegion(2, 4, 0, 1), GridRegion(2, 4, 1, 2)]
    for index in range(len(subjects)):
        first_col = 2 + index * 3
        merges.append(GridRegion(2, 3, first_col, first_col + 3))

    return SheetPlan(
        sheet=sheet,
        values=rows,
        end_col=end_col,
        end_row=end_row,
        header=GridRegion(2, 4, 0, end_col),
        borders=GridRegion(2, end_row, 0, end_col),
        merges=merges,
    )


def commit_values(store: CellStore, plan: SheetPlan):
    """Фаза 1: лист существует, очищен и заполнен значениями"""
    store.ensure_sheet(plan.sheet, min_rows=plan.end_row, min_cols=plan.end_col)
    store.clear_range(quote_sheet(plan.sheet))
    store.write_range(a1_range(plan.sheet, 1, 1, plan.end_col, plan.end_row), plan.values)


def apply_formatting(store: CellStore, plan: SheetPlan) -> bool:
    """
    Фаза 2: оформление (не критично)

    Returns:
        bool: True, если оформление применено полностью
    """
    try:
        sheet_id = store.get_sheet_id(plan.sheet)
        # Сначала убираем объединения и границы прошлой генерации (могла быть другая ширина)
        store.unmerge_cells(sheet_id)
        store.set_borders(sheet_id, None, BORDER_NONE)
        store.merge_cells(sheet_id, plan.merges)
        store.format_header(sheet_id, plan.header, wrap=plan.wrap_header)
        store.set_borders(sheet_id, plan.borders)
        return True
    except Exception as e:
        log_journal_warning(
            f"Не удалось оформить лист {plan.sheet}",
            error=e,
            description="Данные отчета записаны, оформление пропущено"
        )
        return False


def write_sheet(store: CellStore, plan: SheetPlan) -> bool:
    commit_values(store, plan)
    return apply_formatting(store, plan)


def write_report_sheet(store: CellStore, month: int, year: int, data: ReportData) -> bool:
    """Записывает сводный лист "MM.YYОтчет" """
    return write_sheet(store, build_summary_plan(sheet_names(month, year).report, data))


def write_detailed_sheet(store: CellStore, month: int, year: int, data: ReportData) -> bool:
    """Записывает лист "MM.YYПодробно" """
    return write_sheet(store, build_detailed_plan(sheet_names(month, year).detailed, data))


def generate_reports(store: CellStore, month: int, year: int,
                     layout: SheetLayout = DEFAULT_LAYOUT) -> ReportData:
    """
    Полная генерация отчетов за месяц

    Логика:
    1. Считает данные по листу периода
    2. Перезаписывает сводный и подробный листы
    3. Сохраняет запись в историю генерации (report_log)
    """
    period = sheet_names(month, year).main
    try:
        data = compute_report_data(store, month, year, layout)
        write_report_sheet(store, month, year, data)
        write_detailed_sheet(store, month, year, data)
    except Exception as e:
        log_report(period, "error", error_message=str(e))
        raise

    log_report(
        period, "success",
        students_count=len(data.students),
        subjects_count=len(data.subjects),
        total_hours=data.total_hours,
    )
    log_journal_info(
        f"Отчет за {data.month_name} сгенерирован",
        f"Лист {period}: студентов {len(data.students)}, предметов {len(data.subjects)}",
        {"totalHours": data.total_hours}
    )
    return data
