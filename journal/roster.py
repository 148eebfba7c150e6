"""
СОСТАВ ГРУППЫ И НАСТРОЙКИ ЖУРНАЛА
=================================

Студенты и список предметов берутся из последнего (по времени) листа периода.

Функции:
- latest_period() - последний лист "MM.YY"
- read_students() / update_student_names() - список студентов и переименование
- read_subject_list() / update_subject_list() - список предметов под блоком студентов
- read_journal_config() - все, что нужно клиенту при запуске
"""

from typing import List

from journal.config import (
    DEFAULT_LAYOUT, SheetLayout, DEFAULT_GROUP_NAME, DEFAULT_CURATOR, FALLBACK_SUBJECTS, REPORT_SHEET_SUFFIX,
)
from journal.logger import log_journal_info
from journal.report import PeriodNotFoundError, read_curator
from journal.sheets.addressing import a1_range, is_period_name, latest_period_name, period_key, sort_periods
from journal.sheets.scanner import Student, extract_students, find_subject_list, read_entity_region
from journal.sheets.store import CellStore


def latest_period(store: CellStore) -> str:
    """
    Raises:
        PeriodNotFoundError: в таблице нет ни одного листа "MM.YY"
    """
    name = latest_period_name(store.list_sheet_names())
    if name is None:
        raise PeriodNotFoundError("Листы не найдены")
    return name


def read_students(store: CellStore, sheet: str = None, layout: SheetLayout = DEFAULT_LAYOUT) -> List[Student]:
    """Студенты периода (по умолчанию - последнего)"""
    sheet = sheet or latest_period(store)
    rows = read_entity_region(store, sheet, layout)
    return extract_students(rows, layout.students_start_row).students


def update_student_names(store: CellStore, students: List[dict],
                         layout: SheetLayout = DEFAULT_LAYOUT) -> str:
    """
    Переписывает блок студентов последнего периода

    Args:
        students: [{"id": 1, "name": "..."}, ...] в порядке строк

    Returns:
        str: имя измененного листа
    """
    if not students:
        raise ValueError("Список студентов пуст")
    sheet = latest_period(store)
    start_row = layout.students_start_row
    end_row = start_row + len(students) - 1
    rows = [[s["id"], str(s["name"]).strip()] for s in students]
    store.write_range(a1_range(sheet, 1, start_row, 2, end_row), rows)
    log_journal_info("Обновлен список студентов", f"Лист {sheet}", {"count": len(students)})
    return sheet


def read_subject_list(store: CellStore, sheet: str = None, layout: SheetLayout = DEFAULT_LAYOUT) -> List[str]:
    """Список предметов под блоком студентов (может быть пустым)"""
    sheet = sheet or latest_period(store)
    rows = read_entity_region(store, sheet, layout)
    return find_subject_list(rows, layout.students_start_row).subjects


def update_subject_list(store: CellStore, subjects: List[str],
                        layout: SheetLayout = DEFAULT_LAYOUT) -> str:
    """
    Заменяет список предметов последнего периода

    Логика:
    1. Находит текущий список под блоком студентов
    2. Очищает его строки
    3. Записывает новый список с той же строки. Если списка не было,
       он ставится через одну пустую строку после студентов.
       Если студентов нет - ValueError

    Returns:
        str: имя измененного листа
    """
    if not subjects:
        raise ValueError("Список предметов пуст")
    sheet = latest_period(store)
    rows = read_entity_region(store, sheet, layout)
    current = find_subject_list(rows, layout.students_start_row)

    if current.subjects:
        start_row = current.start_row
        old_end_row = start_row + len(current.subjects) - 1
        store.clear_range(a1_range(sheet, 1, start_row, 2, old_end_row))
    else:
        block = extract_students(rows, layout.students_start_row)
        if not block.has_rows:
            raise ValueError(f"На листе {sheet} нет студентов, список предметов некуда поставить")
        start_row = block.end_row + 2

    new_rows = [[index, str(subject).strip()] for index, subject in enumerate(subjects, 1)]
    store.write_range(a1_range(sheet, 1, start_row, 2, start_row + len(subjects) - 1), new_rows)
    log_journal_info("Обновлен список предметов", f"Лист {sheet}, строка {start_row}", {"subjects": subjects})
    return sheet


def read_journal_config(store: CellStore, layout: SheetLayout = DEFAULT_LAYOUT) -> dict:
    """
    Настройки журнала для клиента

    Returns:
        dict: {
            "groupName": "СИС-12",
            "students": [{"id": 1, "name": "..."}, ...],
            "subjects": [...],              # список из листа или запасной
            "curator": "...",               # из заголовка последнего отчета
            "availableMonths": ["09.25", "10.25", ...]  # по хронологии
        }
    """
    all_sheets = store.list_sheet_names()
    periods = sort_periods([name for name in all_sheets if is_period_name(name)])
    if not periods:
        raise PeriodNotFoundError("Листы не найдены")
    sheet = periods[-1]

    values = store.read_ranges([
        a1_range(sheet, 1, 1),
        a1_range(sheet, 1, layout.students_start_row, 2, layout.students_max_row),
    ])
    header = values[0]
    rows = values[1]
    group_name = str(header[0][0]).strip() if header and header[0] else ""

    students = extract_students(rows, layout.students_start_row).students
    subjects = find_subject_list(rows, layout.students_start_row).subjects

    report_sheets = [
        name for name in all_sheets
        if name.endswith(REPORT_SHEET_SUFFIX) and is_period_name(name[:-len(REPORT_SHEET_SUFFIX)])
    ]
    curator = None
    if report_sheets:
        latest_report = max(report_sheets, key=lambda name: period_key(name[:-len(REPORT_SHEET_SUFFIX)]))
        curator = read_curator(store, latest_report, all_sheets)

    return {
        "groupName": group_name or DEFAULT_GROUP_NAME,
        "students": [s.to_dict() for s in students],
        "subjects": subjects or list(FALLBACK_SUBJECTS),
        "curator": curator or DEFAULT_CURATOR,
        "availableMonths": periods,
    }
