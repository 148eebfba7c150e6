"""
АГРЕГАЦИЯ ОТЧЕТА ЗА МЕСЯЦ
=========================

Один проход по всему листу периода "MM.YY":
1. Собирает упорядоченный список предметов из строки 3 (без подписей итоговых колонок)
2. Для каждой колонки с предметом добавляет hours_per_pair к часам предмета.
   Часы считаются по вхождениям колонок: каждая пара предмета добавляет часы заново
3. Для каждого студента в этой колонке: "Н" - в пропуски, "У" - в пропуски и в уважительные
4. По студенту: всего, из них уважительных, % пропусков, % неуважительных
   от общего числа часов периода (0 часов -> "0%")

Результат (ReportData) нигде не хранится - он пересчитывается на каждый запрос
и записывается только в листы отчетов (см. report_writer.py).
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from journal.config import (
    DEFAULT_LAYOUT, SheetLayout, NON_SUBJECT_LABELS, MONTH_NAMES,
    DEFAULT_GROUP_NAME, DEFAULT_CURATOR, STATUS_ABSENT, STATUS_EXCUSED,
)
from journal.attendance import normalize_status
from journal.sheets.addressing import a1_range, letter_to_col, sheet_names
from journal.sheets.scanner import Student, read_student_block
from journal.sheets.store import CellStore


class PeriodNotFoundError(LookupError):
    """Нет листа периода"""


@dataclass
class SubjectAbsence:
    hours: int = 0     # всего пропущено часов
    excused: int = 0   # из них по уважительной

    @property
    def unexcused(self) -> int:
        return self.hours - self.excused

    def to_dict(self):
        return {"hours": self.hours, "unexcused": self.unexcused, "excused": self.excused}


@dataclass
class ReportRow:
    student_id: int
    student_name: str
    by_subject: Dict[str, int]
    total: int
    excused: int
    total_percent: str
    unexcused_percent: str

    def to_dict(self):
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "bySubject": dict(self.by_subject),
            "total": self.total,
            "excused": self.excused,
            "totalPercent": self.total_percent,
            "unexcusedPercent": self.unexcused_percent,
        }


@dataclass
class DetailedRow:
    student_id: int
    student_name: str
    by_subject: Dict[str, SubjectAbsence]


@dataclass
class PeriodAggregate:
    subjects: List[str]
    subject_hours: Dict[str, int]
    absences: Dict[int, Dict[str, SubjectAbsence]]  # ID студента -> предмет -> пропуски

    @property
    def total_hours(self) -> int:
        return sum(self.subject_hours.values())


@dataclass
class ReportData:
    students: List[Student]
    subjects: List[str]
    subject_hours: Dict[str, int]
    total_hours: int
    report_rows: List[ReportRow]
    detailed_rows: List[DetailedRow]
    group_name: str = DEFAULT_GROUP_NAME
    curator: str = DEFAULT_CURATOR
    month_name: str = ""
    academic_year: str = ""

    def to_dict(self):
        """Сводный отчет в формате ответа API"""
        return {
            "month": self.month_name,
            "year": self.academic_year,
            "group": self.group_name,
            "curator": self.curator,
            "subjects": list(self.subjects),
            "subjectHours": dict(self.subject_hours),
            "totalHours": self.total_hours,
            "rows": [row.to_dict() for row in self.report_rows],
        }


def percent(part: int, whole: int) -> str:
    """Процент с округлением половины вверх: percent(1, 8) -> "13%"; whole = 0 -> "0%" """
    if whole <= 0:
        return "0%"
    return f"{math.floor(part / whole * 100 + 0.5)}%"


def collect_subjects(subject_cells: List[str], layout: SheetLayout = DEFAULT_LAYOUT) -> List[str]:
    """Уникальные предметы строки 3 в порядке появления (с колонки данных)"""
    subjects = []
    for value in subject_cells[layout.data_start_col - 1:]:
        subject = str(value).strip() if value is not None else ""
        if subject and subject not in NON_SUBJECT_LABELS and subject not in subjects:
            subjects.append(subject)
    return subjects


def aggregate_period(subject_cells: List[str], data_rows: List[List[str]], students: List[Student],
                     start_row: int, layout: SheetLayout = DEFAULT_LAYOUT) -> PeriodAggregate:
    """
    Подсчет часов и пропусков за период

    Args:
        subject_cells: строка 3 целиком (с колонки A)
        data_rows: строки студентов целиком (с колонки A), первая - start_row
        students: студенты блока (с номерами строк)
        start_row: номер строки листа, с которой начинаются data_rows
    """
    subjects = collect_subjects(subject_cells, layout)
    subject_hours = {subject: 0 for subject in subjects}
    absences = {st.id: {subject: SubjectAbsence() for subject in subjects} for st in students}

    for col in range(layout.data_start_col - 1, len(subject_cells)):
        value = subject_cells[col]
        subject = str(value).strip() if value is not None else ""
        if subject not in subject_hours:
            continue
        subject_hours[subject] += layout.hours_per_pair

        for st in students:
            row_index = st.row - start_row
            row = data_rows[row_index] if 0 <= row_index < len(data_rows) else []
            status = normalize_status(row[col] if col < len(row) else "")
            if status == STATUS_ABSENT:
                absences[st.id][subject].hours += layout.hours_per_pair
            elif status == STATUS_EXCUSED:
                absences[st.id][subject].hours += layout.hours_per_pair
                absences[st.id][subject].excused += layout.hours_per_pair

    return PeriodAggregate(subjects=subjects, subject_hours=subject_hours, absences=absences)


def build_report_rows(students: List[Student], aggregate: PeriodAggregate) -> List[ReportRow]:
    """Строки сводного отчета: по одному числу на предмет + итоги и проценты"""
    total_hours = aggregate.total_hours
    rows = []
    for st in students:
        by_subject = {}
        total = 0
        excused = 0
        for subject in aggregate.subjects:
            absence = aggregate.absences[st.id][subject]
            by_subject[subject] = absence.hours
            total += absence.hours
            excused += absence.excused
        rows.append(ReportRow(
            student_id=st.id,
            student_name=st.name,
            by_subject=by_subject,
            total=total,
            excused=excused,
            total_percent=percent(total, total_hours),
            unexcused_percent=percent(total - excused, total_hours),
        ))
    return rows


def build_detailed_rows(students: List[Student], aggregate: PeriodAggregate) -> List[DetailedRow]:
    """Строки подробного отчета: по предмету тройка (часы, неуважит., уважит.)"""
    return [
        DetailedRow(
            student_id=st.id,
            student_name=st.name,
            by_subject={subject: aggregate.absences[st.id][subject] for subject in aggregate.subjects},
        )
        for st in students
    ]


def academic_year(month: int, year: int) -> str:
    """Учебный год: сентябрь 2025 -> "2025-2026", март 2026 -> "2025-2026" """
    if month >= 9:
        return f"{year}-{year + 1}"
    return f"{year - 1}-{year}"


def parse_curator(title: str) -> Optional[str]:
    """Куратор из заголовка отчета: "...\\nКуратор - Иванов И.И." -> "Иванов И.И." """
    match = re.search(r"Куратор\s*[-–—]\s*(.+)", title or "")
    return match.group(1).strip() if match else None


def read_curator(store: CellStore, report_sheet: str, existing_sheets: List[str] = None) -> Optional[str]:
    """Куратор из A1 листа отчета; листа может еще не быть"""
    if existing_sheets is None:
        existing_sheets = store.list_sheet_names()
    if report_sheet not in existing_sheets:
        return None
    values = store.read_range(a1_range(report_sheet, 1, 1))
    title = values[0][0] if values and values[0] else ""
    return parse_curator(title)


def compute_report_data(store: CellStore, month: int, year: int,
                        layout: SheetLayout = DEFAULT_LAYOUT) -> ReportData:
    """
    Данные отчета за месяц

    Args:
        month: месяц 1-12
        year: полный год (2025)

    Raises:
        PeriodNotFoundError: нет листа "MM.YY"
    """
    names = sheet_names(month, year)
    existing = store.list_sheet_names()
    if names.main not in existing:
        raise PeriodNotFoundError(f"Лист {names.main} не найден")

    block = read_student_block(store, names.main, layout)
    last_col = letter_to_col(layout.last_col)
    ranges = [
        a1_range(names.main, 1, layout.header_row, last_col, layout.header_row),
        a1_range(names.main, 1, layout.subject_row, last_col, layout.subject_row),
    ]
    if block.has_rows:
        ranges.append(a1_range(names.main, 1, block.start_row, last_col, block.end_row))
    values = store.read_ranges(ranges)

    header = values[0][0] if values[0] else []
    subject_cells = values[1][0] if values[1] else []
    data_rows = values[2] if len(values) > 2 else []

    group_name = str(header[0]).strip() if header and header[0] else ""
    aggregate = aggregate_period(subject_cells, data_rows, block.students, block.start_row, layout)

    return ReportData(
        students=block.students,
        subjects=aggregate.subjects,
        subject_hours=aggregate.subject_hours,
        total_hours=aggregate.total_hours,
        report_rows=build_report_rows(block.students, aggregate),
        detailed_rows=build_detailed_rows(block.students, aggregate),
        group_name=group_name or DEFAULT_GROUP_NAME,
        curator=read_curator(store, names.report, existing) or DEFAULT_CURATOR,
        month_name=MONTH_NAMES[month],
        academic_year=academic_year(month, year),
    )
