"""
АДРЕСАЦИЯ ЯЧЕЕК И ЛИСТОВ
========================

Функции:
- col_to_letter() / letter_to_col() - номер колонки <-> буквы (1 -> "A", 27 -> "AA")
- a1_range() - диапазон вида 'MM.YY'!G3:AA3
- parse_a1_range() - обратный разбор диапазона (имя листа + границы)
- period_key() / sort_periods() - хронологическая сортировка периодов "MM.YY"
- sheet_names() - имена основного листа и листов отчетов для месяца
"""

import re
from typing import List, NamedTuple, Optional, Tuple

from openpyxl.utils import get_column_letter, column_index_from_string
from openpyxl.utils.cell import range_boundaries

from journal.config import PERIOD_SHEET_PATTERN, DETAILED_SHEET_SUFFIX, REPORT_SHEET_SUFFIX


class SheetNames(NamedTuple):
    main: str
    detailed: str
    report: str


def col_to_letter(col: int) -> str:
    """Номер колонки (1-based) в буквенное обозначение: 1 -> "A", 26 -> "Z", 27 -> "AA" """
    if col < 1:
        raise ValueError(f"Номер колонки должен быть положительным: {col}")
    return get_column_letter(col)


def letter_to_col(letters: str) -> int:
    """Буквенное обозначение колонки в номер: "A" -> 1, "AA" -> 27"""
    return column_index_from_string(letters.strip().upper())


def quote_sheet(sheet: str) -> str:
    return "'" + sheet.replace("'", "''") + "'"


def a1_range(sheet: str, start_col: int, start_row: int,
             end_col: Optional[int] = None, end_row: Optional[int] = None) -> str:
    """
    Диапазон ячеек на листе

    Пример: a1_range("06.25", 7, 3, 27, 3) -> "'06.25'!G3:AA3"
    Без end_col/end_row получается одна ячейка: "'06.25'!A1"
    """
    start = f"{col_to_letter(start_col)}{start_row}"
    if end_col is None and end_row is None:
        return f"{quote_sheet(sheet)}!{start}"
    end = f"{col_to_letter(end_col or start_col)}{end_row or start_row}"
    return f"{quote_sheet(sheet)}!{start}:{end}"


def parse_a1_range(spec: str) -> Tuple[str, Optional[Tuple[int, int, int, int]]]:
    """
    Разбор диапазона на имя листа и границы

    Returns:
        (sheet, (start_col, start_row, end_col, end_row)) или (sheet, None),
        если указан только лист (весь лист целиком)
    """
    match = re.match(r"^(?:'((?:[^']|'')*)'|([^'!]+))(?:!(.+))?$", spec.strip())
    if not match:
        raise ValueError(f"Некорректный диапазон: {spec}")
    sheet = match.group(1).replace("''", "'") if match.group(1) is not None else match.group(2)
    cells = match.group(3)
    if not cells:
        return sheet, None
    min_col, min_row, max_col, max_row = range_boundaries(cells.upper())
    return sheet, (min_col, min_row, max_col, max_row)


def is_period_name(name: str) -> bool:
    return re.match(PERIOD_SHEET_PATTERN, name) is not None


def period_key(label: str) -> int:
    """
    Ключ сортировки периода "MM.YY" = год * 100 + месяц

    Лексическая сортировка не подходит: "06.25" > "02.26" как строки,
    хотя февраль 2026 позже июня 2025
    """
    month, year = label.split(".")
    return int(year) * 100 + int(month)


def sort_periods(labels: List[str]) -> List[str]:
    """Сортирует периоды "MM.YY" по хронологии"""
    return sorted(labels, key=period_key)


def latest_period_name(sheet_names_list: List[str]) -> Optional[str]:
    """Последний по времени лист периода или None, если таких листов нет"""
    periods = sort_periods([name for name in sheet_names_list if is_period_name(name)])
    return periods[-1] if periods else None


def period_name(month: int, year: int) -> str:
    """Имя основного листа: месяц 6, год 2025 (или 25) -> "06.25" """
    return f"{month:02d}.{year % 100:02d}"


def sheet_names(month: int, year: int) -> SheetNames:
    """Имена листов периода: основной, подробный отчет и сводный отчет"""
    main = period_name(month, year)
    return SheetNames(
        main=main,
        detailed=f"{main}{DETAILED_SHEET_SUFFIX}",
        report=f"{main}{REPORT_SHEET_SUFFIX}",
    )
