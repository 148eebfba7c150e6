"""
ПОСЕЩАЕМОСТЬ ЗА ДЕНЬ
====================

Чтение и запись отметок одной даты на листе периода "MM.YY".

Слот даты - pairs_per_date колонок (по одной на пару):
- строка 3: предмет пары (пусто - пары нет)
- строки студентов: "Н" (пропуск), "У" (по уважительной), пусто - присутствовал

Логика чтения:
1. Находит колонку даты; если ее нет - пустой день (не ошибка)
2. Определяет фактический блок студентов
3. Одним пакетным запросом читает строку предметов и отметки слота
4. Отметки нормализуются (strip + upper); все, кроме "Н"/"У", считается присутствием

Логика записи:
1. Проверяет пары: номер 1..pairs_per_date, отметки только "Н"/"У" или пусто,
   иначе ValueError (в таблицу ничего не пишется)
2. Находит колонку даты; если ее нет - DateSlotNotFoundError
3. Перезаписывает слот ЦЕЛИКОМ: пары, которых нет в запросе, очищаются.
   Клиент всегда должен присылать полный набор пар дня
4. Пересчитывает итоги D:F по всему периоду (полный пересчет, не инкремент)

Одновременная запись одного слота двумя пользователями не сериализуется:
в таблице останется та запись, которая пришла последней.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from journal.config import DEFAULT_LAYOUT, SheetLayout, STATUS_ABSENT, STATUS_EXCUSED, ATTENDANCE_STATUSES
from journal.logger import log_journal_info
from journal.sheets.addressing import a1_range, col_to_letter, letter_to_col, period_name
from journal.sheets.dates import find_date_column
from journal.sheets.scanner import StudentBlock, read_student_block
from journal.sheets.store import CellStore


class DateSlotNotFoundError(LookupError):
    """Для даты нет колонки на листе периода (период не подготовлен)"""


@dataclass
class PairAttendance:
    pair_number: int
    subject: str = ""
    attendance: Dict[int, str] = field(default_factory=dict)  # ID студента -> "Н" / "У"

    def to_dict(self):
        return {
            "pairNumber": self.pair_number,
            "subject": self.subject,
            "attendance": dict(self.attendance),
        }


@dataclass
class DayAttendance:
    date: str  # "2025-01-13"
    pairs: List[PairAttendance] = field(default_factory=list)
    pair_count: int = 0

    def to_dict(self):
        return {
            "date": self.date,
            "pairs": [pair.to_dict() for pair in self.pairs],
            "pairCount": self.pair_count,
        }


def normalize_status(value) -> str:
    """Отметка ячейки: "Н", "У" или "" (регистр и пробелы не важны)"""
    text = str(value).strip().upper() if value is not None else ""
    return text if text in ATTENDANCE_STATUSES else ""


def _cell(rows: List[List[str]], row: int, col: int) -> str:
    if row < len(rows) and col < len(rows[row]) and rows[row][col] is not None:
        return str(rows[row][col])
    return ""


def decode_pairs(subject_cells: List[str], data_rows: List[List[str]],
                 ids_by_row: List[Optional[int]],
                 layout: SheetLayout = DEFAULT_LAYOUT) -> Tuple[List[PairAttendance], int]:
    """
    Разбор слота даты

    Args:
        subject_cells: строка предметов, только колонки слота
        data_rows: отметки студентов, только колонки слота
        ids_by_row: ID студента для каждой строки data_rows

    Returns:
        (pairs, pair_count): все пары слота и номер последней пары с предметом
    """
    pairs = []
    pair_count = 0
    for p in range(layout.pairs_per_date):
        subject = _cell([subject_cells], 0, p).strip()
        if subject:
            pair_count = p + 1

        attendance = {}
        for row_index, student_id in enumerate(ids_by_row):
            if not student_id:
                continue
            status = normalize_status(_cell(data_rows, row_index, p))
            if status:
                attendance[student_id] = status

        pairs.append(PairAttendance(pair_number=p + 1, subject=subject, attendance=attendance))
    return pairs, pair_count


def validate_pairs(pairs: List[PairAttendance], layout: SheetLayout = DEFAULT_LAYOUT):
    """
    Проверка пар перед записью

    Raises:
        ValueError: номер пары вне 1..pairs_per_date или отметка не "Н"/"У"
            (пустая отметка допустима - студент присутствовал)
    """
    for pair in pairs:
        if not 1 <= pair.pair_number <= layout.pairs_per_date:
            raise ValueError(
                f"Номер пары {pair.pair_number} вне диапазона 1..{layout.pairs_per_date}"
            )
        for student_id, value in pair.attendance.items():
            text = str(value).strip() if value is not None else ""
            if text and not normalize_status(text):
                raise ValueError(
                    f"Недопустимая отметка '{text}' у студента {student_id} (пара {pair.pair_number}): "
                    f"ожидается '{STATUS_ABSENT}' или '{STATUS_EXCUSED}'"
                )


def encode_slot(pairs: List[PairAttendance], ids_by_row: List[Optional[int]],
                layout: SheetLayout = DEFAULT_LAYOUT) -> Tuple[List[str], List[List[str]]]:
    """
    Значения для перезаписи слота даты

    Returns:
        (subject_row, grid): строка предметов и полная сетка отметок.
        Все, чего нет в pairs, записывается пустой строкой
    """
    by_number: Dict[int, PairAttendance] = {}
    for pair in pairs:
        by_number.setdefault(pair.pair_number, pair)

    subject_row = []
    for p in range(1, layout.pairs_per_date + 1):
        pair = by_number.get(p)
        subject_row.append(pair.subject.strip() if pair and pair.subject else "")

    grid = []
    for student_id in ids_by_row:
        row = []
        for p in range(1, layout.pairs_per_date + 1):
            pair = by_number.get(p)
            status = ""
            if student_id and pair:
                status = normalize_status(pair.attendance.get(student_id))
            row.append(status)
        grid.append(row)
    return subject_row, grid


def summarize_row(row: List[str], layout: SheetLayout = DEFAULT_LAYOUT) -> List[int]:
    """
    Итоги студента за весь период: [по уважительной, пропусков, всего] в часах
    """
    excused = 0
    absent = 0
    for value in row[layout.data_start_col - 1:]:
        status = normalize_status(value)
        if status == STATUS_ABSENT:
            absent += 1
        elif status == STATUS_EXCUSED:
            excused += 1
    return [
        excused * layout.hours_per_pair,
        absent * layout.hours_per_pair,
        (absent + excused) * layout.hours_per_pair,
    ]


def _slot_range(sheet: str, start_col: int, start_row: int, end_row: int, layout: SheetLayout) -> str:
    return a1_range(sheet, start_col, start_row, start_col + layout.pairs_per_date - 1, end_row)


def _period_exists(store: CellStore, sheet: str) -> bool:
    return sheet in store.list_sheet_names()


def read_day(store: CellStore, day: date, layout: SheetLayout = DEFAULT_LAYOUT) -> DayAttendance:
    """
    Посещаемость за дату

    Если листа периода или колонки даты нет - пустой результат (pairs=[], pair_count=0)
    """
    result = DayAttendance(date=day.isoformat())
    sheet = period_name(day.month, day.year)
    if not _period_exists(store, sheet):
        return result

    start_col = find_date_column(store, sheet, day.day, day.month, layout)
    if start_col is None:
        return result

    block = read_student_block(store, sheet, layout)
    ranges = [_slot_range(sheet, start_col, layout.subject_row, layout.subject_row, layout)]
    if block.has_rows:
        ranges.append(_slot_range(sheet, start_col, block.start_row, block.end_row, layout))
    values = store.read_ranges(ranges)

    subject_cells = values[0][0] if values[0] else []
    data_rows = values[1] if len(values) > 1 else []
    result.pairs, result.pair_count = decode_pairs(subject_cells, data_rows, block.ids_by_row(), layout)
    return result


def write_day(store: CellStore, day: date, pairs: List[PairAttendance],
              layout: SheetLayout = DEFAULT_LAYOUT) -> str:
    """
    Сохраняет посещаемость за дату (полная замена слота) и пересчитывает итоги

    Raises:
        ValueError: некорректный номер пары или отметка (ничего не записывается)
        DateSlotNotFoundError: для даты нет листа периода или колонки

    Returns:
        str: сообщение для пользователя
    """
    validate_pairs(pairs, layout)
    sheet = period_name(day.month, day.year)
    start_col = None
    if _period_exists(store, sheet):
        start_col = find_date_column(store, sheet, day.day, day.month, layout)
    if start_col is None:
        raise DateSlotNotFoundError(f"Дата не найдена в листе {sheet}")

    block = read_student_block(store, sheet, layout)
    subject_row, grid = encode_slot(pairs, block.ids_by_row(), layout)

    data = [(_slot_range(sheet, start_col, layout.subject_row, layout.subject_row, layout), [subject_row])]
    if block.has_rows:
        data.append((_slot_range(sheet, start_col, block.start_row, block.end_row, layout), grid))
    store.write_ranges(data)

    recompute_summary(store, sheet, block, layout)

    log_journal_info(
        "Сохранена посещаемость",
        f"Лист {sheet}, колонка {col_to_letter(start_col)}",
        {"date": day.isoformat(), "pairs": len([p for p in pairs if p.subject])}
    )
    return f"Сохранено: {day.day}.{day.month:02d}"


def recompute_summary(store: CellStore, sheet: str, block: StudentBlock,
                      layout: SheetLayout = DEFAULT_LAYOUT):
    """
    Пересчет итоговых колонок D:F по всем датам периода

    Итог - чистая функция уже записанных отметок, поэтому при сбое
    его можно безопасно пересчитать повторно
    """
    if not block.has_rows:
        return

    all_data = store.read_range(
        a1_range(sheet, 1, block.start_row, letter_to_col(layout.last_col), block.end_row)
    )
    summary = []
    for row_index, student_id in enumerate(block.ids_by_row()):
        if not student_id:
            summary.append(["", "", ""])
            continue
        row = all_data[row_index] if row_index < len(all_data) else []
        summary.append(summarize_row(row, layout))

    store.write_range(
        a1_range(sheet, layout.summary_start_col, block.start_row,
                 layout.summary_start_col + 2, block.end_row),
        summary
    )


def find_unrecognized_marks(store: CellStore, month: int, year: int,
                            layout: SheetLayout = DEFAULT_LAYOUT) -> List[dict]:
    """
    Проверка отметок периода (необязательная)

    Чтение посещаемости считает любое содержимое, кроме "Н"/"У", присутствием.
    Эта функция находит такие ячейки (опечатки, латинская "H" и т.п.),
    не меняя поведения чтения.

    Returns:
        List[dict]: [{"studentId", "studentName", "cell", "value"}, ...]
    """
    sheet = period_name(month, year)
    if not _period_exists(store, sheet):
        return []

    block = read_student_block(store, sheet, layout)
    if not block.has_rows:
        return []

    data = store.read_range(
        a1_range(sheet, layout.data_start_col, block.start_row,
                 letter_to_col(layout.last_col), block.end_row)
    )
    problems = []
    for student in block.students:
        row_index = student.row - block.start_row
        row = data[row_index] if row_index < len(data) else []
        for offset, value in enumerate(row):
            text = str(value).strip() if value is not None else ""
            if text and not normalize_status(text):
                problems.append({
                    "studentId": student.id,
                    "studentName": student.name,
                    "cell": f"{col_to_letter(layout.data_start_col + offset)}{student.row}",
                    "value": text,
                })
    return problems
