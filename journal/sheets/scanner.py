"""
ПОИСК БЛОКОВ В СЕТКЕ
====================

Основной лист не имеет схемы - структура держится на соглашениях.
Колонки A:B начиная со строки 4 содержат два нумерованных блока:

    4  | 1 | Бреславский Леонид     <- блок студентов
    5  | 2 | Бугай Дмитрий
    ...
    28 |   |                        <- пустой промежуток
    29 | 1 | Математика             <- список предметов
    30 | 2 | Физика

Строка блока - это номер (целое > 0) + непустое название.
Блок заканчивается на первой строке, не подходящей под это правило.

Функции:
- is_entity_row() - подходит ли строка под правило блока
- find_last_entity_row() - последняя строка блока студентов
- find_subject_list() - начало и содержимое списка предметов
- extract_students() - студенты + номера строк
- read_entity_region() - чтение области A:B из таблицы
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from journal.config import DEFAULT_LAYOUT, SheetLayout
from journal.sheets.addressing import a1_range
from journal.sheets.store import CellStore


@dataclass
class Student:
    id: int
    name: str
    row: int  # номер строки на листе (1-based)

    def to_dict(self):
        return {"id": self.id, "name": self.name}


@dataclass
class SubjectList:
    start_row: int
    subjects: List[str] = field(default_factory=list)


@dataclass
class StudentBlock:
    """Студенты периода и границы их блока"""
    students: List[Student]
    start_row: int
    end_row: int

    @property
    def has_rows(self) -> bool:
        return self.end_row >= self.start_row

    def ids_by_row(self) -> List[Optional[int]]:
        """ID студента для каждой строки блока (None, если строка не студент)"""
        ids: List[Optional[int]] = [None] * max(self.end_row - self.start_row + 1, 0)
        for student in self.students:
            ids[student.row - self.start_row] = student.id
        return ids


def _cell(row: List[str], index: int) -> str:
    if index < len(row) and row[index] is not None:
        return str(row[index]).strip()
    return ""


def parse_entity_id(value) -> Optional[int]:
    """Номер строки блока: целое число > 0, иначе None"""
    text = str(value).strip() if value is not None else ""
    if not re.match(r"^\d+$", text):
        return None
    number = int(text)
    return number if number > 0 else None


def is_entity_row(row: List[str]) -> bool:
    """Строка блока: в первой колонке номер, во второй - непустое название"""
    return parse_entity_id(_cell(row, 0)) is not None and _cell(row, 1) != ""


def _skip_entity_block(rows: List[List[str]]) -> int:
    """
    Индекс первой строки после первого блока

    Строки до начала блока пропускаются, но внутри блока первая же
    неподходящая строка его завершает
    """
    found = False
    for index, row in enumerate(rows):
        if is_entity_row(row):
            found = True
        elif found:
            return index
    return len(rows)


def find_last_entity_row(rows: List[List[str]], start_row: int = DEFAULT_LAYOUT.students_start_row) -> int:
    """
    Последняя строка блока студентов (1-based номер строки листа)

    Args:
        rows: значения A:B начиная со start_row
        start_row: номер строки листа, с которой начинаются rows

    Returns:
        int: номер последней строки блока; start_row - 1, если студентов нет
    """
    last_index = -1
    for index, row in enumerate(rows):
        if is_entity_row(row):
            last_index = index
        elif last_index >= 0:
            break
    return start_row + last_index


def find_subject_list(rows: List[List[str]], start_row: int = DEFAULT_LAYOUT.students_start_row) -> SubjectList:
    """
    Список предметов под блоком студентов

    Логика:
    1. Пропускает блок студентов (по тому же правилу, что и find_last_entity_row)
    2. Пропускает пустой промежуток до первой подходящей строки
    3. Забирает подряд идущие строки как предметы

    Returns:
        SubjectList: номер первой строки списка и названия предметов по порядку.
        Если списка нет, start_row - строка, на которой закончился поиск
    """
    index = _skip_entity_block(rows)
    while index < len(rows) and not is_entity_row(rows[index]):
        index += 1

    result = SubjectList(start_row=start_row + index)
    while index < len(rows) and is_entity_row(rows[index]):
        result.subjects.append(_cell(rows[index], 1))
        index += 1
    return result


def extract_students(rows: List[List[str]], start_row: int = DEFAULT_LAYOUT.students_start_row) -> StudentBlock:
    """Студенты из области A:B (только строки в пределах блока)"""
    end_row = find_last_entity_row(rows, start_row)
    students = []
    for index, row in enumerate(rows[:end_row - start_row + 1]):
        if is_entity_row(row):
            students.append(Student(
                id=parse_entity_id(_cell(row, 0)),
                name=_cell(row, 1),
                row=start_row + index,
            ))
    return StudentBlock(students=students, start_row=start_row, end_row=end_row)


def read_entity_region(store: CellStore, sheet: str, layout: SheetLayout = DEFAULT_LAYOUT) -> List[List[str]]:
    """Значения A:B от начала блока студентов до предела поиска"""
    return store.read_range(
        a1_range(sheet, 1, layout.students_start_row, 2, layout.students_max_row)
    )


def read_student_block(store: CellStore, sheet: str, layout: SheetLayout = DEFAULT_LAYOUT) -> StudentBlock:
    """Фактический блок студентов периода (их может быть меньше максимума)"""
    rows = read_entity_region(store, sheet, layout)
    return extract_students(rows, layout.students_start_row)
