"""
Поиск колонки даты на листе периода

В строке 1, начиная с колонки G, даты записаны как "DD.MM".
Каждая дата занимает pairs_per_date колонок подряд.
Сравнение только точное (после strip), без разбора дат.
"""
from typing import List, Optional

from journal.config import DEFAULT_LAYOUT, SheetLayout
from journal.sheets.addressing import a1_range, letter_to_col
from journal.sheets.store import CellStore


def date_token(day: int, month: int) -> str:
    """5 марта -> "05.03" """
    return f"{day:02d}.{month:02d}"


def locate_date_column(header_cells: List[str], day: int, month: int,
                       layout: SheetLayout = DEFAULT_LAYOUT) -> Optional[int]:
    """
    Первая колонка слота даты

    Args:
        header_cells: ячейки строки заголовка начиная с layout.data_start_col

    Returns:
        Optional[int]: номер колонки (1-based) или None, если даты нет
    """
    target = date_token(day, month)
    for offset, cell in enumerate(header_cells):
        if cell is not None and str(cell).strip() == target:
            return offset + layout.data_start_col
    return None


def find_date_column(store: CellStore, sheet: str, day: int, month: int,
                     layout: SheetLayout = DEFAULT_LAYOUT) -> Optional[int]:
    """Читает строку заголовка периода и ищет в ней дату"""
    header = store.read_range(
        a1_range(sheet, layout.data_start_col, layout.header_row,
                 letter_to_col(layout.last_col), layout.header_row)
    )
    if not header:
        return None
    return locate_date_column(header[0], day, month, layout)

