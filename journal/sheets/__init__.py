"""
Работа с сеткой таблицы: адресация, поиск блоков и дат, хранилище ячеек
"""
from .addressing import col_to_letter, letter_to_col, a1_range, sort_periods, sheet_names
from .store import CellStore, GoogleSheetsStore, GridRegion, StoreError

__all__ = [
    'col_to_letter', 'letter_to_col', 'a1_range', 'sort_periods', 'sheet_names',
    'CellStore', 'GoogleSheetsStore', 'GridRegion', 'StoreError',
]
