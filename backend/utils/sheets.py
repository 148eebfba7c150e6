"""
Зависимости FastAPI для доступа к таблице
"""
import threading

from journal.config import DEFAULT_LAYOUT, SheetLayout
from journal.sheets.store import CellStore, GoogleSheetsStore

_store = None
_store_lock = threading.Lock()


def get_store() -> CellStore:
    """Один клиент Google Sheets на процесс (создается при первом запросе)"""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = GoogleSheetsStore()
    return _store


def get_layout() -> SheetLayout:
    return DEFAULT_LAYOUT
