"""
ХРАНИЛИЩЕ ЯЧЕЕК (GOOGLE SHEETS)
===============================

Таблица Google Sheets используется как база данных. Ядро журнала работает
только через интерфейс CellStore: чтение/запись прямоугольных диапазонов,
список листов и примитивы оформления (объединение ячеек, границы).

Логика:
1. Чтение - отображаемые значения (FORMATTED_VALUE), всегда строки.
   Пустые хвосты строк и пустые строки в конце диапазона API не возвращает
2. Запись - USER_ENTERED: числа в строках сохраняются как числа
3. Ошибки сети и API превращаются в StoreError, повторов нет

Классы:
- CellStore - абстрактный интерфейс
- GoogleSheetsStore - реализация на gspread + сервисный аккаунт
- GridRegion - прямоугольник для оформления (0-based, конец не включается)
"""

import json
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import gspread
import requests
from gspread.exceptions import APIError, SpreadsheetNotFound
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from journal import config

Grid = List[List[str]]

BORDER_SOLID = "SOLID"
BORDER_NONE = "NONE"


class StoreError(Exception):
    """Ошибка обращения к таблице (сеть, авторизация, API)"""


@dataclass(frozen=True)
class GridRegion:
    """Прямоугольник листа в индексах Sheets API: 0-based, end не включается"""
    start_row: int
    end_row: int
    start_col: int
    end_col: int

    def to_grid_range(self, sheet_id: int) -> Dict[str, int]:
        return {
            "sheetId": sheet_id,
            "startRowIndex": self.start_row,
            "endRowIndex": self.end_row,
            "startColumnIndex": self.start_col,
            "endColumnIndex": self.end_col,
        }


class CellStore(ABC):
    """Интерфейс хранилища ячеек, с которым работает ядро журнала"""

    @abstractmethod
    def read_range(self, range_spec: str) -> Grid:
        """Значения диапазона как строки"""

    def read_ranges(self, range_specs: Sequence[str]) -> List[Grid]:
        """Несколько непересекающихся диапазонов за один запрос"""
        return [self.read_range(spec) for spec in range_specs]

    @abstractmethod
    def write_range(self, range_spec: str, values: List[List[Any]]):
        """Перезаписывает диапазон значениями"""

    def write_ranges(self, data: Sequence[tuple]):
        """Запись нескольких диапазонов: [(range_spec, values), ...]"""
        for range_spec, values in data:
            self.write_range(range_spec, values)

    @abstractmethod
    def clear_range(self, range_spec: str):
        """Очищает значения диапазона (оформление не трогает)"""

    @abstractmethod
    def list_sheet_names(self) -> List[str]:
        """Имена листов в порядке вкладок"""

    @abstractmethod
    def ensure_sheet(self, name: str, min_rows: int = 0, min_cols: int = 0):
        """Создает лист, если его нет, и расширяет сетку до нужного размера"""

    @abstractmethod
    def get_sheet_id(self, name: str) -> int:
        """Числовой ID листа (нужен для оформления)"""

    @abstractmethod
    def merge_cells(self, sheet_id: int, regions: Sequence[GridRegion]):
        """Объединяет каждый из прямоугольников"""

    @abstractmethod
    def unmerge_cells(self, sheet_id: int, region: Optional[GridRegion] = None):
        """Снимает объединения в прямоугольнике (None - весь лист)"""

    @abstractmethod
    def set_borders(self, sheet_id: int, region: Optional[GridRegion], style: str = BORDER_SOLID):
        """Тонкие границы вокруг и внутри прямоугольника; BORDER_NONE их снимает"""

    @abstractmethod
    def format_header(self, sheet_id: int, region: GridRegion, wrap: bool = False):
        """Выравнивание заголовка по центру (и перенос текста)"""


def load_service_account_info() -> Dict[str, str]:
    """
    Данные сервисного аккаунта из переменных окружения

    Приоритет:
    1. GOOGLE_SERVICE_ACCOUNT_JSON - полный JSON ключа
    2. GOOGLE_SERVICE_ACCOUNT_EMAIL + GOOGLE_PRIVATE_KEY
    """
    if config.GOOGLE_SERVICE_ACCOUNT_JSON:
        try:
            return json.loads(config.GOOGLE_SERVICE_ACCOUNT_JSON)
        except json.JSONDecodeError as e:
            raise StoreError("GOOGLE_SERVICE_ACCOUNT_JSON содержит некорректный JSON") from e

    if not config.GOOGLE_SERVICE_ACCOUNT_EMAIL or not config.GOOGLE_PRIVATE_KEY:
        raise StoreError(
            "Google Sheets не настроен: добавьте GOOGLE_SERVICE_ACCOUNT_EMAIL "
            "и GOOGLE_PRIVATE_KEY в переменные окружения"
        )
    return {
        "type": "service_account",
        "client_email": config.GOOGLE_SERVICE_ACCOUNT_EMAIL,
        "private_key": config.GOOGLE_PRIVATE_KEY,
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@contextmanager
def _sheets_errors(action: str):
    """Переводит ошибки gspread/requests в StoreError с понятным сообщением"""
    try:
        yield
    except StoreError:
        raise
    except SpreadsheetNotFound as e:
        raise StoreError("Таблица не найдена или нет доступа (проверьте GOOGLE_SPREADSHEET_ID)") from e
    except APIError as e:
        raise StoreError(f"Ошибка Google Sheets ({action}): {e}") from e
    except GoogleAuthError as e:
        # RefreshError/TransportError: токен запрашивается только при первом вызове API
        raise StoreError(f"Ошибка авторизации Google Sheets ({action}): {e}") from e
    except requests.exceptions.RequestException as e:
        raise StoreError(f"Нет связи с Google Sheets ({action}): {e}") from e


class GoogleSheetsStore(CellStore):
    """Хранилище поверх Google Sheets API (gspread)"""

    def __init__(self, spreadsheet_id: str = None, credentials_info: Dict[str, str] = None):
        self.spreadsheet_id = spreadsheet_id or config.GOOGLE_SPREADSHEET_ID
        self._credentials_info = credentials_info
        self._spreadsheet = None
        self._lock = threading.Lock()

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        """Клиент создается лениво при первом обращении и переиспользуется"""
        if self._spreadsheet is not None:
            return self._spreadsheet
        # Синхронные роуты выполняются в пуле потоков FastAPI
        with self._lock:
            if self._spreadsheet is None:
                self._spreadsheet = self._open()
        return self._spreadsheet

    def _open(self) -> gspread.Spreadsheet:
        if not self.spreadsheet_id:
            raise StoreError("Не указан GOOGLE_SPREADSHEET_ID")
        info = self._credentials_info or load_service_account_info()
        with _sheets_errors("авторизация"):
            try:
                creds = Credentials.from_service_account_info(info, scopes=config.GOOGLE_SCOPES)
            except ValueError as e:
                raise StoreError(f"Некорректный ключ сервисного аккаунта: {e}") from e
            client = gspread.authorize(creds)
            return client.open_by_key(self.spreadsheet_id)

    def read_range(self, range_spec: str) -> Grid:
        with _sheets_errors(f"чтение {range_spec}"):
            result = self.spreadsheet.values_get(
                range_spec, params={"valueRenderOption": "FORMATTED_VALUE"}
            )
        return result.get("values", [])

    def read_ranges(self, range_specs: Sequence[str]) -> List[Grid]:
        with _sheets_errors("пакетное чтение"):
            result = self.spreadsheet.values_batch_get(
                list(range_specs), params={"valueRenderOption": "FORMATTED_VALUE"}
            )
        value_ranges = result.get("valueRanges", [])
        return [vr.get("values", []) for vr in value_ranges]

    def write_range(self, range_spec: str, values: List[List[Any]]):
        with _sheets_errors(f"запись {range_spec}"):
            self.spreadsheet.values_update(
                range_spec,
                params={"valueInputOption": "USER_ENTERED"},
                body={"values": values},
            )

    def write_ranges(self, data: Sequence[tuple]):
        body = {
            "valueInputOption": "USER_ENTERED",
            "data": [{"range": range_spec, "values": values} for range_spec, values in data],
        }
        with _sheets_errors("пакетная запись"):
            self.spreadsheet.values_batch_update(body)

    def clear_range(self, range_spec: str):
        with _sheets_errors(f"очистка {range_spec}"):
            self.spreadsheet.values_clear(range_spec)

    def list_sheet_names(self) -> List[str]:
        with _sheets_errors("список листов"):
            return [ws.title for ws in self.spreadsheet.worksheets()]

    def ensure_sheet(self, name: str, min_rows: int = 0, min_cols: int = 0):
        with _sheets_errors(f"подготовка листа {name}"):
            worksheets = {ws.title: ws for ws in self.spreadsheet.worksheets()}
            ws = worksheets.get(name)
            if ws is None:
                self.spreadsheet.add_worksheet(
                    title=name, rows=max(min_rows, 1000), cols=max(min_cols, 26)
                )
                return
            if ws.row_count < min_rows or ws.col_count < min_cols:
                ws.resize(rows=max(ws.row_count, min_rows), cols=max(ws.col_count, min_cols))

    def get_sheet_id(self, name: str) -> int:
        with _sheets_errors(f"поиск листа {name}"):
            for ws in self.spreadsheet.worksheets():
                if ws.title == name:
                    return ws.id
        raise StoreError(f'Лист "{name}" не найден')

    def _batch_update(self, requests_list: List[Dict[str, Any]], action: str):
        if not requests_list:
            return
        with _sheets_errors(action):
            self.spreadsheet.batch_update({"requests": requests_list})

    @staticmethod
    def _grid_range(sheet_id: int, region: Optional[GridRegion]) -> Dict[str, int]:
        if region is None:
            return {"sheetId": sheet_id}
        return region.to_grid_range(sheet_id)

    def merge_cells(self, sheet_id: int, regions: Sequence[GridRegion]):
        self._batch_update([
            {"mergeCells": {"range": region.to_grid_range(sheet_id), "mergeType": "MERGE_ALL"}}
            for region in regions
        ], "объединение ячеек")

    def unmerge_cells(self, sheet_id: int, region: Optional[GridRegion] = None):
        self._batch_update([
            {"unmergeCells": {"range": self._grid_range(sheet_id, region)}}
        ], "снятие объединений")

    def set_borders(self, sheet_id: int, region: Optional[GridRegion], style: str = BORDER_SOLID):
        border = {"style": style}
        if style != BORDER_NONE:
            border["color"] = {"red": 0, "green": 0, "blue": 0, "alpha": 1}
        self._batch_update([{
            "updateBorders": {
                "range": self._grid_range(sheet_id, region),
                "top": border,
                "bottom": border,
                "left": border,
                "right": border,
                "innerHorizontal": border,
                "innerVertical": border,
            }
        }], "границы")

    def format_header(self, sheet_id: int, region: GridRegion, wrap: bool = False):
        cell_format = {"verticalAlignment": "MIDDLE", "horizontalAlignment": "CENTER"}
        fields = ["userEnteredFormat.verticalAlignment", "userEnteredFormat.horizontalAlignment"]
        if wrap:
            cell_format["wrapStrategy"] = "WRAP"
            fields.append("userEnteredFormat.wrapStrategy")
        self._batch_update([{
            "repeatCell": {
                "range": region.to_grid_range(sheet_id),
                "cell": {"userEnteredFormat": cell_format},
                "fields": ",".join(fields),
            }
        }], "оформление заголовка")
