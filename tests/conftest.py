"""
Общие фикстуры тестов: таблица в памяти вместо Google Sheets
"""
import os
import tempfile

# БД логов и файл токенов - во временной папке (до импорта модулей журнала)
_TMP_DIR = tempfile.mkdtemp(prefix="el-jurnal-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'journal.db')}"
os.environ["API_TOKENS_FILE"] = os.path.join(_TMP_DIR, "api_tokens.json")

import pytest

from journal.database import init_db
from journal.sheets.addressing import parse_a1_range
from journal.sheets.store import CellStore, StoreError, BORDER_NONE


def _formatted(value) -> str:
    """Как Sheets вернет значение, записанное с USER_ENTERED"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _overlaps(a, b) -> bool:
    return (a.start_row < b.end_row and b.start_row < a.end_row
            and a.start_col < b.end_col and b.start_col < a.end_col)


class FakeStore(CellStore):
    """
    Таблица в памяти с поведением Google Sheets:
    - чтение возвращает строки без пустых хвостов и без пустых строк в конце
    - обращение к несуществующему листу - StoreError
    - объединение пересекающихся ячеек - StoreError
    """

    def __init__(self):
        self.sheets = {}
        self.fail_formatting = False
        self.writes = []
        self._next_id = 100

    # --- подготовка данных ---

    def add_sheet(self, name, rows=None):
        self.ensure_sheet(name)
        for r, row in enumerate(rows or [], 1):
            for c, value in enumerate(row, 1):
                if _formatted(value) != "":
                    self.sheets[name]["cells"][(r, c)] = _formatted(value)
        return self

    def set_cell(self, sheet, a1, value):
        _, (col, row, _, _) = parse_a1_range(f"'{sheet}'!{a1}")
        self.sheets[sheet]["cells"][(row, col)] = _formatted(value)

    def cell(self, sheet, a1) -> str:
        _, (col, row, _, _) = parse_a1_range(f"'{sheet}'!{a1}")
        return self.sheets[sheet]["cells"].get((row, col), "")

    def cells(self, sheet) -> dict:
        return dict(self.sheets[sheet]["cells"])

    def merges(self, sheet) -> list:
        return list(self.sheets[sheet]["merges"])

    def borders(self, sheet) -> list:
        return list(self.sheets[sheet]["borders"])

    # --- CellStore ---

    def _sheet(self, name):
        if name not in self.sheets:
            raise StoreError(f"Unable to parse range: {name}")
        return self.sheets[name]

    def _bounds(self, range_spec):
        name, box = parse_a1_range(range_spec)
        sheet = self._sheet(name)
        if box is None:
            cells = sheet["cells"]
            max_row = max((r for r, _ in cells), default=1)
            max_col = max((c for _, c in cells), default=1)
            return sheet, (1, 1, max_col, max_row)
        return sheet, box

    def read_range(self, range_spec):
        sheet, (c1, r1, c2, r2) = self._bounds(range_spec)
        rows = []
        for r in range(r1, r2 + 1):
            row = [sheet["cells"].get((r, c), "") for c in range(c1, c2 + 1)]
            while row and row[-1] == "":
                row.pop()
            rows.append(row)
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def write_range(self, range_spec, values):
        sheet, (c1, r1, c2, r2) = self._bounds(range_spec)
        if len(values) > r2 - r1 + 1 or any(len(row) > c2 - c1 + 1 for row in values):
            raise StoreError(f"Requested writing within range {range_spec}, but tried writing more")
        self.writes.append(range_spec)
        for i, row in enumerate(values):
            for j, value in enumerate(row):
                text = _formatted(value)
                if text == "":
                    sheet["cells"].pop((r1 + i, c1 + j), None)
                else:
                    sheet["cells"][(r1 + i, c1 + j)] = text

    def clear_range(self, range_spec):
        sheet, (c1, r1, c2, r2) = self._bounds(range_spec)
        for key in [k for k in sheet["cells"] if r1 <= k[0] <= r2 and c1 <= k[1] <= c2]:
            del sheet["cells"][key]

    def list_sheet_names(self):
        return list(self.sheets)

    def ensure_sheet(self, name, min_rows=0, min_cols=0):
        if name not in self.sheets:
            self._next_id += 1
            self.sheets[name] = {"id": self._next_id, "cells": {}, "merges": [], "borders": [], "headers": []}

    def get_sheet_id(self, name):
        return self._sheet(name)["id"]

    def _by_id(self, sheet_id):
        for sheet in self.sheets.values():
            if sheet["id"] == sheet_id:
                return sheet
        raise StoreError(f"No grid with id: {sheet_id}")

    def _check_formatting(self):
        if self.fail_formatting:
            raise StoreError("Ошибка Google Sheets (оформление): 503 Service Unavailable")

    def merge_cells(self, sheet_id, regions):
        self._check_formatting()
        sheet = self._by_id(sheet_id)
        for region in regions:
            if any(_overlaps(region, existing) for existing in sheet["merges"]):
                raise StoreError("You can't merge cells that are already merged")
            sheet["merges"].append(region)

    def unmerge_cells(self, sheet_id, region=None):
        self._check_formatting()
        sheet = self._by_id(sheet_id)
        if region is None:
            sheet["merges"] = []
        else:
            sheet["merges"] = [m for m in sheet["merges"] if not _overlaps(m, region)]

    def set_borders(self, sheet_id, region, style="SOLID"):
        self._check_formatting()
        sheet = self._by_id(sheet_id)
        if style == BORDER_NONE:
            if region is None:
                sheet["borders"] = []
            else:
                sheet["borders"] = [b for b in sheet["borders"] if not _overlaps(b, region)]
        else:
            sheet["borders"].append(region)

    def format_header(self, sheet_id, region, wrap=False):
        self._check_formatting()
        self._by_id(sheet_id)["headers"].append((region, wrap))


def build_period_rows(students, subjects=None, dates=(), group="СИС-12", gap=1, extra_labels=True):
    """
    Строки основного листа периода (с A1)

    Args:
        students: ["Иванов", ...] -> номера 1..N с 4-й строки
        subjects: список предметов под студентами (через gap пустых строк)
        dates: ["13.01", "14.01"] - по 4 колонки на дату начиная с G
    """
    width = 6 + len(dates) * 4 + 3
    rows = [[""] * width for _ in range(3)]
    rows[0][0] = group
    for i, token in enumerate(dates):
        rows[0][6 + i * 4] = token
    rows[1][2:6] = ["Опозданий", "По уважительной", "Пропусков", "Всего"]
    if extra_labels:
        # подписи итогов справа от дат в строке предметов
        rows[2][6 + len(dates) * 4:] = ["Опозданий", "По уважительной", "Пропусков"]
    for i, name in enumerate(students, 1):
        rows.append([i, name])
    for _ in range(gap):
        rows.append([])
    for i, subject in enumerate(subjects or [], 1):
        rows.append([i, subject])
    return rows


@pytest.fixture(scope="session", autouse=True)
def log_database():
    init_db()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def period(store):
    """Лист "01.25": 3 студента, 2 даты, список предметов"""
    store.add_sheet("01.25", build_period_rows(
        ["Бреславский Леонид", "Бугай Дмитрий", "Быкадоров Николай"],
        subjects=["Математика", "Физика", "История"],
        dates=["13.01", "14.01"],
    ))
    return "01.25"


@pytest.fixture
def client(store):
    """TestClient с таблицей в памяти вместо Google Sheets"""
    from fastapi.testclient import TestClient
    from backend.app import app
    from backend.utils.sheets import get_store

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    token = client.get("/api/token").json()["token"]
    return {"Authorization": f"Bearer {token}"}
