import threading
import time

import pytest
import requests
from google.auth.exceptions import RefreshError, TransportError

from backend.utils import sheets as sheets_deps
from journal.sheets.store import GoogleSheetsStore, StoreError


class FailingSpreadsheet:
    """Таблица gspread, у которой каждый вызов падает с заданной ошибкой"""

    def __init__(self, error):
        self.error = error

    def values_get(self, range_spec, params=None):
        raise self.error

    def worksheets(self):
        raise self.error


def _store_with(spreadsheet):
    store = GoogleSheetsStore(spreadsheet_id="test-id", credentials_info={})
    store._spreadsheet = spreadsheet
    return store


def test_refresh_error_becomes_store_error():
    store = _store_with(FailingSpreadsheet(RefreshError("invalid_grant: Invalid JWT Signature.")))
    with pytest.raises(StoreError, match="Ошибка авторизации Google Sheets") as info:
        store.read_range("'01.25'!A1")
    assert "Invalid JWT Signature" in str(info.value)
    assert isinstance(info.value.__cause__, RefreshError)


def test_transport_error_becomes_store_error():
    store = _store_with(FailingSpreadsheet(TransportError("connection reset")))
    with pytest.raises(StoreError, match="авторизации"):
        store.list_sheet_names()


def test_network_error_becomes_store_error():
    store = _store_with(FailingSpreadsheet(requests.exceptions.ConnectionError("timeout")))
    with pytest.raises(StoreError, match="Нет связи с Google Sheets"):
        store.read_range("'01.25'!A1")


def test_missing_spreadsheet_id():
    store = GoogleSheetsStore(spreadsheet_id="", credentials_info={})
    store.spreadsheet_id = ""
    with pytest.raises(StoreError, match="GOOGLE_SPREADSHEET_ID"):
        store.read_range("'01.25'!A1")


def _run_concurrently(target, count=8):
    barrier = threading.Barrier(count)
    results = []

    def worker():
        barrier.wait()
        results.append(target())

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


def test_spreadsheet_opened_once_under_concurrency(monkeypatch):
    calls = []

    def slow_open(self):
        calls.append(1)
        time.sleep(0.05)
        return object()

    monkeypatch.setattr(GoogleSheetsStore, "_open", slow_open)
    store = GoogleSheetsStore(spreadsheet_id="test-id", credentials_info={})
    results = _run_concurrently(lambda: store.spreadsheet)
    assert len(calls) == 1
    assert all(result is results[0] for result in results)


def test_get_store_is_a_single_instance(monkeypatch):
    created = []

    class SlowStore:
        def __init__(self):
            created.append(self)
            time.sleep(0.05)

    monkeypatch.setattr(sheets_deps, "_store", None)
    monkeypatch.setattr(sheets_deps, "GoogleSheetsStore", SlowStore)
    results = _run_concurrently(sheets_deps.get_store)
    assert len(created) == 1
    assert all(result is created[0] for result in results)
