from journal.sheets.dates import date_token, locate_date_column, find_date_column


def test_date_token_is_zero_padded():
    assert date_token(5, 3) == "05.03"
    assert date_token(13, 11) == "13.11"


def test_locate_date_column():
    header = ["13.01", "", "", "", " 14.01 ", "", "", ""]
    assert locate_date_column(header, 13, 1) == 7
    assert locate_date_column(header, 14, 1) == 11
    assert locate_date_column(header, 15, 1) is None


def test_exact_match_only():
    assert locate_date_column(["13.1", "2025-01-13", "13/01"], 13, 1) is None


def test_find_date_column_in_sheet(store, period):
    assert find_date_column(store, period, 14, 1) == 11
    assert find_date_column(store, period, 20, 1) is None


def test_empty_header(store):
    store.add_sheet("02.25")
    assert find_date_column(store, "02.25", 1, 2) is None
