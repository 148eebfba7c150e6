import pytest

from journal.report import (
    PeriodNotFoundError, percent, collect_subjects, academic_year, parse_curator, compute_report_data,
)
from tests.conftest import build_period_rows


@pytest.fixture
def three_columns(store):
    """Один предмет в трех колонках: у первого студента везде "Н", у второго "У" """
    store.add_sheet("02.25", build_period_rows(["Иванов", "Петров"], dates=["03.02"]))
    for col in "GHI":
        store.set_cell("02.25", f"{col}3", "Математика")
        store.set_cell("02.25", f"{col}4", "Н")
        store.set_cell("02.25", f"{col}5", "У")
    return "02.25"


def test_aggregation_arithmetic(store, three_columns):
    data = compute_report_data(store, 2, 2025)
    assert data.subjects == ["Математика"]
    assert data.subject_hours == {"Математика": 6}
    assert data.total_hours == 6

    absent, excused = data.report_rows
    assert (absent.total, absent.excused) == (6, 0)
    assert absent.total_percent == "100%"
    assert absent.unexcused_percent == "100%"
    assert (excused.total, excused.excused) == (6, 6)
    assert excused.total_percent == "100%"
    assert excused.unexcused_percent == "0%"


def test_detailed_rows(store, three_columns):
    data = compute_report_data(store, 2, 2025)
    first, second = data.detailed_rows
    assert first.by_subject["Математика"].to_dict() == {"hours": 6, "unexcused": 6, "excused": 0}
    assert second.by_subject["Математика"].to_dict() == {"hours": 6, "unexcused": 0, "excused": 6}


def test_summary_labels_are_not_subjects(store, three_columns):
    data = compute_report_data(store, 2, 2025)
    assert "Пропусков" not in data.subjects
    assert "Опозданий" not in data.subject_hours


def test_zero_hours_gives_zero_percent(store, period):
    data = compute_report_data(store, 1, 2025)
    assert data.total_hours == 0
    assert data.subjects == []
    for row in data.report_rows:
        assert row.total_percent == "0%"
        assert row.unexcused_percent == "0%"


def test_missing_period(store):
    with pytest.raises(PeriodNotFoundError, match="Лист 05.25 не найден"):
        compute_report_data(store, 5, 2025)


def test_report_header_fields(store, period):
    store.add_sheet("01.25Отчет", [["Анализ посещаемости...\nКуратор - Петрова А.А."]])
    data = compute_report_data(store, 1, 2025)
    assert data.group_name == "СИС-12"
    assert data.curator == "Петрова А.А."
    assert data.month_name == "январь"
    assert data.academic_year == "2024-2025"


def test_default_group_and_curator(store):
    store.add_sheet("10.25", build_period_rows(["Иванов"], group=""))
    data = compute_report_data(store, 10, 2025)
    assert data.group_name == "СИС-12"
    assert data.curator == "Куратор"
    assert data.academic_year == "2025-2026"


def test_subject_hours_count_every_column(store, period):
    store.set_cell(period, "G3", "Математика")
    store.set_cell(period, "H3", "Физика")
    store.set_cell(period, "K3", "Математика")
    store.set_cell(period, "K4", "Н")
    data = compute_report_data(store, 1, 2025)
    assert data.subjects == ["Математика", "Физика"]
    assert data.subject_hours == {"Математика": 4, "Физика": 2}
    row = data.report_rows[0].to_dict()
    assert row["bySubject"] == {"Математика": 2, "Физика": 0}
    assert row["totalPercent"] == "33%"


def test_to_dict_shape(store, three_columns):
    payload = compute_report_data(store, 2, 2025).to_dict()
    assert set(payload) == {"month", "year", "group", "curator", "subjects", "subjectHours", "totalHours", "rows"}
    assert payload["rows"][0]["studentName"] == "Иванов"


@pytest.mark.parametrize("part, whole, expected", [
    (1, 8, "13%"),   # 12.5 -> 13
    (1, 3, "33%"),
    (2, 3, "67%"),
    (5, 0, "0%"),
    (0, 10, "0%"),
])
def test_percent_rounds_half_up(part, whole, expected):
    assert percent(part, whole) == expected


def test_collect_subjects_starts_at_data_column():
    cells = ["СИС-12", "", "Пропусков", "", "", "", "Математика", "Физика", "Математика", "", "По уважительной"]
    assert collect_subjects(cells) == ["Математика", "Физика"]


@pytest.mark.parametrize("month, year, expected", [
    (9, 2025, "2025-2026"),
    (12, 2025, "2025-2026"),
    (1, 2026, "2025-2026"),
    (8, 2026, "2025-2026"),
])
def test_academic_year(month, year, expected):
    assert academic_year(month, year) == expected


def test_parse_curator():
    assert parse_curator("Анализ ...\nКуратор - Иванов И.И.") == "Иванов И.И."
    assert parse_curator("Анализ без куратора") is None
    assert parse_curator("") is None
