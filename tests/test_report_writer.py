import pytest

from journal.database import get_db, ReportLog
from journal.report import PeriodNotFoundError, compute_report_data
from journal.report_writer import (
    build_summary_plan, build_detailed_plan, apply_formatting, commit_values,
    generate_reports, report_title,
)
from journal.sheets.store import GridRegion
from tests.conftest import build_period_rows


@pytest.fixture
def scheduled(store, period):
    """Математика и Физика 13.01, у первого студента пропуск математики"""
    store.set_cell(period, "G3", "Математика")
    store.set_cell(period, "H3", "Физика")
    store.set_cell(period, "G4", "Н")
    return period


def _max_col(store, sheet):
    return max(col for _, col in store.cells(sheet))


def test_summary_plan_layout(store, scheduled):
    data = compute_report_data(store, 1, 2025)
    plan = build_summary_plan("01.25Отчет", data)

    assert (plan.end_col, plan.end_row) == (8, 10)
    assert len(plan.values) == plan.end_row
    assert plan.values[0] == [report_title(data)]
    assert plan.values[2][2:4] == ["Математика", "Физика"]
    assert plan.values[2][4] == "ИТОГО"
    assert plan.values[6] == ["", "", 2, 2, 4, "", "", ""]
    assert plan.values[7] == [1, "Бреславский Леонид", 2, "", 2, "", "50%", "50%"]

    assert plan.merges[0] == GridRegion(0, 1, 0, 8)
    assert plan.merges[1:] == [GridRegion(2, 6, col, col + 1) for col in range(8)]
    assert plan.borders == GridRegion(2, 10, 0, 8)
    assert plan.wrap_header


def test_detailed_plan_layout(store, scheduled):
    data = compute_report_data(store, 1, 2025)
    plan = build_detailed_plan("01.25Подробно", data)

    assert (plan.end_col, plan.end_row) == (8, 8)
    assert len(plan.values) == plan.end_row
    assert plan.values[2] == ["№", "ФИО", "Математика", "", "", "Физика", "", ""]
    assert plan.values[3] == ["", "", "Ч", "Н", "У", "Ч", "Н", "У"]
    assert plan.values[4] == [1, "Бреславский Леонид", 2, 2, "", "", "", ""]
    assert plan.values[-1] == ["", 4, 2, "", "", 2, "", ""]
    assert plan.merges == [
        GridRegion(2, 4, 0, 1), GridRegion(2, 4, 1, 2),
        GridRegion(2, 3, 2, 5), GridRegion(2, 3, 5, 8),
    ]


def test_report_sheets_written(store, scheduled):
    data = generate_reports(store, 1, 2025)

    assert store.cell("01.25Отчет", "A1").startswith("Анализ посещаемости занятий в группе СИС-12")
    assert "за январь месяц   2024-2025  уч.года\nКуратор - Куратор" in store.cell("01.25Отчет", "A1")
    assert store.cell("01.25Отчет", "E7") == "4"
    assert store.cell("01.25Отчет", "G8") == "50%"
    assert store.cell("01.25Подробно", "C3") == "Математика"
    assert store.cell("01.25Подробно", "B8") == "4"
    assert len(store.merges("01.25Отчет")) == 1 + 8
    assert data.total_hours == 4


def test_regeneration_is_idempotent(store, scheduled):
    generate_reports(store, 1, 2025)
    first = (store.cells("01.25Отчет"), store.cells("01.25Подробно"), store.merges("01.25Отчет"))
    generate_reports(store, 1, 2025)
    second = (store.cells("01.25Отчет"), store.cells("01.25Подробно"), store.merges("01.25Отчет"))
    assert first == second
    assert len(store.borders("01.25Отчет")) == 1


def test_curator_survives_regeneration(store, scheduled):
    generate_reports(store, 1, 2025)
    title = store.cell("01.25Отчет", "A1").replace("Куратор - Куратор", "Куратор - Петрова А.А.")
    store.set_cell("01.25Отчет", "A1", title)
    data = generate_reports(store, 1, 2025)
    assert data.curator == "Петрова А.А."
    assert store.cell("01.25Отчет", "A1").endswith("Куратор - Петрова А.А.")


def test_narrower_regeneration_leaves_no_stale_columns(store, scheduled):
    store.set_cell(scheduled, "I3", "История")
    store.set_cell(scheduled, "I5", "У")
    generate_reports(store, 1, 2025)
    assert _max_col(store, "01.25Отчет") == 9
    assert _max_col(store, "01.25Подробно") == 11

    store.set_cell(scheduled, "I3", "")
    data = generate_reports(store, 1, 2025)
    assert data.subjects == ["Математика", "Физика"]
    assert _max_col(store, "01.25Отчет") == 8
    assert _max_col(store, "01.25Подробно") == 8
    assert all(m.end_col <= 8 for m in store.merges("01.25Отчет"))
    assert "История" not in store.cells("01.25Подробно").values()


def test_wider_regeneration(store, scheduled):
    generate_reports(store, 1, 2025)
    store.set_cell(scheduled, "K3", "История")
    generate_reports(store, 1, 2025)
    assert store.cell("01.25Отчет", "E3") == "История"
    assert len(store.merges("01.25Отчет")) == 1 + 9


def test_formatting_failure_keeps_data(store, scheduled):
    store.fail_formatting = True
    data = generate_reports(store, 1, 2025)
    assert data.subjects == ["Математика", "Физика"]
    assert store.cell("01.25Отчет", "B8") == "Бреславский Леонид"
    assert store.merges("01.25Отчет") == []


def test_phases_are_separate(store, scheduled):
    plan = build_summary_plan("01.25Отчет", compute_report_data(store, 1, 2025))
    commit_values(store, plan)
    assert store.cell("01.25Отчет", "C3") == "Математика"
    assert store.merges("01.25Отчет") == []

    store.fail_formatting = True
    assert apply_formatting(store, plan) is False
    store.fail_formatting = False
    assert apply_formatting(store, plan) is True
    assert len(store.merges("01.25Отчет")) == len(plan.merges)


def test_report_log_records_generation(store):
    store.add_sheet("03.25", build_period_rows(["Иванов", "Петров"], dates=["03.03"]))
    store.set_cell("03.25", "G3", "Химия")
    generate_reports(store, 3, 2025)
    with pytest.raises(PeriodNotFoundError):
        generate_reports(store, 4, 2025)

    db = get_db()
    try:
        ok = db.query(ReportLog).filter(ReportLog.period == "03.25").one()
        failed = db.query(ReportLog).filter(ReportLog.period == "04.25").one()
    finally:
        db.close()
    assert (ok.status, ok.students_count, ok.subjects_count, ok.total_hours) == ("success", 2, 1, 2)
    assert failed.status == "error"
    assert "04.25" in failed.error_message
