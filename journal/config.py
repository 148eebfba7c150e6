"""Конфигурация журнала посещаемости"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

# Google Sheets настройки
# ID таблицы берется из ссылки docs.google.com/spreadsheets/d/<ID>/edit
GOOGLE_SPREADSHEET_ID = os.getenv("GOOGLE_SPREADSHEET_ID", "")

# Сервисный аккаунт: либо весь JSON ключа целиком,
# либо email + приватный ключ (как в панели Vercel, с \n вместо переводов строк)
GOOGLE_SERVICE_ACCOUNT_JSON = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON", "")
GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")

GOOGLE_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# База данных (логи приложения и журнал генерации отчетов)
# Путь относительно корня проекта
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATABASE_PATH = os.path.join(BASE_DIR, "data", "journal.db")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_PATH}")


@dataclass(frozen=True)
class SheetLayout:
    """
    Разметка основного листа периода "MM.YY"

    Все номера строк и колонок 1-based, как в самой таблице:
    - A1: название группы
    - строка 1 (с колонки G): даты "DD.MM", каждая занимает pairs_per_date колонок
    - строка 3: предметы по парам
    - с строки 4: блок студентов (A - номер, B - ФИО), ниже через пропуск - список предметов
    - D..F: итоги по студенту (по уважительной, пропусков, всего)
    """
    header_row: int = 1
    subject_row: int = 3
    students_start_row: int = 4
    students_max_row: int = 60
    data_start_col: int = 7
    pairs_per_date: int = 4
    hours_per_pair: int = 2
    summary_start_col: int = 4
    last_col: str = "ZZ"
    report_max_row: int = 200


DEFAULT_LAYOUT = SheetLayout()

# Названия листов: "MM.YY", "MM.YYПодробно", "MM.YYОтчет"
PERIOD_SHEET_PATTERN = r"^\d{2}\.\d{2}$"
DETAILED_SHEET_SUFFIX = "Подробно"
REPORT_SHEET_SUFFIX = "Отчет"

# Отметки посещаемости
STATUS_ABSENT = "Н"
STATUS_EXCUSED = "У"
ATTENDANCE_STATUSES = (STATUS_ABSENT, STATUS_EXCUSED)

# Заголовки итоговых колонок, которые могут попасть в строку предметов
NON_SUBJECT_LABELS = ("Опозданий", "По уважительной", "Пропусков")

MONTH_NAMES = [
    "", "январь", "февраль", "март", "апрель", "май", "июнь",
    "июль", "август", "сентябрь", "октябрь", "ноябрь", "декабрь",
]

# Значения по умолчанию, если в таблице их нет
DEFAULT_GROUP_NAME = "СИС-12"
DEFAULT_CURATOR = "Куратор"
FALLBACK_SUBJECTS = [
    "Математика", "Физика", "Литература", "Русский",
    "История", "Химия", "Информатика", "Иностранный",
]
