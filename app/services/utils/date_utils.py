# app/services/utils/date_utils.py

from datetime import date, timedelta
from typing import Optional, Tuple


DAYS_RU = ["понедельник", "вторник", "среда", "четверг", "пятница", "суббота", "воскресенье"]


def get_explicit_week_range(today: Optional[date] = None) -> Tuple[str, str]:
    """Диапазон из семи дней подряд: сегодня .. сегодня + 6, в ISO-формате."""
    today = today or date.today()
    return today.isoformat(), (today + timedelta(days=6)).isoformat()


def format_day_with_weekday(day: date) -> str:
    """'19.10.2026 (понедельник)'"""
    return f"{day.strftime('%d.%m.%Y')} ({DAYS_RU[day.weekday()]})"
