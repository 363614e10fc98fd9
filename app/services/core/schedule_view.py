# app/services/core/schedule_view.py

import logging
from dataclasses import dataclass, field
from typing import List

from app.services.core.lesson_resolver import DisplayFields, resolve_display_fields
from app.services.parsers.schedule_models import Group, Lesson, ScheduleDay
from app.services.utils.date_utils import format_day_with_weekday

log = logging.getLogger(__name__)

NO_DATE = "Дата не указана"
NO_TIME = "Время не указано"
NO_LESSONS = "Нет занятий"


@dataclass
class LessonView:
    number: int
    time: str
    subject: str
    teacher: str
    teacher_position: str
    classroom: str
    building: str  # Уже с подписью "Корпус: ...", либо пустая строка


@dataclass
class DayView:
    date: str
    lessons_label: str
    lessons: List[LessonView] = field(default_factory=list)
    empty_message: str = ""


def filter_groups(groups: List[Group], query: str) -> List[Group]:
    """Поиск группы по вхождению подстроки без учёта регистра."""
    query = (query or "").strip()
    if not query:
        return list(groups)
    needle = query.casefold()
    return [group for group in groups if needle in group.casefold()]


def format_lesson_date(raw_date) -> str:
    if not raw_date:
        return NO_DATE
    day = ScheduleDay(lesson_date=raw_date).parsed_date
    if day is None:
        log.warning(f"Не удалось разобрать дату '{raw_date}', показываю как есть.")
        return raw_date
    return format_day_with_weekday(day)


def build_lesson_view(lesson: Lesson, index: int) -> LessonView:
    """index - порядковый номер пары в дне, начиная с 1."""
    fields: DisplayFields = resolve_display_fields(lesson)
    return LessonView(
        number=lesson.lesson_number if lesson.lesson_number is not None else index,
        time=lesson.time or NO_TIME,
        subject=fields.subject,
        teacher=fields.teacher,
        teacher_position=fields.teacher_position,
        classroom=fields.classroom,
        building=f"Корпус: {fields.building}" if fields.building else "",
    )


def build_day_view(day: ScheduleDay) -> DayView:
    lessons = [build_lesson_view(lesson, index) for index, lesson in enumerate(day.lessons, start=1)]
    return DayView(
        date=format_lesson_date(day.lesson_date),
        lessons_label=f"{len(lessons)} пар",
        lessons=lessons,
        empty_message="" if lessons else NO_LESSONS,
    )


def build_schedule_view(schedule: List[ScheduleDay]) -> List[DayView]:
    return [build_day_view(day) for day in schedule]
