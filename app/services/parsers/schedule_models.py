# app/services/parsers/schedule_models.py

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

log = logging.getLogger(__name__)

# Группа - просто строка-идентификатор ("ИСП-21", "ПКС-3")
Group = str


class ScheduleDecodeError(ValueError):
    """Ответ сервера не удалось разобрать в структуру расписания."""


@dataclass
class LessonPart:
    """Данные занятия для одной подгруппы."""
    subject: Optional[str] = None
    teacher: Optional[str] = None
    teacher_position: Optional[str] = None
    classroom: Optional[str] = None
    building: Optional[str] = None


@dataclass
class Lesson:
    """
    Одна пара в расписании. Любое из полей может отсутствовать,
    а часть данных может быть разнесена по подгруппам в group_parts.
    """
    lesson_number: Optional[int] = None
    time: Optional[str] = None  # Время как его прислал сервер, "08:30-10:00"
    subject: Optional[str] = None
    teacher: Optional[str] = None
    teacher_position: Optional[str] = None
    classroom: Optional[str] = None
    building: Optional[str] = None
    group_parts: Dict[str, Optional[LessonPart]] = field(default_factory=dict)


@dataclass
class ScheduleDay:
    """Один учебный день: дата (строкой, как пришла) и список пар."""
    lesson_date: Optional[str] = None
    lessons: List[Lesson] = field(default_factory=list)

    @property
    def parsed_date(self) -> Optional[date]:
        if not self.lesson_date:
            return None
        try:
            return date.fromisoformat(self.lesson_date)
        except ValueError:
            return None


def _optional_str(raw: dict, key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        return str(value)
    return value


def _expect(value, expected_type, what: str):
    if not isinstance(value, expected_type):
        raise ScheduleDecodeError(f"{what}: ожидался {expected_type.__name__}, получено {type(value).__name__}")
    return value


def parse_lesson_part(raw) -> Optional[LessonPart]:
    if raw is None:
        return None
    _expect(raw, dict, "Подгруппа")
    return LessonPart(
        subject=_optional_str(raw, 'subject'),
        teacher=_optional_str(raw, 'teacher'),
        teacher_position=_optional_str(raw, 'teacherPosition'),
        classroom=_optional_str(raw, 'classroom'),
        building=_optional_str(raw, 'building'),
    )


def parse_lesson(raw: dict) -> Lesson:
    _expect(raw, dict, "Занятие")

    lesson_number = raw.get('lessonNumber')
    if lesson_number is not None:
        try:
            lesson_number = int(lesson_number)
        except (TypeError, ValueError) as e:
            raise ScheduleDecodeError(f"Некорректный номер пары: {lesson_number!r}") from e

    raw_parts = raw.get('groupParts') or {}
    _expect(raw_parts, dict, "groupParts")

    return Lesson(
        lesson_number=lesson_number,
        time=_optional_str(raw, 'time'),
        subject=_optional_str(raw, 'subject'),
        teacher=_optional_str(raw, 'teacher'),
        teacher_position=_optional_str(raw, 'teacherPosition'),
        classroom=_optional_str(raw, 'classroom'),
        building=_optional_str(raw, 'building'),
        group_parts={str(key): parse_lesson_part(part) for key, part in raw_parts.items()},
    )


def parse_schedule_day(raw: dict) -> ScheduleDay:
    _expect(raw, dict, "День расписания")
    raw_lessons = raw.get('lessons') or []
    _expect(raw_lessons, list, "lessons")

    lessons = []
    for raw_lesson in raw_lessons:
        if raw_lesson is None:
            log.debug(f"Пустая запись занятия за {raw.get('lessonDate')} пропущена.")
            continue
        lessons.append(parse_lesson(raw_lesson))

    return ScheduleDay(lesson_date=_optional_str(raw, 'lessonDate'), lessons=lessons)


def parse_schedule(payload) -> List[ScheduleDay]:
    """Разбирает JSON-ответ сервера с расписанием в список дней."""
    _expect(payload, list, "Расписание")
    return [parse_schedule_day(day) for day in payload]


def parse_groups(payload) -> List[Group]:
    """Разбирает JSON-ответ сервера со списком групп."""
    _expect(payload, list, "Список групп")
    return [_expect(group, str, "Группа") for group in payload]
