# app/services/core/lesson_resolver.py

from dataclasses import dataclass
from typing import List

from config import Config
from app.services.parsers.schedule_models import Lesson

SEPARATOR = " / "
DISPLAY_FIELDS = ("subject", "teacher", "teacher_position", "classroom", "building")


@dataclass(frozen=True)
class DisplayFields:
    """Итоговые строки для показа одной пары. Никогда не None."""
    subject: str
    teacher: str
    teacher_position: str
    classroom: str
    building: str


def _collect_part_values(lesson: Lesson, field_name: str) -> List[str]:
    """Различные непустые значения поля по подгруппам, ключи в лексическом порядке."""
    values = []
    for key in sorted(lesson.group_parts):
        part = lesson.group_parts[key]
        if part is None:
            continue
        value = getattr(part, field_name)
        if value and value not in values:
            values.append(value)
    return values


def _fallback(lesson: Lesson, field_name: str) -> str:
    if field_name == "subject":
        if lesson.teacher:
            return f"{Config.LESSON_PLACEHOLDER} с {lesson.teacher}"
        return Config.LESSON_PLACEHOLDER
    return ""


def resolve_field(lesson: Lesson, field_name: str) -> str:
    """
    Строка для показа одного поля пары.

    Общее для всей группы значение всегда побеждает. Иначе собираем
    значения подгрупп: одно - показываем как есть, несколько - через " / ".
    """
    if field_name not in DISPLAY_FIELDS:
        raise ValueError(f"Неизвестное поле занятия: {field_name}")

    top_level = getattr(lesson, field_name)
    if top_level:
        return top_level

    values = _collect_part_values(lesson, field_name)
    if not values:
        return _fallback(lesson, field_name)
    return SEPARATOR.join(values)


def resolve_display_fields(lesson: Lesson) -> DisplayFields:
    return DisplayFields(**{name: resolve_field(lesson, name) for name in DISPLAY_FIELDS})
