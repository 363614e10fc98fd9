"""Тесты подготовки расписания к показу и работы с датами."""

from datetime import date

from app.services.core.schedule_view import (
    NO_DATE,
    NO_LESSONS,
    NO_TIME,
    build_day_view,
    build_lesson_view,
    filter_groups,
    format_lesson_date,
)
from app.services.parsers.schedule_models import Lesson, LessonPart, ScheduleDay
from app.services.utils.date_utils import get_explicit_week_range


class TestDates:
    def test_format_iso_date(self):
        assert format_lesson_date("2026-10-19") == "19.10.2026 (понедельник)"

    def test_format_missing_date(self):
        assert format_lesson_date(None) == NO_DATE

    def test_format_bad_date_kept(self):
        assert format_lesson_date("завтра") == "завтра"

    def test_explicit_week_range(self):
        assert get_explicit_week_range(date(2026, 12, 28)) == ("2026-12-28", "2027-01-03")


class TestLessonView:
    def test_defaults(self):
        view = build_lesson_view(Lesson(), 3)
        assert view.number == 3
        assert view.time == NO_TIME
        assert view.subject == "Занятие"
        assert view.building == ""

    def test_building_label(self):
        lesson = Lesson(lesson_number=1, group_parts={"1": LessonPart(building="2")})
        assert build_lesson_view(lesson, 1).building == "Корпус: 2"


class TestDayView:
    def test_empty_day(self):
        view = build_day_view(ScheduleDay())
        assert view.date == NO_DATE
        assert view.lessons_label == "0 пар"
        assert view.empty_message == NO_LESSONS

    def test_lessons_numbered_by_position(self):
        view = build_day_view(ScheduleDay("2026-10-19", [Lesson(subject="Химия"), Lesson(lesson_number=5)]))
        assert [lesson.number for lesson in view.lessons] == [1, 5]
        assert view.lessons_label == "2 пар"
        assert view.empty_message == ""


def test_filter_groups_case_insensitive():
    assert filter_groups(["ИСП-21", "пкс-3"], " ПКС ") == ["пкс-3"]
