"""Тесты репозитория и повторного запроса с явной неделей."""

from datetime import date

import pytest
import requests

from app.services.clients.schedule_api_client import HostFallbackRequester, RequestFailure, ScheduleApiClient
from app.services.core.schedule_repository import ScheduleRepository, load_schedule_with_week_fallback

from conftest import FakeRepository, FakeResponse, FakeSession


def _repository(primary_session, fallback_session):
    return ScheduleRepository(HostFallbackRequester(
        ScheduleApiClient("http://primary/", timeout=1, session=primary_session),
        ScheduleApiClient("http://fallback/", timeout=1, session=fallback_session),
    ))


class TestScheduleRepository:
    def test_groups_from_fallback(self):
        repository = _repository(
            FakeSession(error=requests.exceptions.ConnectionError()),
            FakeSession(responses={"api/groups": FakeResponse(["A", "B"])}),
        )
        assert repository.load_groups() == ["A", "B"]

    def test_schedule_fails_when_both_hosts_fail(self):
        repository = _repository(
            FakeSession(error=requests.exceptions.ConnectionError()),
            FakeSession(error=requests.exceptions.ConnectionError()),
        )
        with pytest.raises(RequestFailure):
            repository.load_schedule("A", "", "")

    def test_dates_are_formatted(self):
        session = FakeSession(responses={"/group/A": FakeResponse([])})
        repository = _repository(session, FakeSession())
        repository.fetch_schedule("A", date(2026, 10, 19), date(2026, 10, 25))
        assert session.calls[0]["params"] == {"start": "2026-10-19", "end": "2026-10-25"}

    def test_one_sided_range_rejected(self):
        repository = _repository(FakeSession(), FakeSession())
        with pytest.raises(ValueError):
            repository.load_schedule("A", "2026-10-19", "")


class TestWeekFallback:
    def test_default_range_success(self):
        repository = FakeRepository(schedule=["day"])
        assert load_schedule_with_week_fallback(repository, "A") == ["day"]
        assert repository.schedule_calls == [("A", "", "")]

    def test_retries_with_explicit_week(self):
        repository = FakeRepository(schedule=["day"], failures=1)
        result = load_schedule_with_week_fallback(repository, "A", today=date(2026, 10, 19))
        assert result == ["day"]
        assert repository.schedule_calls == [("A", "", ""), ("A", "2026-10-19", "2026-10-25")]

    def test_second_failure_propagates(self):
        repository = FakeRepository(failures=2)
        with pytest.raises(RequestFailure):
            load_schedule_with_week_fallback(repository, "A", today=date(2026, 10, 19))
        assert len(repository.schedule_calls) == 2


class TestScheduleHostFallback:
    def test_fallback_serves_schedule(self, schedule_payload):
        fallback = FakeSession(responses={"/group/A": FakeResponse(schedule_payload)})
        repository = _repository(FakeSession(error=requests.exceptions.ConnectionError()), fallback)

        days = repository.fetch_schedule("A")

        assert [day.lesson_date for day in days] == ["2026-10-19", None]
        assert len(fallback.calls) == 1

    def test_primary_schedule_skips_fallback(self, schedule_payload):
        primary = FakeSession(responses={"/group/A": FakeResponse(schedule_payload)})
        fallback = FakeSession(responses={"/group/A": FakeResponse([])})
        repository = _repository(primary, fallback)

        days = repository.fetch_schedule("A", "2026-10-19", "2026-10-25")

        assert len(days) == 2
        assert len(primary.calls) == 1
        assert fallback.calls == []
