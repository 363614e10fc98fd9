"""Общие фейки для тестов: HTTP-сессия без сети и репозиторий в памяти."""

import pytest
import requests

from app.services.clients.schedule_api_client import RequestFailure


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Подменяет requests.Session: отдаёт заготовленные ответы и запоминает вызовы."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        for suffix, response in self.responses.items():
            if url.endswith(suffix):
                return response
        return FakeResponse(status_code=404)


class FakeRepository:
    """Репозиторий с заранее известными ответами, ошибки задаются списком."""

    def __init__(self, groups=None, schedule=None, failures=0, groups_fail=False):
        self.groups = groups or []
        self.schedule = schedule or []
        self.failures = failures
        self.groups_fail = groups_fail
        self.schedule_calls = []

    def load_groups(self):
        if self.groups_fail:
            raise RequestFailure(ValueError("primary"), ValueError("fallback"))
        return list(self.groups)

    def load_schedule(self, group, start="", end=""):
        self.schedule_calls.append((group, start, end))
        if self.failures > 0:
            self.failures -= 1
            raise RequestFailure(ValueError("primary"), ValueError("fallback"))
        return list(self.schedule)


SCHEDULE_PAYLOAD = [
    {
        "lessonDate": "2026-10-19",
        "lessons": [
            {
                "lessonNumber": 1,
                "time": "08:30-10:00",
                "subject": "Математика",
                "teacher": "Иванов И.И.",
                "teacherPosition": "доцент",
                "classroom": "101",
                "building": "1",
                "groupParts": {},
            },
            {
                "lessonNumber": 2,
                "time": "10:10-11:40",
                "groupParts": {
                    "FIRST": {"subject": "Информатика", "teacher": "Петров", "classroom": "204"},
                    "SECOND": {"subject": "Информатика", "teacher": "Сидоров", "classroom": "205"},
                },
            },
            None,
        ],
    },
    {"lessonDate": None, "lessons": []},
]


@pytest.fixture
def schedule_payload():
    return [dict(day) for day in SCHEDULE_PAYLOAD]
