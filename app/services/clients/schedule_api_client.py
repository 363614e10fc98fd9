# app/services/clients/schedule_api_client.py

import logging
from typing import Callable, List, Optional, TypeVar
from urllib.parse import quote, urljoin

import requests

from config import Config
from app.services.parsers.schedule_models import Group, ScheduleDay, parse_groups, parse_schedule

log = logging.getLogger(__name__)

T = TypeVar('T')

# Всё, что считается неудачей запроса: сеть, HTTP-статус, разбор ответа
REQUEST_ERRORS = (requests.exceptions.RequestException, ValueError, TypeError, KeyError)


class RequestFailure(Exception):
    """Запрос не удался и на основном, и на резервном сервере."""

    def __init__(self, primary_error: Exception, fallback_error: Exception):
        super().__init__(
            f"Оба сервера недоступны. Основной: {primary_error}; резервный: {fallback_error}"
        )
        self.primary_error = primary_error
        self.fallback_error = fallback_error


class ScheduleApiClient:
    """Клиент одного сервера расписания."""

    def __init__(self, base_url: str, timeout: float = None, session: Optional[requests.Session] = None):
        # urljoin отбрасывает последний сегмент пути без завершающего слэша
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.timeout = Config.SCHEDULE_API_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: Optional[dict] = None):
        url = urljoin(self.base_url, path)
        log.debug(f"GET {url} params={params}")
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_groups(self) -> List[Group]:
        return parse_groups(self._get_json(Config.SCHEDULE_GROUPS_PATH))

    def get_schedule(self, group: Group, start: Optional[str] = None, end: Optional[str] = None) -> List[ScheduleDay]:
        path = Config.SCHEDULE_PATH.format(group=quote(group, safe=''))
        params = {}
        if start:
            params['start'] = start
        if end:
            params['end'] = end
        return parse_schedule(self._get_json(path, params=params or None))

    def __repr__(self):
        return f"ScheduleApiClient({self.base_url!r})"


class HostFallbackRequester:
    """
    Выполняет запрос на основном сервере, а при любой ошибке повторяет
    тот же запрос на резервном. Ровно одна повторная попытка.
    """

    def __init__(self, primary: ScheduleApiClient, fallback: ScheduleApiClient):
        self.primary = primary
        self.fallback = fallback

    def request(self, block: Callable[[ScheduleApiClient], T]) -> T:
        try:
            return block(self.primary)
        except REQUEST_ERRORS as e:
            primary_error = e
            log.warning(f"Запрос к {self.primary.base_url} не удался ({e}). Пробую {self.fallback.base_url}")

        try:
            return block(self.fallback)
        except REQUEST_ERRORS as fallback_error:
            log.error(f"Резервный сервер {self.fallback.base_url} тоже не ответил: {fallback_error}")
            raise RequestFailure(primary_error, fallback_error) from fallback_error


def create_default_requester(session: Optional[requests.Session] = None) -> HostFallbackRequester:
    """Собирает пару клиентов из адресов в конфиге."""
    return HostFallbackRequester(
        primary=ScheduleApiClient(Config.SCHEDULE_API_PRIMARY_URL, session=session),
        fallback=ScheduleApiClient(Config.SCHEDULE_API_FALLBACK_URL, session=session),
    )
