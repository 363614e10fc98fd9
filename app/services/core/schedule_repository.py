# app/services/core/schedule_repository.py

import logging
from datetime import date
from typing import List, Optional, Union

from app.services.clients.schedule_api_client import HostFallbackRequester, RequestFailure, create_default_requester
from app.services.parsers.schedule_models import Group, ScheduleDay
from app.services.utils.date_utils import get_explicit_week_range

log = logging.getLogger(__name__)

DateLike = Optional[Union[str, date]]


def _as_param(value: DateLike) -> Optional[str]:
    if isinstance(value, date):
        return value.isoformat()
    return value or None


class ScheduleRepository:
    """Точка доступа к данным для интерфейса: список групп и расписание группы."""

    def __init__(self, requester: Optional[HostFallbackRequester] = None):
        self.requester = requester or create_default_requester()

    def fetch_groups(self) -> List[Group]:
        return self.requester.request(lambda api: api.get_groups())

    def fetch_schedule(self, group: Group, start_date: DateLike = None, end_date: DateLike = None) -> List[ScheduleDay]:
        """
        Расписание группы за диапазон дат.
        Обе даты пустые - сервер сам выбирает диапазон по умолчанию.
        """
        start, end = _as_param(start_date), _as_param(end_date)
        if bool(start) != bool(end):
            raise ValueError("Даты начала и конца задаются вместе или не задаются вовсе")
        return self.requester.request(lambda api: api.get_schedule(group, start, end))

    # Названия, под которыми этим пользуется интерфейс
    def load_groups(self) -> List[Group]:
        return self.fetch_groups()

    def load_schedule(self, group: Group, start: DateLike = "", end: DateLike = "") -> List[ScheduleDay]:
        return self.fetch_schedule(group, start, end)


def load_schedule_with_week_fallback(repository: ScheduleRepository, group: Group,
                                     today: Optional[date] = None) -> List[ScheduleDay]:
    """
    Сначала просит диапазон по умолчанию, а если сервер не справился -
    один раз повторяет запрос с явной неделей (сегодня .. сегодня + 6).
    """
    try:
        return repository.load_schedule(group, "", "")
    except RequestFailure as e:
        start, end = get_explicit_week_range(today)
        log.warning(f"Расписание '{group}' по умолчанию не получено ({e}). Повтор с диапазоном {start}..{end}")
        return repository.load_schedule(group, start, end)
