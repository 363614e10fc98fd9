# app/services/core/schedule_session.py

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from app.services.clients.schedule_api_client import RequestFailure
from app.services.core.favorites import FavoriteSet
from app.services.core.schedule_repository import ScheduleRepository, load_schedule_with_week_fallback
from app.services.core.schedule_view import filter_groups
from app.services.parsers.schedule_models import Group, ScheduleDay
from app.services.utils.enums import ScheduleLoadStatus

log = logging.getLogger(__name__)

GROUPS_ERROR = "Ошибка загрузки групп"
SCHEDULE_ERROR = "Ошибка загрузки расписания"


@dataclass(frozen=True)
class LoadTicket:
    """Квитанция на одну загрузку: по ней проверяем, актуален ли ещё результат."""
    group: Group
    generation: int


class ScheduleSession:
    """
    Состояние экрана расписания одного пользователя: список групп,
    выбранная группа, загруженное расписание и избранное.
    """

    def __init__(self, repository: ScheduleRepository, favorites: Optional[FavoriteSet] = None):
        self.repository = repository
        self.favorites = favorites if favorites is not None else FavoriteSet()
        self.groups: List[Group] = []
        self.selected_group: Optional[Group] = None
        self.schedule: List[ScheduleDay] = []
        self.status = ScheduleLoadStatus.IDLE
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def is_loading(self) -> bool:
        return self.status == ScheduleLoadStatus.LOADING

    # --- Группы ---

    def refresh_groups(self) -> List[Group]:
        try:
            self.groups = self.repository.load_groups()
            self.error = None
        except RequestFailure as e:
            log.error(f"Не удалось загрузить список групп: {e}")
            self.groups = []
            self.error = GROUPS_ERROR
        return self.groups

    def search_groups(self, query: str) -> List[Group]:
        return filter_groups(self.groups, query)

    def select_group(self, group: Optional[Group], toggle: bool = False) -> Optional[Group]:
        """
        Выбор группы сбрасывает показанное расписание. С toggle=True
        повторный выбор той же группы снимает выбор (как в избранном).
        """
        if toggle and group is not None and group == self.selected_group:
            group = None
        if group != self.selected_group:
            self._generation += 1
            self.schedule = []
            self.status = ScheduleLoadStatus.IDLE
            self.error = None
        self.selected_group = group
        return group

    # --- Расписание ---

    def begin_schedule_load(self) -> Optional[LoadTicket]:
        """Возвращает None, если группа не выбрана или загрузка уже идёт."""
        if self.selected_group is None:
            return None
        if self.is_loading:
            log.info(f"Загрузка расписания '{self.selected_group}' уже идёт, повторный запрос пропущен.")
            return None
        self._generation += 1
        self.status = ScheduleLoadStatus.LOADING
        self.error = None
        return LoadTicket(self.selected_group, self._generation)

    def _is_current(self, ticket: LoadTicket) -> bool:
        if ticket.generation != self._generation:
            log.info(f"Результат загрузки '{ticket.group}' устарел и отброшен.")
            return False
        return True

    def complete_schedule_load(self, ticket: LoadTicket, schedule: List[ScheduleDay]) -> bool:
        if not self._is_current(ticket):
            return False
        self.schedule = schedule
        self.status = ScheduleLoadStatus.LOADED
        return True

    def fail_schedule_load(self, ticket: LoadTicket) -> bool:
        if not self._is_current(ticket):
            return False
        self.schedule = []
        self.status = ScheduleLoadStatus.FAILED
        self.error = SCHEDULE_ERROR
        return True

    def _settle(self, ticket: LoadTicket):
        # Непредвиденная ошибка не должна оставить сессию в LOADING навсегда
        if self.status == ScheduleLoadStatus.LOADING and ticket.generation == self._generation:
            self.status = ScheduleLoadStatus.IDLE

    def load_schedule(self, today: Optional[date] = None) -> bool:
        """
        Загружает расписание выбранной группы. Возвращает True, только если
        результат (расписание или ошибка) применён к сессии.
        """
        ticket = self.begin_schedule_load()
        if ticket is None:
            return False
        try:
            schedule = load_schedule_with_week_fallback(self.repository, ticket.group, today)
        except RequestFailure as e:
            log.error(f"Расписание '{ticket.group}' не загружено: {e}")
            return self.fail_schedule_load(ticket)
        else:
            return self.complete_schedule_load(ticket, schedule)
        finally:
            self._settle(ticket)

    async def load_schedule_async(self, today: Optional[date] = None) -> bool:
        """То же, что load_schedule, но сетевой запрос уходит в отдельный поток."""
        ticket = self.begin_schedule_load()
        if ticket is None:
            return False
        try:
            schedule = await asyncio.to_thread(load_schedule_with_week_fallback, self.repository, ticket.group, today)
        except RequestFailure as e:
            log.error(f"Расписание '{ticket.group}' не загружено: {e}")
            return self.fail_schedule_load(ticket)
        else:
            return self.complete_schedule_load(ticket, schedule)
        finally:
            self._settle(ticket)

    # --- Избранное ---

    def toggle_favorite(self, group: Optional[Group] = None, clear_selection_on_remove: bool = False) -> bool:
        target = group or self.selected_group
        if target is None:
            raise ValueError("Не выбрана группа для избранного")
        is_favorite = self.favorites.toggle(target)
        if not is_favorite and clear_selection_on_remove and target == self.selected_group:
            self.select_group(None)
        return is_favorite

    def is_favorite(self, group: Group) -> bool:
        return self.favorites.is_favorite(group)
