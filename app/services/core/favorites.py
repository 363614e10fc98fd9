# app/services/core/favorites.py

import logging
from typing import List, Set

from app.services.parsers.schedule_models import Group

log = logging.getLogger(__name__)


class FavoriteSet:
    """
    Избранные группы текущей сессии. Живут только в памяти
    и пропадают при перезапуске процесса.
    """

    def __init__(self):
        self._groups: Set[Group] = set()

    def toggle(self, group: Group) -> bool:
        """Добавляет группу, если её нет, иначе убирает. Возвращает новое состояние."""
        if group in self._groups:
            self._groups.remove(group)
            log.info(f"Группа '{group}' удалена из избранного")
            return False
        self._groups.add(group)
        log.info(f"Группа '{group}' добавлена в избранное")
        return True

    def is_favorite(self, group: Group) -> bool:
        return group in self._groups

    def sorted_groups(self) -> List[Group]:
        return sorted(self._groups)

    def __contains__(self, group) -> bool:
        return group in self._groups

    def __len__(self) -> int:
        return len(self._groups)
