# app/services/utils/enums.py

from enum import Enum, auto

class ScheduleLoadStatus(Enum):
    """Состояние загрузки расписания в сессии."""
    IDLE = auto()     # Ещё ничего не загружали
    LOADING = auto()  # Запрос в процессе
    LOADED = auto()   # Расписание получено
    FAILED = auto()   # Оба сервера не ответили
