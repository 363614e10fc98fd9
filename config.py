import os
from dotenv import load_dotenv

# Определяем путь к файлу .env.

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

# Используем BASE_DIR для поиска файла .env
load_dotenv(os.path.join(BASE_DIR, '.env'))


class Config:
    """
    Класс для хранения конфигурационных переменных.
    Загружает переменные из окружения (из файла .env).
    """
    # --- Сервер расписания: основной и резервный адрес ---
    SCHEDULE_API_PRIMARY_URL = os.getenv('SCHEDULE_API_PRIMARY_URL', 'http://10.0.2.2:5085/')
    SCHEDULE_API_FALLBACK_URL = os.getenv('SCHEDULE_API_FALLBACK_URL', 'http://192.168.0.12:5085/')

    # Таймаут одной попытки запроса, в секундах
    SCHEDULE_API_TIMEOUT = float(os.getenv('SCHEDULE_API_TIMEOUT', 5))

    SCHEDULE_GROUPS_PATH = os.getenv('SCHEDULE_GROUPS_PATH', 'api/groups')
    SCHEDULE_PATH = os.getenv('SCHEDULE_PATH', 'api/schedule/group/{group}')

    # Подпись занятия, у которого не удалось определить предмет
    LESSON_PLACEHOLDER = os.getenv('LESSON_PLACEHOLDER', 'Занятие')

    # --- Telegram Bot Configuration ---
    TELEGRAM_BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')

    LOGS_DIR = os.getenv('LOGS_DIR', os.path.join(BASE_DIR, 'logs'))

    if not SCHEDULE_API_PRIMARY_URL or not SCHEDULE_API_FALLBACK_URL:
        raise ValueError("Необходимо задать SCHEDULE_API_PRIMARY_URL и SCHEDULE_API_FALLBACK_URL в файле .env")
