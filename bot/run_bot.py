import asyncio
import logging
import sys
import os

# Добавляем корневую папку проекта в путь, чтобы можно было импортировать config и app
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config
from bot.bot_service import main


log = logging.getLogger(__name__)

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)

    if not Config.TELEGRAM_BOT_TOKEN:
        log.error("TELEGRAM_BOT_TOKEN должен быть установлен в .env")
        sys.exit(1)

    asyncio.run(main())
