import os
from flask import Flask
import logging
from logging.handlers import RotatingFileHandler
from config import Config

from app.services.core.favorites import FavoriteSet
from app.services.core.schedule_repository import ScheduleRepository


def create_app(repository: ScheduleRepository = None, test_config: dict = None):
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if test_config:
        app.config.update(test_config)

    if not app.debug and not app.testing:
        logs_dir = Config.LOGS_DIR
        log_file = os.path.join(logs_dir, 'app.log')

        if not os.path.exists(logs_dir):
            os.makedirs(logs_dir)

        file_handler = RotatingFileHandler(log_file, maxBytes=10240, backupCount=10)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Приложение College Schedule запущено')

    # Репозиторий и избранное живут, пока жив процесс
    app.extensions['schedule_repository'] = repository or ScheduleRepository()
    app.extensions['favorites'] = FavoriteSet()

    from . import api_routes
    app.register_blueprint(api_routes.bp)

    return app
