# app/api_routes.py

import logging
from flask import Blueprint, current_app, jsonify, request

from .services.clients.schedule_api_client import RequestFailure
from .services.core.schedule_repository import load_schedule_with_week_fallback
from .services.core.schedule_view import build_schedule_view, filter_groups
from .utils import make_json_serializable


bp = Blueprint('api', __name__, url_prefix='/api')
log = logging.getLogger(__name__)


def _repository():
    return current_app.extensions['schedule_repository']


def _favorites():
    return current_app.extensions['favorites']


@bp.route('/groups')
def get_groups():
    """Список групп, с необязательным поиском по ?q=."""
    query = request.args.get('q', '')
    try:
        groups = _repository().load_groups()
    except RequestFailure as e:
        log.error(f"API: не удалось получить список групп: {e}")
        return jsonify({"error": "Не удалось загрузить список групп"}), 502

    return jsonify(filter_groups(groups, query))


@bp.route('/schedule/<group>')
def get_schedule(group):
    """Расписание группы с уже вычисленными полями пар."""
    start = request.args.get('start', '')
    end = request.args.get('end', '')
    log.info(f"API request for schedule: '{group}' ({start or '-'}..{end or '-'})")

    try:
        if start or end:
            schedule = _repository().load_schedule(group, start, end)
        else:
            schedule = load_schedule_with_week_fallback(_repository(), group)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except RequestFailure as e:
        log.error(f"API: расписание '{group}' не получено: {e}")
        return jsonify({"error": "Ошибка загрузки расписания"}), 502

    return jsonify(make_json_serializable(build_schedule_view(schedule)))


@bp.route('/favorites')
def get_favorites():
    return jsonify(_favorites().sorted_groups())


@bp.route('/favorites/<group>', methods=['POST'])
def toggle_favorite(group):
    is_favorite = _favorites().toggle(group)
    return jsonify({"group": group, "favorite": is_favorite})
