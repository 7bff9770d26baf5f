# controllers/dashboard_controller.py

from flask import Blueprint, request, jsonify, current_app, g

from services.auth_service import admin_required
from services.exceptions import ValidationError
from services.session_service import SessionService
from services.settings_service import SettingsService

dashboard_bp = Blueprint('dashboard', __name__)


def _station_id(data):
    station_id = data.get('stationId')
    if station_id in (None, ''):
        raise ValidationError("stationId is required")
    try:
        return int(station_id)
    except (TypeError, ValueError):
        raise ValidationError("stationId must be an integer")


def _member_list(value):
    """Keep only non-blank string ids; anything that isn't a list means 'not given'."""
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str) and v.strip()]


@dashboard_bp.route('/dashboard/stations', methods=['GET'])
@admin_required
def list_stations():
    return jsonify(SessionService.list_stations()), 200


@dashboard_bp.route('/dashboard/stations/start-session', methods=['POST'])
@admin_required
def start_session():
    data = request.get_json(silent=True) or {}
    station_id = _station_id(data)

    client_ids = _member_list(data.get('clientIds')) or []
    legacy_id = data.get('clientId')
    if not client_ids and isinstance(legacy_id, str) and legacy_id.strip():
        client_ids = [legacy_id]

    session = SessionService.start(
        station_id,
        participant_ids=client_ids,
        use_group_rate=bool(data.get('useGroupRate', False)),
        actor=g.actor,
    )
    return jsonify({'sessionId': session.id}), 200


@dashboard_bp.route('/dashboard/stations/pause-session', methods=['POST'])
@admin_required
def pause_session():
    data = request.get_json(silent=True) or {}
    SessionService.pause(_station_id(data))
    return jsonify({'ok': True}), 200


@dashboard_bp.route('/dashboard/stations/resume-session', methods=['POST'])
@admin_required
def resume_session():
    data = request.get_json(silent=True) or {}
    SessionService.resume(_station_id(data))
    return jsonify({'ok': True}), 200


@dashboard_bp.route('/dashboard/stations/stop-session', methods=['POST'])
@admin_required
def stop_session():
    data = request.get_json(silent=True) or {}
    station_id = _station_id(data)

    use_group_rate = data.get('useGroupRate')
    result = SessionService.stop(
        station_id,
        duration_minutes=data.get('durationMinutes'),
        member_ids=_member_list(data.get('memberIds')),
        extra_items_cost=data.get('extraItemsMad') or 0,
        total_cost=data.get('totalCostMad'),
        payment_status=data.get('paymentStatus'),
        use_group_rate=bool(use_group_rate) if use_group_rate is not None else None,
    )

    response = {'ok': True}
    if result.session is not None:
        response['session'] = result.session.to_dict()
        response['points'] = dict(result.allocation)
    else:
        current_app.logger.debug(f"Stop on station {station_id} was a no-op")
    return jsonify(response), 200


@dashboard_bp.route('/dashboard/sessions/<int:session_id>', methods=['PATCH'])
@admin_required
def update_session(session_id):
    data = request.get_json(silent=True) or {}
    session = SessionService.update_payment_status(session_id, data.get('payment_status'))
    return jsonify({'ok': True, 'payment_status': session.payment_status}), 200


@dashboard_bp.route('/dashboard/points-config', methods=['PATCH'])
@admin_required
def update_points_config():
    data = request.get_json(silent=True) or {}
    config = SettingsService.update_points_config(data)
    return jsonify({'pointsConfig': config.to_dict()}), 200
