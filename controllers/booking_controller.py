# controllers/booking_controller.py

from flask import Blueprint, request, jsonify

from services.auth_service import AuthService
from services.booking_service import BookingService
from services.settings_service import SettingsService

booking_bp = Blueprint('booking', __name__)


@booking_bp.route('/book', methods=['POST'])
def create_booking():
    data = request.get_json(silent=True) or {}
    actor = AuthService.get_current_user()

    participant_ids = data.get('participant_ids')
    if not isinstance(participant_ids, list):
        participant_ids = None

    booking = BookingService.create_booking(
        data.get('station_type'),
        data.get('start_time'),
        data.get('duration_minutes'),
        participant_ids=participant_ids,
        actor=actor,
    )
    return jsonify({
        'ok': True,
        'id': booking.id,
        'station_name': booking.station.name,
        'start_time': booking.start_time.isoformat() + 'Z',
        'end_time': booking.end_time.isoformat() + 'Z',
        'duration_minutes': booking.duration_minutes,
        'cost_mad': booking.cost,
    }), 201


@booking_bp.route('/pricing', methods=['GET'])
def pricing():
    settings = SettingsService.load_lounge_settings()
    return jsonify({'pricing_by_type': settings.pricing_by_type}), 200
