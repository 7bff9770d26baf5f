# services/booking_service.py

import math
from datetime import datetime, timedelta

import pytz
from flask import current_app

from db.extensions import db
from models.booking import Booking, BookingStatus
from models.station import Station, StationType
from services.availability_service import AvailabilityService
from services.exceptions import ConflictError, ValidationError
from services.points_service import unique_ids
from services.pricing_service import PricingService
from services.settings_service import SettingsService


def parse_start_time(value, tz_name):
    """
    ISO-8601 string or datetime -> naive UTC datetime. Values without an
    offset are taken as lounge local time.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = value.strip() if isinstance(value, str) else ''
        if not raw:
            raise ValidationError("Start date and time are required")
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError("Invalid start date/time")

    if parsed.tzinfo is None:
        parsed = pytz.timezone(tz_name).localize(parsed)
    return parsed.astimezone(pytz.utc).replace(tzinfo=None)


def parse_duration(value):
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Duration must be a number of minutes")
    if math.isnan(minutes) or math.isinf(minutes):
        raise ValidationError("Duration must be a number of minutes")
    return int(math.floor(minutes))


class BookingService:

    @staticmethod
    def create_booking(station_type, start_time, duration_minutes, participant_ids=None,
                       actor=None, now=None, rng=None):
        config = current_app.config
        now = now or datetime.utcnow()

        station_type = station_type.strip() if isinstance(station_type, str) else ''
        if station_type not in StationType.ALL:
            raise ValidationError("Please choose PS5 Standard, PS5 Premium, or Xbox.")

        if start_time is None or (isinstance(start_time, str) and not start_time.strip()):
            raise ValidationError("Start date and time are required")

        duration = parse_duration(duration_minutes)
        min_duration = config['BOOKING_MIN_DURATION_MINUTES']
        max_duration = config['BOOKING_MAX_DURATION_MINUTES']
        if duration < min_duration or duration > max_duration:
            raise ValidationError(
                f"Duration must be between {min_duration} minutes and {max_duration // 60} hours"
            )

        window_start = parse_start_time(start_time, config['LOUNGE_TIMEZONE'])
        lead = config['BOOKING_MIN_LEAD_MINUTES']
        if window_start < now + timedelta(minutes=lead):
            raise ValidationError(f"Start time must be at least {lead} minutes from now")
        window_end = window_start + timedelta(minutes=duration)

        members = unique_ids(participant_ids)
        if not members and actor is not None:
            members = [actor.id]

        try:
            # Row locks serialize concurrent bookings for the same type (no-op on SQLite)
            stations = Station.query.filter(Station.station_type == station_type) \
                .order_by(Station.id).with_for_update().all()
            if not stations:
                raise ConflictError("No stations available for this console type. Try another time or type.")

            settings = SettingsService.load_lounge_settings()
            conflicts = AvailabilityService.load_conflicts(
                window_start,
                window_end,
                now,
                settings.default_session_minutes,
                station_ids=[s.id for s in stations],
            )
            station = AvailabilityService.find_available_station(
                station_type, window_start, window_end, stations, conflicts, rng=rng
            )
            if station is None:
                raise ConflictError(
                    "All stations of this type are booked for the chosen time. Try another time or console type."
                )

            booking = Booking(
                member_id=actor.id if actor else None,
                station_id=station.id,
                start_time=window_start,
                end_time=window_end,
                duration_minutes=duration,
                cost=PricingService.compute_cost(PricingService.select_rate(station), duration),
                status=BookingStatus.PENDING,
                created_at=now,
            )
            booking.set_members(members)
            db.session.add(booking)
            db.session.commit()
        except ConflictError as e:
            db.session.rollback()
            current_app.logger.info(f"Booking rejected for {station_type} at {window_start.isoformat()}: {e.message}")
            raise
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error creating booking: {e}")
            raise

        current_app.logger.info(
            f"Booking {booking.id} created on station {station.id} "
            f"[{window_start.isoformat()}, {window_end.isoformat()}) cost={booking.cost:.2f}"
        )
        return booking
