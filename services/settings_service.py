# services/settings_service.py

from collections import namedtuple

from flask import current_app

from db.extensions import db
from models.businessSettings import BusinessSettings
from models.pointsConfig import PointsConfig
from services.exceptions import ValidationError
from services.pricing_service import PricingService

LoungeSettings = namedtuple('LoungeSettings', [
    'session_alerts',
    'default_session_minutes',
    'pricing_by_type',
])


def _non_negative_int(value):
    try:
        return max(0, int(float(value or 0)))
    except (TypeError, ValueError):
        raise ValidationError(f"Expected a number, got {value!r}")


class SettingsService:
    """Reads the singleton settings rows and fills in defaults in one place."""

    @staticmethod
    def load_lounge_settings():
        row = db.session.get(BusinessSettings, 1)
        config = current_app.config

        session_alerts = row.session_alerts if row and row.session_alerts is not None \
            else config['DEFAULT_SESSION_ALERTS']
        default_minutes = row.default_session_minutes if row and row.default_session_minutes \
            else config['DEFAULT_SESSION_MINUTES']

        return LoungeSettings(
            session_alerts=bool(session_alerts),
            default_session_minutes=int(default_minutes),
            pricing_by_type=PricingService.pricing_by_type(row),
        )

    @staticmethod
    def load_points_per_hour():
        """Points earned per hour played, falling back to DEFAULT_POINTS_PER_HOUR without a row."""
        row = db.session.get(PointsConfig, 1)
        if row is None:
            return max(0, current_app.config['DEFAULT_POINTS_PER_HOUR'])
        return max(0, row.points_per_hour_played or 0)

    @staticmethod
    def update_points_config(data):
        row = db.session.get(PointsConfig, 1)
        if row is None:
            row = PointsConfig(id=1)
            db.session.add(row)

        row.points_per_hour_played = _non_negative_int(data.get('pointsPerHourPlayed'))
        row.tournament_win_bonus = _non_negative_int(data.get('tournamentWinBonus'))
        row.birthday_bonus = _non_negative_int(data.get('birthdayBonus'))
        row.yearly_bonus = _non_negative_int(data.get('yearlyBonus'))

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating points config: {e}")
            raise

        current_app.logger.info(f"Points config updated: {row.to_dict()}")
        return row
