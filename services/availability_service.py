# services/availability_service.py

import random
from collections import namedtuple
from datetime import timedelta

from models.booking import Booking, BookingStatus
from models.gamingSession import GamingSession, SessionStatus
from models.station import StationStatus

# One occupied window on a station; end is exclusive.
BusyInterval = namedtuple('BusyInterval', ['station_id', 'start', 'end'])


def intervals_overlap(a_start, a_end, b_start, b_end):
    """Half-open overlap: [10:00, 11:00) and [11:00, 12:00) do not overlap."""
    return a_start < b_end and a_end > b_start


class AvailabilityService:

    @staticmethod
    def busy_station_ids(window_start, window_end, conflicts):
        return {
            c.station_id for c in conflicts
            if intervals_overlap(c.start, c.end, window_start, window_end)
        }

    @staticmethod
    def find_available_station(station_type, window_start, window_end, stations, conflicts, rng=None):
        """
        Pick a random free station of ``station_type`` for the window, or
        ``None`` when every candidate is busy. Random choice spreads repeated
        identical requests over the free stations.
        """
        candidates = [
            s for s in stations
            if s.station_type == station_type and s.status != StationStatus.MAINTENANCE
        ]
        busy = AvailabilityService.busy_station_ids(window_start, window_end, conflicts)
        available = [s for s in candidates if s.id not in busy]
        if not available:
            return None
        return (rng or random).choice(available)

    @staticmethod
    def load_conflicts(window_start, window_end, now, default_session_minutes, station_ids=None):
        """
        Blocking bookings that overlap the window, plus every active session.
        An active session has no end yet, so it is projected to end after
        ``default_session_minutes`` of billable time, and never before ``now``.
        """
        booking_query = Booking.query.filter(
            Booking.status.in_(BookingStatus.BLOCKING),
            Booking.start_time < window_end,
            Booking.end_time > window_start,
        )
        session_query = GamingSession.query.filter(GamingSession.status == SessionStatus.ACTIVE)
        if station_ids is not None:
            booking_query = booking_query.filter(Booking.station_id.in_(station_ids))
            session_query = session_query.filter(GamingSession.station_id.in_(station_ids))

        conflicts = [
            BusyInterval(b.station_id, b.start_time, b.end_time)
            for b in booking_query.all()
        ]
        for session in session_query.all():
            projected_end = session.effective_started_at + timedelta(minutes=default_session_minutes)
            if session.paused_at is not None:
                # paused time is not billable, so the projection slides with it
                projected_end += now - session.paused_at
            conflicts.append(BusyInterval(session.station_id, session.started_at, max(now, projected_end)))
        return conflicts
