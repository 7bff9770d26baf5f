import random
from datetime import datetime, timedelta

import pytest

from db.extensions import db
from models.booking import Booking, BookingStatus
from models.gamingSession import GamingSession, SessionStatus
from models.station import StationType
from services.auth_service import Actor
from services.booking_service import BookingService, parse_start_time
from services.exceptions import ConflictError, ValidationError

NOW = datetime(2026, 3, 1, 12, 0)


def iso(dt):
    return dt.isoformat() + 'Z'


def book(start, duration=60, station_type=StationType.STANDARD_PS5, **kwargs):
    return BookingService.create_booking(station_type, iso(start), duration, now=NOW, **kwargs)


def confirmed(station, start, end):
    db.session.add(Booking(station_id=station.id, start_time=start, end_time=end,
                           duration_minutes=int((end - start).total_seconds() // 60),
                           status=BookingStatus.CONFIRMED))
    db.session.commit()


def test_create_booking_inserts_pending_booking(make_station):
    station = make_station(price_solo=40)
    start = NOW + timedelta(hours=2)

    booking = book(start, 90, actor=Actor('member-1', 'member'))

    assert booking.status == BookingStatus.PENDING
    assert booking.station_id == station.id
    assert booking.start_time == start
    assert booking.end_time == start + timedelta(minutes=90)
    assert booking.duration_minutes == 90
    assert booking.cost == 60.0
    assert booking.member_id == 'member-1'
    assert booking.member_ids == ['member-1']


def test_explicit_participants_and_anonymous_booking(make_station):
    make_station()
    booking = book(NOW + timedelta(hours=1), participant_ids=['a', 'b', 'a'])
    assert booking.member_id is None
    assert booking.member_ids == ['a', 'b']


def test_group_rate_is_never_used_for_bookings(make_station):
    make_station(price_solo=40, price_group=55)
    assert book(NOW + timedelta(hours=1), 60).cost == 40.0


@pytest.mark.parametrize('station_type', ['', None, 'ps4', 'XBOX'])
def test_unknown_station_type_is_rejected(make_station, station_type):
    make_station()
    with pytest.raises(ValidationError):
        BookingService.create_booking(station_type, iso(NOW + timedelta(hours=1)), 60, now=NOW)


@pytest.mark.parametrize('duration', [29, 481, 0, 'abc', None])
def test_duration_out_of_bounds_is_rejected(make_station, duration):
    make_station()
    with pytest.raises(ValidationError):
        book(NOW + timedelta(hours=1), duration)
    assert Booking.query.count() == 0


@pytest.mark.parametrize('duration', [30, 480])
def test_duration_bounds_are_inclusive(make_station, duration):
    make_station()
    assert book(NOW + timedelta(hours=1), duration).duration_minutes == duration


def test_start_time_needs_fifteen_minutes_lead(make_station):
    make_station()
    with pytest.raises(ValidationError):
        book(NOW + timedelta(minutes=14))
    assert book(NOW + timedelta(minutes=15)).start_time == NOW + timedelta(minutes=15)


@pytest.mark.parametrize('start', ['', '   ', 'tomorrow at noon', '2026-13-40T25:00'])
def test_bad_start_time_is_rejected(make_station, start):
    make_station()
    with pytest.raises(ValidationError):
        BookingService.create_booking(StationType.STANDARD_PS5, start, 60, now=NOW)


def test_parse_start_time_converts_local_and_offset_times_to_utc():
    assert parse_start_time('2026-01-15T10:00:00', 'Europe/Paris') == datetime(2026, 1, 15, 9, 0)
    assert parse_start_time('2026-01-15T10:00:00+02:00', 'Europe/Paris') == datetime(2026, 1, 15, 8, 0)
    assert parse_start_time('2026-01-15T10:00:00Z', 'Europe/Paris') == datetime(2026, 1, 15, 10, 0)


def test_booking_ending_at_start_does_not_conflict(make_station):
    station = make_station()
    confirmed(station, datetime(2026, 3, 1, 13, 0), datetime(2026, 3, 1, 14, 0))

    booking = book(datetime(2026, 3, 1, 14, 0))
    assert booking.station_id == station.id


def test_overlapping_booking_conflicts_unless_another_station_is_free(make_station):
    first = make_station('PS5-1')
    confirmed(first, datetime(2026, 3, 1, 13, 0), datetime(2026, 3, 1, 14, 0))

    with pytest.raises(ConflictError):
        book(datetime(2026, 3, 1, 13, 30))
    assert Booking.query.count() == 1

    second = make_station('PS5-2')
    assert book(datetime(2026, 3, 1, 13, 30)).station_id == second.id


def test_pending_bookings_block_and_cancelled_do_not(make_station):
    station = make_station()
    first = book(datetime(2026, 3, 1, 15, 0))
    with pytest.raises(ConflictError):
        book(datetime(2026, 3, 1, 15, 30))

    first.status = BookingStatus.CANCELLED
    db.session.commit()
    assert book(datetime(2026, 3, 1, 15, 30)).station_id == station.id


def test_other_station_types_do_not_help(make_station):
    make_station('PS5-1')
    make_station('XBOX-1', station_type=StationType.XBOX, price_solo=20)
    book(datetime(2026, 3, 1, 16, 0))
    with pytest.raises(ConflictError):
        book(datetime(2026, 3, 1, 16, 0))


def test_active_session_blocks_its_projected_window(make_station):
    station = make_station()
    db.session.add(GamingSession(station_id=station.id, started_at=NOW - timedelta(minutes=10),
                                 status=SessionStatus.ACTIVE))
    db.session.commit()

    # projected to end at NOW + 50 minutes with the 60 minute default
    with pytest.raises(ConflictError):
        book(NOW + timedelta(minutes=30))
    assert book(NOW + timedelta(minutes=50)).station_id == station.id


def test_no_station_of_type_is_a_conflict(make_station):
    make_station(station_type=StationType.XBOX)
    with pytest.raises(ConflictError):
        book(NOW + timedelta(hours=1), station_type=StationType.PREMIUM_PS5)
    assert Booking.query.count() == 0


def test_repeated_requests_spread_over_free_stations(make_station):
    ids = {make_station(f'PS5-{n}').id for n in range(3)}
    rng = random.Random(3)
    used = set()
    for day in range(30):
        start = NOW + timedelta(days=day + 1)
        used.add(book(start, rng=rng).station_id)
    assert used == ids
