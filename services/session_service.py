# services/session_service.py

from collections import namedtuple
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from flask import current_app

from db.extensions import db
from models.gamingSession import GamingSession, SessionStatus, PaymentStatus
from models.profile import Profile, NO_NAME
from models.station import Station, StationStatus
from services.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from services.notification_service import NotificationService
from services.points_service import PointsService, unique_ids
from services.pricing_service import PricingService, round_money
from services.settings_service import SettingsService

# recovered=True means the station pointer was stale and the station was just freed
StopResult = namedtuple('StopResult', ['session', 'recovered', 'allocation'])


def _optional_number(value, field):
    if value is None or value == '':
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number")
    return number


class SessionService:
    """
    Station occupancy: Free -> Running <-> Paused -> Completed (station Free again).

    Every transition is one transaction. Station claims and releases are
    conditional UPDATEs checked by rowcount, so two operators racing on the
    same station cannot both win.
    """

    @staticmethod
    def _get_station(station_id):
        station = db.session.get(Station, station_id)
        if station is None:
            raise NotFoundError("Station not found")
        return station

    @staticmethod
    def _active_session_for(station):
        if station.current_session_id is None:
            return None
        session = db.session.get(GamingSession, station.current_session_id)
        if session is None or not session.is_active:
            return None
        return session

    @staticmethod
    def _release_station(station_id, now, session_id=None):
        query = Station.query.filter(Station.id == station_id)
        if session_id is not None:
            query = query.filter(Station.current_session_id == session_id)
        return query.update(
            {
                Station.status: StationStatus.FREE,
                Station.current_session_id: None,
                Station.updated_at: now,
            },
            synchronize_session='fetch',
        )

    @staticmethod
    def start(station_id, participant_ids=None, use_group_rate=False, actor=None, now=None):
        now = now or datetime.utcnow()
        station = SessionService._get_station(station_id)

        if station.current_session_id is not None or station.status != StationStatus.FREE:
            raise ConflictError("Station is not free")

        try:
            session = GamingSession(
                station_id=station.id,
                started_at=now,
                paused_seconds=0,
                use_group_rate=bool(use_group_rate),
                status=SessionStatus.ACTIVE,
                payment_status=PaymentStatus.UNPAID,
                created_by=actor.id if actor else None,
            )
            session.set_members(unique_ids(participant_ids))
            db.session.add(session)
            db.session.flush()

            claimed = Station.query.filter(
                Station.id == station.id,
                Station.current_session_id.is_(None),
                Station.status == StationStatus.FREE,
            ).update(
                {
                    Station.status: StationStatus.OCCUPIED,
                    Station.current_session_id: session.id,
                    Station.updated_at: now,
                },
                synchronize_session='fetch',
            )
            if claimed != 1:
                raise ConflictError("Station is not free")

            db.session.commit()
        except ConflictError:
            db.session.rollback()
            current_app.logger.warning(f"Start on station {station_id} lost the race to another session")
            raise
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error starting session on station {station_id}: {e}")
            raise

        current_app.logger.info(
            f"Session {session.id} started on station {station.id} "
            f"with {len(session.members)} member(s), group_rate={session.use_group_rate}"
        )
        return session

    @staticmethod
    def pause(station_id, now=None):
        now = now or datetime.utcnow()
        station = SessionService._get_station(station_id)
        session = SessionService._active_session_for(station)
        if session is None:
            raise InvalidStateError("No active session on this station")
        if session.is_paused:
            raise InvalidStateError("Session is already paused")

        paused_at = max(now, session.started_at)
        try:
            updated = GamingSession.query.filter(
                GamingSession.id == session.id,
                GamingSession.status == SessionStatus.ACTIVE,
                GamingSession.paused_at.is_(None),
            ).update({GamingSession.paused_at: paused_at}, synchronize_session='fetch')
            if updated != 1:
                raise InvalidStateError("Session is already paused")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Session {session.id} paused at {paused_at.isoformat()}")
        return session

    @staticmethod
    def resume(station_id, now=None):
        now = now or datetime.utcnow()
        station = SessionService._get_station(station_id)
        session = SessionService._active_session_for(station)
        if session is None:
            raise InvalidStateError("No active session on this station")
        if not session.is_paused:
            raise InvalidStateError("Session is not paused")

        paused_at = session.paused_at
        paused_for = max(0, int((now - paused_at).total_seconds()))
        try:
            updated = GamingSession.query.filter(
                GamingSession.id == session.id,
                GamingSession.status == SessionStatus.ACTIVE,
                GamingSession.paused_at == paused_at,
            ).update(
                {
                    GamingSession.paused_at: None,
                    GamingSession.paused_seconds: GamingSession.paused_seconds + paused_for,
                },
                synchronize_session='fetch',
            )
            if updated != 1:
                raise InvalidStateError("Session is not paused")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Session {session.id} resumed after {paused_for}s paused")
        return session

    @staticmethod
    def _resolve_duration(session, explicit, now):
        if explicit is not None and explicit >= 0:
            return int(explicit.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return session.elapsed_seconds(now) // 60

    @staticmethod
    def stop(station_id, duration_minutes=None, member_ids=None, extra_items_cost=0,
             total_cost=None, payment_status=PaymentStatus.UNPAID, use_group_rate=None, now=None):
        now = now or datetime.utcnow()
        payment_status = PaymentStatus.PAID if payment_status == PaymentStatus.PAID else PaymentStatus.UNPAID

        extras = _optional_number(extra_items_cost, 'extraItemsMad') or Decimal(0)
        if extras < 0:
            raise ValidationError("extraItemsMad cannot be negative")
        total_override = _optional_number(total_cost, 'totalCostMad')
        explicit_duration = _optional_number(duration_minutes, 'durationMinutes')

        station = SessionService._get_station(station_id)
        session = SessionService._active_session_for(station)

        if session is None:
            if station.current_session_id is None and station.status != StationStatus.OCCUPIED:
                # nothing running and nothing stale; leave maintenance or reserved stations alone
                current_app.logger.info(f"Stop on station {station.id} found nothing to stop")
                return StopResult(session=None, recovered=True, allocation={})

            # stale pointer: free the station
            try:
                SessionService._release_station(station.id, now)
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
            current_app.logger.info(f"Stop on station {station.id} found no active session, station freed")
            return StopResult(session=None, recovered=True, allocation={})

        try:
            claimed = GamingSession.query.filter(
                GamingSession.id == session.id,
                GamingSession.status == SessionStatus.ACTIVE,
            ).update({GamingSession.status: SessionStatus.COMPLETED}, synchronize_session='fetch')
            if claimed != 1:
                # another stop completed it between our read and this update
                db.session.rollback()
                SessionService._release_station(station.id, now, session_id=session.id)
                db.session.commit()
                return StopResult(session=None, recovered=True, allocation={})

            if member_ids is not None:
                session.set_members(unique_ids(member_ids))
            participants = session.member_ids

            duration = SessionService._resolve_duration(session, explicit_duration, now)
            if use_group_rate is not None:
                session.use_group_rate = bool(use_group_rate)
            rate = PricingService.select_rate(station, session.use_group_rate)
            base_cost = PricingService.compute_cost(rate, duration)
            extras_cost = round_money(extras)
            if total_override is not None and total_override >= 0:
                total = round_money(total_override)
            else:
                total = PricingService.compute_total(base_cost, extras_cost)

            points_per_hour = SettingsService.load_points_per_hour()
            allocation = PointsService.allocate_points(points_per_hour, duration, participants)
            PointsService.apply_allocation(allocation)

            session.ended_at = session.effective_started_at + timedelta(minutes=duration)
            session.duration_minutes = duration
            session.base_cost = base_cost
            session.extra_items_cost = extras_cost
            session.total_cost = total
            session.payment_status = payment_status
            session.points_earned = PointsService.total_points(points_per_hour, duration)
            session.paused_at = None

            released = SessionService._release_station(station.id, now, session_id=session.id)
            if released != 1:
                current_app.logger.warning(
                    f"Station {station.id} no longer points at session {session.id}, left untouched"
                )

            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error stopping session on station {station_id}: {e}")
            raise

        current_app.logger.info(
            f"Session {session.id} completed: {duration} min, {total:.2f} MAD, "
            f"{session.points_earned} points over {len(allocation)} member(s), {payment_status}"
        )

        if payment_status == PaymentStatus.UNPAID:
            try:
                if SettingsService.load_lounge_settings().session_alerts:
                    NotificationService.unpaid_session_ended(station.name)
            except Exception as e:
                current_app.logger.error(f"❌ Session alert for station {station.id} failed: {e}")

        return StopResult(session=session, recovered=False, allocation=allocation)

    @staticmethod
    def update_payment_status(session_id, payment_status):
        if payment_status not in PaymentStatus.ALL:
            raise ValidationError("payment_status must be 'paid' or 'unpaid'")

        session = db.session.get(GamingSession, session_id)
        if session is None:
            raise NotFoundError("Session not found")
        if session.status != SessionStatus.COMPLETED:
            raise ValidationError("Only completed sessions can have payment status updated")

        try:
            session.payment_status = payment_status
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return session

    @staticmethod
    def list_stations(now=None):
        """Stations by name, each with a summary of its running session."""
        now = now or datetime.utcnow()
        stations = Station.query.order_by(Station.name.asc()).all()

        session_ids = [s.current_session_id for s in stations if s.current_session_id]
        sessions = {}
        if session_ids:
            sessions = {
                s.id: s for s in GamingSession.query.filter(
                    GamingSession.id.in_(session_ids),
                    GamingSession.status == SessionStatus.ACTIVE,
                ).all()
            }

        member_ids = {m for s in sessions.values() for m in s.member_ids}
        names = {}
        if member_ids:
            names = {p.id: p.display_name for p in Profile.query.filter(Profile.id.in_(member_ids)).all()}

        rows = []
        for station in stations:
            row = station.to_dict()
            session = sessions.get(station.current_session_id)
            if session is None:
                row['current_session'] = None
            else:
                known = [names[m] for m in session.member_ids if names.get(m, NO_NAME) != NO_NAME]
                row['current_session'] = {
                    'id': session.id,
                    'player_name': ', '.join(known) if known else 'Walk-in',
                    'member_ids': session.member_ids,
                    'started_at': session.started_at.isoformat(),
                    'paused_at': session.paused_at.isoformat() if session.paused_at else None,
                    'elapsed_minutes': session.elapsed_seconds(now) // 60,
                    'use_group_rate': session.use_group_rate,
                }
            rows.append(row)
        return rows
