# models/gamingSession.py
from datetime import datetime, timedelta
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from db.extensions import db
from models.sessionMember import SessionMember


class SessionStatus:
    ACTIVE = 'active'
    COMPLETED = 'completed'


class PaymentStatus:
    PAID = 'paid'
    UNPAID = 'unpaid'

    ALL = (PAID, UNPAID)


class GamingSession(db.Model):
    """
    One occupancy of a station. Pausing freezes elapsed time; resuming adds
    the paused span to ``paused_seconds`` so the effective start moves forward.
    """
    __tablename__ = 'gaming_sessions'

    id = Column(Integer, primary_key=True)
    station_id = Column(Integer, ForeignKey('stations.id'), nullable=False, index=True)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    paused_at = Column(DateTime, nullable=True)
    paused_seconds = Column(Integer, nullable=False, default=0)
    use_group_rate = Column(Boolean, nullable=False, default=False)

    ended_at = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    base_cost = Column(Float, nullable=False, default=0)
    extra_items_cost = Column(Float, nullable=False, default=0)
    total_cost = Column(Float, nullable=False, default=0)
    payment_status = Column(String(16), nullable=False, default=PaymentStatus.UNPAID)
    points_earned = Column(Integer, nullable=False, default=0)
    status = Column(String(16), nullable=False, default=SessionStatus.ACTIVE, index=True)
    created_by = Column(String(64), nullable=True)

    station = relationship('Station', foreign_keys=[station_id])
    members = relationship(
        'SessionMember',
        order_by=SessionMember.position,
        cascade='all, delete-orphan',
        lazy='selectin',
    )

    def __repr__(self):
        return f"<GamingSession id={self.id} station_id={self.station_id} status={self.status}>"

    @property
    def member_ids(self):
        return [m.member_id for m in self.members]

    @property
    def is_active(self):
        return self.status == SessionStatus.ACTIVE

    @property
    def is_paused(self):
        return self.paused_at is not None

    @property
    def effective_started_at(self):
        return self.started_at + timedelta(seconds=self.paused_seconds or 0)

    def set_members(self, member_ids):
        self.members = [
            SessionMember(member_id=member_id, position=position)
            for position, member_id in enumerate(member_ids)
        ]

    def elapsed_seconds(self, now):
        """Billable seconds so far; frozen at ``paused_at`` while paused."""
        reference = self.paused_at if self.paused_at is not None else now
        elapsed = (reference - self.effective_started_at).total_seconds()
        return max(0, int(elapsed))

    def to_dict(self):
        return {
            'id': self.id,
            'station_id': self.station_id,
            'member_ids': self.member_ids,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'paused_at': self.paused_at.isoformat() if self.paused_at else None,
            'ended_at': self.ended_at.isoformat() if self.ended_at else None,
            'duration_minutes': self.duration_minutes,
            'base_cost_mad': self.base_cost,
            'extra_items_mad': self.extra_items_cost,
            'cost_mad': self.total_cost,
            'payment_status': self.payment_status,
            'points_earned': self.points_earned,
            'status': self.status,
        }


Index('ix_gaming_sessions_station_status', GamingSession.station_id, GamingSession.status)
