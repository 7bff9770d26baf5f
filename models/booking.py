# models/booking.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from db.extensions import db
from models.bookingMember import BookingMember


class BookingStatus:
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'

    # statuses that hold a station for their window
    BLOCKING = (PENDING, CONFIRMED)


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = Column(Integer, primary_key=True)
    member_id = Column(String(64), nullable=True, index=True)
    station_id = Column(Integer, ForeignKey('stations.id'), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    cost = Column(Float, nullable=False, default=0)
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    station = relationship('Station')
    members = relationship(
        'BookingMember',
        order_by=BookingMember.position,
        cascade='all, delete-orphan',
        lazy='selectin',
    )

    def __repr__(self):
        return f"<Booking id={self.id} station_id={self.station_id} status={self.status}>"

    @property
    def member_ids(self):
        return [m.member_id for m in self.members]

    def set_members(self, member_ids):
        self.members = [
            BookingMember(member_id=member_id, position=position)
            for position, member_id in enumerate(member_ids)
        ]

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'member_ids': self.member_ids,
            'station_id': self.station_id,
            'station_name': self.station.name if self.station else None,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'duration_minutes': self.duration_minutes,
            'cost_mad': self.cost,
            'status': self.status,
        }


Index('ix_bookings_window', Booking.status, Booking.start_time, Booking.end_time)
