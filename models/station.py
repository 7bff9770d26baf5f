# models/station.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime
from db.extensions import db


class StationType:
    STANDARD_PS5 = 'standard_ps5'
    PREMIUM_PS5 = 'premium_ps5'
    XBOX = 'xbox'

    ALL = (STANDARD_PS5, PREMIUM_PS5, XBOX)


class StationStatus:
    FREE = 'free'
    OCCUPIED = 'occupied'
    RESERVED = 'reserved'
    MAINTENANCE = 'maintenance'


class Station(db.Model):
    __tablename__ = 'stations'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    station_type = Column(String(32), nullable=False, index=True)
    price_solo = Column(Float, nullable=False, default=0)
    price_group = Column(Float, nullable=True)  # 4-person hourly rate
    status = Column(String(16), nullable=False, default=StationStatus.FREE, index=True)
    current_session_id = Column(Integer, nullable=True, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Station id={self.id} name={self.name} type={self.station_type} status={self.status}>"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.station_type,
            'price_1_mad': float(self.price_solo or 0),
            'price_4_mad': float(self.price_group) if self.price_group is not None else None,
            'status': self.status,
            'current_session_id': self.current_session_id,
        }
