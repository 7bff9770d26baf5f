# models/bookingMember.py
from sqlalchemy import Column, Integer, String, ForeignKey
from db.extensions import db


class BookingMember(db.Model):
    __tablename__ = 'booking_members'

    id = Column(Integer, primary_key=True)
    booking_id = Column(Integer, ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False, index=True)
    member_id = Column(String(64), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
