# models/profile.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime
from db.extensions import db


class Role:
    ADMIN = 'admin'
    MEMBER = 'member'


NO_NAME = '\u2014'

# lowest to highest
CARD_TIERS = ('silver', 'gold', 'black')


class Profile(db.Model):
    __tablename__ = 'profiles'

    id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    role = Column(String(16), nullable=False, default=Role.MEMBER)
    points = Column(Integer, nullable=False, default=0)
    total_visits = Column(Integer, nullable=False, default=0)
    card_tier = Column(String(16), nullable=False, default=CARD_TIERS[0])
    total_spend = Column(Float, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Profile id={self.id} tier={self.card_tier} points={self.points}>"

    @property
    def display_name(self):
        """First name, then last name, then the e-mail's local part."""
        first = (self.first_name or '').strip()
        last = (self.last_name or '').strip()
        email = (self.email or '').strip()
        return first or last or (email.split('@')[0] if email else None) or NO_NAME
