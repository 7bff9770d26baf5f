# models/businessSettings.py
from sqlalchemy import Column, Integer, Float, Boolean
from db.extensions import db


class BusinessSettings(db.Model):
    """Singleton row (id=1). Null price columns fall back to DEFAULT_PRICING_BY_TYPE in services.pricing_service."""
    __tablename__ = 'business_settings'

    id = Column(Integer, primary_key=True, default=1)
    session_alerts = Column(Boolean, nullable=True)
    default_session_minutes = Column(Integer, nullable=True)

    standard_ps5_price_1 = Column(Float, nullable=True)
    standard_ps5_price_4 = Column(Float, nullable=True)
    premium_ps5_price_1 = Column(Float, nullable=True)
    premium_ps5_price_4 = Column(Float, nullable=True)
    xbox_price_1 = Column(Float, nullable=True)
    xbox_price_4 = Column(Float, nullable=True)
