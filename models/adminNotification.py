# models/adminNotification.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from db.extensions import db


class AdminNotification(db.Model):
    __tablename__ = 'admin_notifications'

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    message = Column(String(1000), nullable=False)
    type = Column(String(50), nullable=False)
    link_url = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'message': self.message,
            'type': self.type,
            'link_url': self.link_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
