# models/sessionMember.py
from sqlalchemy import Column, Integer, String, ForeignKey
from db.extensions import db


class SessionMember(db.Model):
    __tablename__ = 'session_members'

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey('gaming_sessions.id', ondelete='CASCADE'), nullable=False, index=True)
    member_id = Column(String(64), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # remainder points go to lower positions first

    def __repr__(self):
        return f"<SessionMember session_id={self.session_id} member_id={self.member_id}>"
