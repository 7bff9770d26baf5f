# models/pointsConfig.py
from sqlalchemy import Column, Integer
from db.extensions import db


class PointsConfig(db.Model):
    """Singleton row (id=1)."""
    __tablename__ = 'points_config'

    id = Column(Integer, primary_key=True, default=1)
    points_per_hour_played = Column(Integer, nullable=False, default=0)
    tournament_win_bonus = Column(Integer, nullable=False, default=0)
    birthday_bonus = Column(Integer, nullable=False, default=0)
    yearly_bonus = Column(Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'pointsPerHourPlayed': self.points_per_hour_played,
            'tournamentWinBonus': self.tournament_win_bonus,
            'birthdayBonus': self.birthday_bonus,
            'yearlyBonus': self.yearly_bonus,
        }
