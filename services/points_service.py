# services/points_service.py

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal

from flask import current_app

from models.profile import Profile


def unique_ids(ids):
    """Drop blanks and repeats, keeping first-seen order."""
    seen = OrderedDict()
    for member_id in ids or []:
        if member_id is None:
            continue
        member_id = str(member_id).strip()
        if member_id and member_id not in seen:
            seen[member_id] = True
    return list(seen)


class PointsService:

    @staticmethod
    def total_points(points_per_hour, duration_minutes):
        """floor(points_per_hour * duration_minutes / 60); negative inputs count as 0."""
        rate = max(Decimal(0), Decimal(str(points_per_hour or 0)))
        minutes = max(Decimal(0), Decimal(str(duration_minutes or 0)))
        return int(rate * minutes // 60)

    @staticmethod
    def allocate_points(points_per_hour, duration_minutes, participant_ids):
        """
        Split the session's points evenly; the first ``total % n`` participants
        in list order get one extra point. No participants means no allocation.
        """
        participants = unique_ids(participant_ids)
        allocation = OrderedDict()
        if not participants:
            return allocation

        total = PointsService.total_points(points_per_hour, duration_minutes)
        share, remainder = divmod(total, len(participants))
        for index, member_id in enumerate(participants):
            allocation[member_id] = share + (1 if index < remainder else 0)
        return allocation

    @staticmethod
    def apply_allocation(allocation):
        """
        Credit each share and one visit. Increments are column expressions so
        concurrent completions for the same member don't overwrite each other.
        Does not commit; the caller owns the transaction.
        """
        credited = []
        for member_id, share in allocation.items():
            updated = Profile.query.filter(Profile.id == member_id).update(
                {
                    Profile.points: Profile.points + share,
                    Profile.total_visits: Profile.total_visits + 1,
                    Profile.updated_at: datetime.utcnow(),
                },
                synchronize_session='fetch',
            )
            if updated:
                credited.append(member_id)
            else:
                current_app.logger.warning(f"Profile {member_id} not found, {share} points not credited")
        return credited
