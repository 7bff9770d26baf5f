# services/auth_service.py

import secrets
from collections import namedtuple
from functools import wraps

from flask import current_app, g, request

from db.extensions import db, redis_client
from models.profile import Profile, Role
from services.exceptions import AuthError, ForbiddenError

# The authenticated caller, passed explicitly into core operations.
Actor = namedtuple('Actor', ['id', 'role'])

TOKEN_KEY = 'auth_token:{}'


class AuthService:

    @staticmethod
    def issue_token(profile_id):
        """Store a fresh bearer token for the profile and return it."""
        token = secrets.token_urlsafe(32)
        redis_client.setex(TOKEN_KEY.format(token), current_app.config['AUTH_TOKEN_TTL_SECONDS'], str(profile_id))
        return token

    @staticmethod
    def revoke_token(token):
        return redis_client.delete(TOKEN_KEY.format(token)) > 0

    @staticmethod
    def bearer_token():
        header = request.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return None
        return header[len('Bearer '):].strip() or None

    @staticmethod
    def get_current_user():
        """Actor for the request's bearer token, or None when anonymous or unknown."""
        token = AuthService.bearer_token()
        if token is None:
            return None

        profile_id = redis_client.get(TOKEN_KEY.format(token))
        if not profile_id:
            return None
        if isinstance(profile_id, bytes):
            profile_id = profile_id.decode()

        profile = db.session.get(Profile, profile_id)
        if profile is None:
            current_app.logger.warning(f"Token resolved to missing profile {profile_id}")
            return None
        return Actor(id=profile.id, role=profile.role)


def require_role(*roles):
    """Reject the request unless the caller has one of ``roles``; the actor lands in ``g.actor``."""
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = AuthService.get_current_user()
            if actor is None:
                raise AuthError("Unauthorized")
            if roles and actor.role not in roles:
                raise ForbiddenError("Forbidden")
            g.actor = actor
            return view(*args, **kwargs)
        return wrapper
    return decorator


admin_required = require_role(Role.ADMIN)
