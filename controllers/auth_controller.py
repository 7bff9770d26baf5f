# controllers/auth_controller.py

from flask import Blueprint, jsonify, current_app

from services.auth_service import AuthService
from services.exceptions import AuthError

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/auth/logout', methods=['POST'])
def logout():
    token = AuthService.bearer_token()
    if token is None:
        raise AuthError("Unauthorized")

    if not AuthService.revoke_token(token):
        current_app.logger.info("Logout with an unknown or expired token")
    return jsonify({'ok': True}), 200
