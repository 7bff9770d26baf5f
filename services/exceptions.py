# services/exceptions.py


class LoungeError(Exception):
    """Base for errors the HTTP layer turns into a JSON message + status code."""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'message': self.message}


class ValidationError(LoungeError):
    status_code = 400


class AuthError(LoungeError):
    status_code = 401


class ForbiddenError(AuthError):
    status_code = 403


class NotFoundError(LoungeError):
    status_code = 404


class ConflictError(LoungeError):
    status_code = 409


class InvalidStateError(LoungeError):
    status_code = 409
