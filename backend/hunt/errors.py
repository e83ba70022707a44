"""Error taxonomy for the hunt API and the Flask handlers that render it.

Game services raise these; the HTTP layer never builds error responses by
hand. Session-state outcomes (completed, not started, exhausted) are not
errors and live in ``hunt.services.game.session``.
"""

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from hunt import db


class HuntError(Exception):
    status_code = 500
    kind = 'internal_error'
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'message': self.message, 'error': self.kind}


class ValidationFailed(HuntError):
    status_code = 400
    kind = 'validation_error'
    message = 'Invalid request body'


class Forbidden(HuntError):
    status_code = 403
    kind = 'forbidden'
    message = 'UNAUTHORIZED'


class ConflictError(HuntError):
    status_code = 422
    kind = 'conflict'


class AllStoriesPlayed(ConflictError):
    kind = 'all_stories_played'
    message = 'ALREADY PLAYED ALL STORIES'


class UnknownCode(ConflictError):
    kind = 'unknown_code'
    message = 'ERROR: WRONG OTP'


class InvalidCoupon(ConflictError):
    kind = 'invalid_coupon'
    message = 'invalid coupon code'


class CouponExhausted(ConflictError):
    kind = 'coupon_exhausted'
    message = 'coupon already used'


class AlreadyRestored(ConflictError):
    kind = 'already_restored'
    message = 'repair only once!'


class TeamNameTaken(ConflictError):
    status_code = 409
    kind = 'team_name_taken'
    message = 'team name already taken'


class DependencyFailure(HuntError):
    kind = 'dependency_failure'


class NotificationFailure(DependencyFailure):
    kind = 'notification_failure'
    message = 'SMSERROR'


class InternalError(HuntError):
    """Unexpected state. ``detail`` is logged, never returned to clients."""

    def __init__(self, detail=None):
        super().__init__()
        self.detail = detail


def register_error_handlers(flask_app):
    @flask_app.errorhandler(HuntError)
    def handle_hunt_error(err):
        if err.status_code >= 500:
            flask_app.logger.error(f"[error] kind={err.kind} detail={getattr(err, 'detail', None) or err.message}")
        return jsonify(err.to_dict()), err.status_code

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(err):
        details = [{'loc': list(e['loc']), 'msg': e['msg']} for e in err.errors()]
        body = ValidationFailed().to_dict()
        body['details'] = details
        return jsonify(body), ValidationFailed.status_code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return err
        db.session.rollback()
        flask_app.logger.exception(f"[error] unhandled {type(err).__name__}")
        return jsonify(InternalError().to_dict()), 500
