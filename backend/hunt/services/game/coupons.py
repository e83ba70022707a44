from flask import current_app

from hunt import db
from hunt.errors import AlreadyRestored, CouponExhausted, InternalError, InvalidCoupon
from hunt.models import Coupon, Team
from .health import MAX_HEALTH

COUPON_HEALTH_BONUS = 40


def _claim_coupon(code: str) -> int:
    return (
        Coupon.query.filter_by(code=code, is_used=False)
        .update({'is_used': True}, synchronize_session=False)
    )


def _restore_team(team_id: str, health: float) -> int:
    return (
        Team.query.filter_by(id=team_id, is_restored=False)
        .update({'health': health, 'is_restored': True}, synchronize_session=False)
    )


def redeem_coupon(team_id: str, code: str) -> Team:
    """Spend ``code`` to give the team back up to 40 health, once per team.

    Both rows are locked for the read, and each write only applies if the row
    is still unspent, so two concurrent redemptions cannot both succeed.
    """
    try:
        coupon = Coupon.query.filter_by(code=code).with_for_update().first()
        if coupon is None:
            raise InvalidCoupon()
        if coupon.is_used:
            raise CouponExhausted()

        team = Team.query.filter_by(id=team_id).with_for_update().first()
        if team is None:
            raise InternalError(f"validated team not found: {team_id}")
        if team.is_restored:
            raise AlreadyRestored()

        new_health = min(MAX_HEALTH, team.health + COUPON_HEALTH_BONUS)

        if _claim_coupon(code) != 1:
            raise CouponExhausted()
        if _restore_team(team_id, new_health) != 1:
            raise AlreadyRestored()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    db.session.refresh(team)
    current_app.logger.info(f"[refuel] team={team.name} coupon={code} health={new_health}")
    return team
