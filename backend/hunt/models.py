from hunt import db


def _isoformat(value):
    return value.isoformat() if value else None


class Team(db.Model):
    __tablename__ = 'team'
    # Six-digit code: primary key and the one-time login code sent by SMS
    id = db.Column(db.String(6), primary_key=True)
    name = db.Column(db.String(25), unique=True, nullable=False)
    story = db.Column(db.Integer, nullable=False)
    stage = db.Column(db.Integer, nullable=False, default=1)
    phase = db.Column(db.Integer, nullable=False, default=1)
    health = db.Column(db.Float, nullable=False, default=100.0)
    is_restored = db.Column(db.Boolean, nullable=False, default=False)
    final_question = db.Column(db.Text, nullable=True)
    start_time = db.Column(db.DateTime, nullable=True)  # first login
    end_time = db.Column(db.DateTime, nullable=True)  # completion
    last_synced_time = db.Column(db.DateTime, nullable=True)  # last health recompute
    members = db.relationship('Member', back_populates='team', cascade='all, delete-orphan')

    def to_dict(self, include_code=False):
        payload = {
            'name': self.name,
            'story': self.story,
            'stage': self.stage,
            'phase': self.phase,
            'health': self.health,
            'is_restored': self.is_restored,
            'start_time': _isoformat(self.start_time),
            'end_time': _isoformat(self.end_time),
            'last_synced_time': _isoformat(self.last_synced_time),
        }
        if include_code:
            payload['code'] = self.id
        return payload


class Member(db.Model):
    __tablename__ = 'member'
    team_id = db.Column(db.String(6), db.ForeignKey('team.id'), primary_key=True)
    phone_number = db.Column(db.BigInteger, primary_key=True, index=True)
    team = db.relationship('Team', back_populates='members')


class Coupon(db.Model):
    __tablename__ = 'coupon'
    code = db.Column(db.String(64), primary_key=True)
    is_used = db.Column(db.Boolean, nullable=False, default=False)