from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import random
import secrets
import click
from config import Config

db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    jwt.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Collaborators the game services are handed per request
    from hunt.questions import load_question_bank
    from hunt.services.game.notifications import SmsNotifier

    seed = flask_app.config.get('RANDOM_SEED')
    flask_app.extensions['hunt_random'] = random.Random(int(seed) if seed is not None else None)
    flask_app.extensions['hunt_notifier'] = SmsNotifier.from_config(flask_app.config)
    flask_app.extensions['hunt_questions'] = load_question_bank(flask_app.config.get('QUESTIONS_PATH'))

    from hunt.errors import register_error_handlers
    register_error_handlers(flask_app)

    from hunt.api.hunt import hunt
    flask_app.register_blueprint(hunt)

    from hunt.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import hunt.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('seed-coupons')
    @click.argument('codes', nargs=-1)
    @click.option('--count', default=0, help='Generate this many random codes when none are given.')
    def seed_coupons_command(codes, count):
        """Inserts coupon codes that teams can redeem once."""
        from hunt.models import Coupon
        codes = list(codes) or [secrets.token_hex(3).upper() for _ in range(count)]
        with flask_app.app_context():
            added = 0
            for code in codes:
                if db.session.get(Coupon, code) is None:
                    db.session.add(Coupon(code=code))
                    added += 1
                    print(code)
            db.session.commit()
            print(f'{added} coupon(s) added')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_coupons_command)

    return flask_app
