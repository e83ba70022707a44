"""Time and randomness handed to the game services.

Both are read from the app so tests can pin them: ``CLOCK`` in config and
the seeded ``random.Random`` stored under ``app.extensions['hunt_random']``.
"""

import random
from datetime import datetime, timezone

from flask import current_app


def utcnow() -> datetime:
    # Naive UTC: matches what the DateTime columns hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def current_time() -> datetime:
    clock = current_app.config.get('CLOCK') or utcnow
    return clock()


def current_random() -> random.Random:
    return current_app.extensions['hunt_random']
