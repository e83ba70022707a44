from datetime import datetime

DECAY_PER_SECOND = 0.025
MAX_HEALTH = 100.0


def decay(health: float, elapsed_seconds: float) -> float:
    """Health left after ``elapsed_seconds`` of idle time.

    Not clamped: callers compare against zero themselves so they can tell a
    team that just ran out from one that was already empty.
    """
    return health - elapsed_seconds * DECAY_PER_SECOND


def current_health(stored_health: float, last_synced_time: datetime, now: datetime) -> float:
    elapsed = (now - last_synced_time).total_seconds()
    return decay(stored_health, elapsed)
