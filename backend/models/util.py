import time


def now_ms() -> int:
    """Current time as milliseconds since epoch."""
    return int(time.time() * 1000)


def row_to_dict(row) -> dict:
    """Column values of an ORM row, for JSON responses."""
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}
