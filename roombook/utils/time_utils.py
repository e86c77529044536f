from datetime import datetime
import pytz


def utcnow():
    """Current instant as a naive UTC datetime (the storage convention)."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    # Naive values are assumed to already be UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def to_local(value: datetime, tz) -> datetime:
    """Convert a stored (naive UTC) datetime to an aware datetime in ``tz``."""
    if isinstance(tz, str):
        tz = pytz.timezone(tz)
    return pytz.utc.localize(value).astimezone(tz)


def localize(naive_local: datetime, tz) -> datetime:
    """Attach ``tz`` to a wall-clock datetime, resolving DST like pytz does."""
    if isinstance(tz, str):
        tz = pytz.timezone(tz)
    return tz.normalize(tz.localize(naive_local))
