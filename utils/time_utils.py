from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime | None) -> bool:
    return expires_at is None or ensure_utc(expires_at) < utcnow()


def to_iso(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value is not None else None
