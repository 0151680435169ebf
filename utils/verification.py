import secrets
from datetime import datetime, timedelta
from core.config import settings
from utils.hashing import hash_token
from utils.time_utils import utcnow


def generate_verification_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def get_code_expiry_time(minutes: int = settings.VERIFICATION_CODE_EXPIRE_MINUTES) -> datetime:
    return utcnow() + timedelta(minutes=minutes)


def generate_reset_token() -> tuple[str, str]:
    """
    Returns (raw_token, hashed_token).

    Only the hash is stored; the raw token leaves the server once, in the
    reset email.
    """
    raw_token = secrets.token_hex(32)
    return raw_token, hash_token(raw_token)


def get_reset_token_expiry_time(minutes: int = settings.PASSWORD_RESET_EXPIRE_MINUTES) -> datetime:
    return utcnow() + timedelta(minutes=minutes)
