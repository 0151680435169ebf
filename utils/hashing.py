import hashlib
from passlib.context import CryptContext
from core.config import settings

# scrypt: memory-hard KDF, random salt per hash, constant-time digest compare
pwd_context = CryptContext(
    schemes=['scrypt'],
    deprecated='auto',
    scrypt__default_rounds=settings.PASSWORD_HASH_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    # OAuth-created accounts store an empty placeholder; anything unparseable is a mismatch
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def hash_token(raw_token: str) -> str:
    """One-way digest used to persist reset tokens and session ids."""
    return hashlib.sha256(raw_token.encode()).hexdigest()
