from unittest.mock import patch
from datetime import datetime, timedelta, timezone
from utils.hashing import hash_token
from utils.time_utils import is_expired, ensure_utc, to_iso
from utils.verification import (generate_verification_code, get_code_expiry_time,
                                generate_reset_token, get_reset_token_expiry_time)


def test_generate_verification_code():
    code = generate_verification_code()
    assert len(code) == 6
    assert code.isdigit()


def test_verification_code_keeps_leading_zeros():
    with patch("utils.verification.secrets.randbelow", return_value=42):
        assert generate_verification_code() == "000042"


def test_code_expiry_defaults_to_thirty_minutes():
    now = datetime.now(timezone.utc)
    expiry = get_code_expiry_time()

    assert now + timedelta(minutes=29) < expiry <= now + timedelta(minutes=31)


def test_reset_token_pair():
    raw, hashed = generate_reset_token()

    assert len(raw) == 64  # 32 random bytes as hex
    assert hashed == hash_token(raw)
    assert raw != hashed


def test_reset_tokens_are_unique():
    assert len({generate_reset_token()[0] for _ in range(20)}) == 20


def test_reset_token_expiry_defaults_to_one_hour():
    now = datetime.now(timezone.utc)
    expiry = get_reset_token_expiry_time()

    assert now + timedelta(minutes=59) < expiry <= now + timedelta(minutes=61)


def test_is_expired():
    now = datetime.now(timezone.utc)

    assert is_expired(now - timedelta(seconds=1)) is True
    assert is_expired(now + timedelta(minutes=5)) is False
    assert is_expired(None) is True


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime(2024, 5, 1, 12, 0, 0)

    assert ensure_utc(naive).tzinfo == timezone.utc
    assert to_iso(naive) == "2024-05-01T12:00:00+00:00"
    assert to_iso(None) is None
