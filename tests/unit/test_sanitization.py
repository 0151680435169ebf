import logging
from utils.logger import sanitize_log_data, log_request, REDACTED


def test_password_redaction():
    data = {"email": "user@example.com", "new_password": "supersecret123"}
    sanitized = sanitize_log_data(data)

    assert sanitized["email"] == "user@example.com"
    assert sanitized["new_password"] == REDACTED


def test_reset_token_partial_redaction():
    raw = "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"
    sanitized = sanitize_log_data({"reset_token": raw})

    assert sanitized["reset_token"] == raw[:8] + "..."


def test_codes_and_cookies_redacted():
    data = {"verification_code": "123456", "admin_code": "letmein", "session_cookie": "abc.def.ghi"}
    sanitized = sanitize_log_data(data)

    assert sanitized["verification_code"] == REDACTED
    assert sanitized["admin_code"] == REDACTED
    assert sanitized["session_cookie"] == REDACTED


def test_nested_dict_sanitization():
    data = {
        "body": {
            "username": "baker",
            "password": "secret123"
        }
    }
    sanitized = sanitize_log_data(data)

    assert sanitized["body"]["username"] == "baker"
    assert sanitized["body"]["password"] == REDACTED
    # original left alone
    assert data["body"]["password"] == "secret123"


def test_none_values_not_redacted():
    assert sanitize_log_data({"password_reset_token": None}) == {"password_reset_token": None}


def test_non_sensitive_data_unchanged():
    data = {"user_id": 123, "order_id": 7, "status": "shipped"}

    assert sanitize_log_data(data) == data


def test_log_request_level_follows_status(caplog):
    logger = logging.getLogger("tests.access")

    with caplog.at_level(logging.INFO, logger="tests.access"):
        log_request(logger, "GET", "/api/products", 200, 1.234, "127.0.0.1")
        log_request(logger, "POST", "/api/login", 401, 3.0, "127.0.0.1", extra={"password": "x"})
        log_request(logger, "GET", "/api/orders", 500, 9.0, "127.0.0.1", user_id=5)

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.ERROR]
    assert caplog.records[0].duration_ms == 1.23
    assert caplog.records[1].password == REDACTED
    assert caplog.records[2].user_id == 5
