import re
from datetime import datetime, timedelta, timezone
from models.user_sessions import UserSession
from utils.hashing import verify_password, hash_token

GENERIC_MESSAGE = "If that email exists, a password reset link has been sent."


def _raw_token_from(mailer, email):
    message = mailer.sent_to(email)[-1]
    return re.search(r"token=([0-9a-f]{64})", message["html"]).group(1)


async def test_forgot_password_success(client, verified_user, session, mailer):
    """Test successful password reset request."""
    response = await client.post("/api/forgot-password", json={"email": verified_user.email})

    assert response.status_code == 200
    assert response.json()["message"] == GENERIC_MESSAGE

    raw_token = _raw_token_from(mailer, verified_user.email)
    session.refresh(verified_user)
    # only the hash is stored
    assert verified_user.password_reset_token == hash_token(raw_token)
    expiry = verified_user.password_reset_token_expiry.replace(tzinfo=timezone.utc)
    assert datetime.now(timezone.utc) + timedelta(minutes=59) < expiry


async def test_forgot_password_nonexistent_user(client, mailer):
    """Test password reset for non-existent email (doesn't leak user existence)."""
    response = await client.post("/api/forgot-password", json={"email": "nonexistent@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == GENERIC_MESSAGE
    assert mailer.outbox == []


async def test_reset_password_success(client, verified_user, session, mailer, login_as):
    """Test successful password reset with valid token."""
    await client.post("/api/forgot-password", json={"email": verified_user.email})
    raw_token = _raw_token_from(mailer, verified_user.email)

    response = await client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "NewSecurePass123"
    })

    assert response.status_code == 200

    session.refresh(verified_user)
    assert verify_password("NewSecurePass123", verified_user.password)
    assert verified_user.password_reset_token is None
    assert verified_user.password_reset_token_expiry is None

    # confirmation email
    assert mailer.sent_to(verified_user.email)[-1]["subject"] == "Sweet Treats - Password Changed"

    await login_as(client, verified_user.username, "NewSecurePass123")


async def test_reset_password_invalid_token(client):
    response = await client.post("/api/reset-password", json={
        "token": "invalid_token_12345",
        "new_password": "NewPassword123"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired password reset token."


async def test_reset_password_expired_token(client, verified_user, session, mailer):
    await client.post("/api/forgot-password", json={"email": verified_user.email})
    raw_token = _raw_token_from(mailer, verified_user.email)
    verified_user.password_reset_token_expiry = datetime.now(timezone.utc) - timedelta(seconds=1)
    session.commit()

    response = await client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "NewPassword123"
    })

    # same message as an unknown token
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired password reset token."
    session.refresh(verified_user)
    assert verify_password("TestPassword123", verified_user.password)


async def test_reset_password_with_stored_hash_fails(client, verified_user, session, mailer):
    """Someone reading the users table cannot use the stored value."""
    await client.post("/api/forgot-password", json={"email": verified_user.email})
    session.refresh(verified_user)

    response = await client.post("/api/reset-password", json={
        "token": verified_user.password_reset_token,
        "new_password": "NewPassword123"
    })

    assert response.status_code == 400


async def test_reset_password_weak_password(client, verified_user, mailer):
    await client.post("/api/forgot-password", json={"email": verified_user.email})
    raw_token = _raw_token_from(mailer, verified_user.email)

    response = await client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "weak"
    })

    assert response.status_code == 422


async def test_reset_password_revokes_all_sessions(logged_in_client, verified_user, session, mailer):
    await logged_in_client.post("/api/forgot-password", json={"email": verified_user.email})
    raw_token = _raw_token_from(mailer, verified_user.email)

    response = await logged_in_client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "NewSecurePass123"
    })
    assert response.status_code == 200

    assert session.query(UserSession).filter(UserSession.revoked == False).count() == 0
    response = await logged_in_client.get("/api/user")
    assert response.status_code == 401


async def test_reset_password_token_single_use(client, verified_user, mailer):
    await client.post("/api/forgot-password", json={"email": verified_user.email})
    raw_token = _raw_token_from(mailer, verified_user.email)

    response = await client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "NewPassword123"
    })
    assert response.status_code == 200

    response = await client.post("/api/reset-password", json={
        "token": raw_token,
        "new_password": "AnotherPassword123"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired password reset token."


async def test_oauth_account_sets_password_through_reset(client, session, mailer, login_as):
    from services.auth_service import AuthService
    user = AuthService.find_or_create_oauth_user("cook@example.com", "Cook", session)

    await client.post("/api/forgot-password", json={"email": "cook@example.com"})
    raw_token = _raw_token_from(mailer, "cook@example.com")
    response = await client.post("/api/reset-password", json={"token": raw_token, "new_password": "FirstPass123"})

    assert response.status_code == 200
    await login_as(client, user.username, "FirstPass123")
