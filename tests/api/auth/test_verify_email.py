import re
from datetime import datetime, timedelta, timezone


async def _login_unverified(client, user, login_as, mailer):
    await login_as(client, user.username)
    # login issues a fresh code and queues the email
    message = mailer.sent_to(user.email)[-1]
    return re.search(r"code is: (\d{6})", message["text"]).group(1)


async def test_verify_email_success(client, unverified_user, session, login_as, mailer):
    code = await _login_unverified(client, unverified_user, login_as, mailer)

    response = await client.post("/api/verify-email", json={"code": code})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Email verified successfully"
    assert data["user"]["is_verified"] is True

    session.refresh(unverified_user)
    assert unverified_user.is_verified is True
    assert unverified_user.verification_code is None
    assert unverified_user.verification_expiry is None


async def test_verify_email_invalid_code(client, unverified_user, session, login_as, mailer):
    code = await _login_unverified(client, unverified_user, login_as, mailer)
    wrong = "000000" if code != "000000" else "111111"

    response = await client.post("/api/verify-email", json={"code": wrong})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid verification code"
    session.refresh(unverified_user)
    assert unverified_user.is_verified is False


async def test_verify_email_expired_code(client, unverified_user, session, login_as, mailer):
    code = await _login_unverified(client, unverified_user, login_as, mailer)
    unverified_user.verification_expiry = datetime.now(timezone.utc) - timedelta(seconds=1)
    session.commit()

    response = await client.post("/api/verify-email", json={"code": code})

    assert response.status_code == 400
    assert response.json()["detail"] == "Verification code expired. Please request a new code."


async def test_verify_email_already_verified(logged_in_client):
    response = await logged_in_client.post("/api/verify-email", json={"code": "123456"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already verified"


async def test_verify_email_without_code_on_record(client, unverified_user, session, login_as):
    await login_as(client, unverified_user.username)
    unverified_user.verification_code = None
    unverified_user.verification_expiry = None
    session.commit()

    response = await client.post("/api/verify-email", json={"code": "123456"})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("No verification code found")


async def test_verify_email_requires_session(client):
    response = await client.post("/api/verify-email", json={"code": "123456"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


async def test_verify_email_malformed_code(logged_in_client):
    response = await logged_in_client.post("/api/verify-email", json={"code": "12ab"})

    assert response.status_code == 422


async def test_verify_email_rejects_non_ascii_digits(client, unverified_user, session, login_as, mailer):
    await _login_unverified(client, unverified_user, login_as, mailer)

    response = await client.post("/api/verify-email", json={"code": "\u0661\u0662\u0663\u0664\u0665\u0666"})

    assert response.status_code == 422
    session.refresh(unverified_user)
    assert unverified_user.is_verified is False


async def test_resend_verification_replaces_code(client, unverified_user, session, login_as, mailer):
    old_code = await _login_unverified(client, unverified_user, login_as, mailer)

    response = await client.post("/api/resend-verification")

    assert response.status_code == 200
    assert response.json()["email_sent"] is True
    new_code = re.search(r"code is: (\d{6})", mailer.sent_to(unverified_user.email)[-1]["text"]).group(1)
    session.refresh(unverified_user)
    assert unverified_user.verification_code == new_code

    if new_code != old_code:
        response = await client.post("/api/verify-email", json={"code": old_code})
        assert response.status_code == 400

    response = await client.post("/api/verify-email", json={"code": new_code})
    assert response.status_code == 200


async def test_resend_verification_email_failure(client, unverified_user, login_as, mailer):
    await login_as(client, unverified_user.username)
    mailer.fail = True

    response = await client.post("/api/resend-verification")

    assert response.status_code == 200
    assert response.json()["email_sent"] is False


async def test_resend_verification_when_verified(logged_in_client):
    response = await logged_in_client.post("/api/resend-verification")

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already verified"
