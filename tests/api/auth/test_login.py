from jose import jwt
from core.config import settings


async def test_login_success(client, verified_user, mailer):
    """Test successfull user login."""
    response = await client.post("/api/login", json={
        "username": verified_user.username,
        "password": "TestPassword123"
    })

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == verified_user.id
    assert data["username"] == verified_user.username
    assert "password" not in data

    token = client.cookies.get("session")
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["id"] == verified_user.id
    assert payload["type"] == "session"

    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    # only secure in production
    assert "; secure" not in set_cookie

    # verified users get no verification email
    assert mailer.outbox == []


async def test_login_wrong_password(client, verified_user):
    """Test login with incorrect password."""
    response = await client.post("/api/login", json={
        "username": verified_user.username,
        "password": "WrongPassword123"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"
    assert client.cookies.get("session") is None


async def test_login_nonexistent_user(client):
    """Unknown users get exactly the same answer as wrong passwords."""
    response = await client.post("/api/login", json={
        "username": "ghost",
        "password": "Password123"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


async def test_login_unverified_user_gets_fresh_code(client, unverified_user, session, mailer):
    unverified_user.verification_code = "123456"
    session.commit()

    response = await client.post("/api/login", json={
        "username": unverified_user.username,
        "password": "TestPassword123"
    })

    assert response.status_code == 200
    assert response.json()["is_verified"] is False
    assert client.cookies.get("session")

    session.refresh(unverified_user)
    assert unverified_user.verification_code is not None
    assert unverified_user.verification_expiry is not None
    [message] = mailer.sent_to(unverified_user.email)
    assert unverified_user.verification_code in message["text"]


async def test_login_oauth_account_without_password(client, session):
    from services.auth_service import AuthService
    user = AuthService.find_or_create_oauth_user("cook@example.com", "Cook", session)

    response = await client.post("/api/login", json={"username": user.username, "password": ""})

    assert response.status_code == 401


async def test_login_missing_fields(client):
    response = await client.post("/api/login", json={"username": "someone"})

    assert response.status_code == 422
