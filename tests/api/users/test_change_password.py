from models.user_sessions import UserSession
from services.session_service import SessionService
from utils.hashing import verify_password


async def test_change_password_success(logged_in_client, verified_user, session, mailer, login_as):
    old_cookie = logged_in_client.cookies.get("session")
    other_device = SessionService.create_session(verified_user, session)

    response = await logged_in_client.post("/api/user/change-password", json={
        "current_password": "TestPassword123",
        "new_password": "NewPassword456"
    })

    assert response.status_code == 200
    session.refresh(verified_user)
    assert verify_password("NewPassword456", verified_user.password)

    # every earlier session is gone, the caller got a fresh one
    new_cookie = logged_in_client.cookies.get("session")
    assert new_cookie and new_cookie != old_cookie
    assert session.query(UserSession).filter(UserSession.revoked == False).count() == 1
    assert (await logged_in_client.get("/api/user")).status_code == 200
    assert (await logged_in_client.get("/api/user", headers={"Cookie": f"session={other_device}"})).status_code == 401

    assert mailer.sent_to(verified_user.email)[-1]["subject"] == "Sweet Treats - Password Changed"


async def test_change_password_wrong_current(logged_in_client, verified_user, session):
    response = await logged_in_client.post("/api/user/change-password", json={
        "current_password": "WrongPassword1",
        "new_password": "NewPassword456"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Current password is incorrect."
    session.refresh(verified_user)
    assert verify_password("TestPassword123", verified_user.password)


async def test_change_password_same_as_old(logged_in_client):
    response = await logged_in_client.post("/api/user/change-password", json={
        "current_password": "TestPassword123",
        "new_password": "TestPassword123"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "New password cannot be the same as the old password."


async def test_change_password_weak(logged_in_client):
    response = await logged_in_client.post("/api/user/change-password", json={
        "current_password": "TestPassword123",
        "new_password": "short"
    })

    assert response.status_code == 422


async def test_change_password_requires_session(client):
    response = await client.post("/api/user/change-password", json={
        "current_password": "TestPassword123",
        "new_password": "NewPassword456"
    })

    assert response.status_code == 401
