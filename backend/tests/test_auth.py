from datetime import timedelta

from devconnector.auth.dependencies import get_current_user
from devconnector.core.security import new_session_token
from devconnector.crud import user as user_crud
from devconnector.db.base import utcnow


async def test_register_and_read_current_user(client, register):
    headers = await register()

    response = await client.get("/api/auth", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "jane@example.com"
    assert body["avatar"].startswith("https://www.gravatar.com/avatar/")
    assert "password_hash" not in body


async def test_register_duplicate_email(client, register):
    await register()

    response = await client.post(
        "/api/auth/register",
        json={"name": "Jane Again", "email": "JANE@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


async def test_login(client, register):
    await register()

    ok = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert ok.status_code == 200
    token = ok.json()["token"]
    assert (await client.get("/api/auth", headers={"x-auth-token": token})).status_code == 200

    bad = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": "wrong"})
    assert bad.status_code == 400
    assert bad.json() == {"message": "Invalid credentials"}


async def test_session_activity_survives_a_later_rollback(db, make_user):
    user = await make_user()
    user_id = user.id
    token, expires_at = new_session_token()
    session = await user_crud.create_session(db, user_id=user_id, token=token, expires_at=expires_at)
    stale = utcnow() - timedelta(days=1)
    session.last_activity = stale
    await db.commit()

    current = await get_current_user(token=token, legacy_token=None, db=db)
    assert current.id == user_id
    await db.rollback()

    stored = await user_crud.get_active_session(db, token)
    assert stored.last_activity.replace(tzinfo=None) > stale.replace(tzinfo=None)
