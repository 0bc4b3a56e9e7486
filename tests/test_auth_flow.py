from fastapi.testclient import TestClient

from helpers import PASSWORD, login, register, unique_name


def test_register_login_current_user(client: TestClient):
    username = unique_name()
    r = register(client, username, cover=True)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]
    assert user["username"] == username
    assert user["avatar"].startswith("/media/image/")
    assert user["coverImage"].startswith("/media/image/")
    assert "password" not in user
    assert "refreshToken" not in user

    r = login(client, username)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["user"]["_id"] == user["_id"]
    assert data["accessToken"] and data["refreshToken"]
    cookies = r.headers.get_list("set-cookie")
    for name in ("accessToken", "refreshToken"):
        cookie = next(c for c in cookies if c.startswith(f"{name}="))
        assert "HttpOnly" in cookie
        assert "Secure" in cookie

    r = client.get(
        "/api/v1/users/current-user",
        headers={"Authorization": f"Bearer {data['accessToken']}"},
    )
    assert r.status_code == 200
    assert r.json()["data"]["email"] == f"{username}@example.com"


def test_login_with_email(client: TestClient):
    username = unique_name()
    register(client, username)
    r = client.post(
        "/api/v1/users/login",
        json={"email": f"{username.upper()}@EXAMPLE.COM", "password": PASSWORD},
    )
    assert r.status_code == 200
    assert r.json()["data"]["user"]["username"] == username


def test_duplicate_registration_conflicts(client: TestClient):
    username = unique_name()
    assert register(client, username).status_code == 201
    r = register(client, username, email=f"other_{username}@example.com")
    assert r.status_code == 409
    assert r.json()["message"] == "User with email or username already exists"
    assert r.json()["success"] is False


def test_register_requires_avatar(client: TestClient):
    username = unique_name()
    r = client.post(
        "/api/v1/users/register",
        data={
            "fullName": "No Avatar",
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
        },
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Avatar file is required"


def test_login_failures(client: TestClient):
    r = login(client, unique_name())
    assert r.status_code == 404
    assert r.json()["message"] == "User does not exist"

    username = unique_name()
    register(client, username)
    r = login(client, username, "Wr0ngpassword")
    assert r.status_code == 401


def test_refresh_token_issues_new_tokens(client: TestClient):
    username = unique_name()
    register(client, username)
    tokens = login(client, username).json()["data"]

    r = client.post("/api/v1/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert r.status_code == 200
    assert r.json()["message"] == "Access token refreshed"
    fresh = r.json()["data"]

    r = client.get(
        "/api/v1/users/current-user",
        headers={"Authorization": f"Bearer {fresh['accessToken']}"},
    )
    assert r.status_code == 200

    # the rotated refresh token is the one now on record
    r = client.post("/api/v1/users/refresh-token", json={"refreshToken": fresh["refreshToken"]})
    assert r.status_code == 200


def test_refresh_token_rejects_access_token(client: TestClient):
    username = unique_name()
    register(client, username)
    tokens = login(client, username).json()["data"]
    r = client.post("/api/v1/users/refresh-token", json={"refreshToken": tokens["accessToken"]})
    assert r.status_code == 401


def test_logout_invalidates_refresh_token(client: TestClient):
    username = unique_name()
    register(client, username)
    tokens = login(client, username).json()["data"]
    headers = {"Authorization": f"Bearer {tokens['accessToken']}"}

    r = client.post("/api/v1/users/logout", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "User logged out"

    r = client.post("/api/v1/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert r.status_code == 401


def test_change_password(client: TestClient):
    username = unique_name()
    register(client, username)
    token = login(client, username).json()["data"]["accessToken"]
    headers = {"Authorization": f"Bearer {token}"}

    r = client.post(
        "/api/v1/users/change-password",
        headers=headers,
        json={"oldPassword": "Wr0ngpassword", "newPassword": "N3wPassword"},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid old password"

    r = client.post(
        "/api/v1/users/change-password",
        headers=headers,
        json={"oldPassword": PASSWORD, "newPassword": "N3wPassword"},
    )
    assert r.status_code == 200
    assert login(client, username, "N3wPassword").status_code == 200


def test_protected_route_requires_token(client: TestClient):
    assert client.get("/api/v1/users/current-user").status_code == 401
    r = client.get("/api/v1/users/current-user", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"
