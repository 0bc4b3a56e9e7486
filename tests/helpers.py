import uuid

from fastapi.testclient import TestClient

PASSWORD = "Passw0rd1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 32


def unique_name(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def register(client: TestClient, username: str = None, cover: bool = False, **overrides):
    username = username or unique_name()
    data = {
        "fullName": overrides.pop("fullName", f"{username.title()} Person"),
        "username": username,
        "email": overrides.pop("email", f"{username}@example.com"),
        "password": overrides.pop("password", PASSWORD),
    }
    files = {"avatar": ("avatar.png", PNG_BYTES, "image/png")}
    if cover:
        files["coverImage"] = ("cover.png", PNG_BYTES, "image/png")
    return client.post("/api/v1/users/register", data=data, files=files)


def login(client: TestClient, username: str, password: str = PASSWORD):
    return client.post("/api/v1/users/login", json={"username": username, "password": password})


def auth_headers(client: TestClient, username: str = None):
    """Register a fresh user and return (user document, Authorization headers)."""
    r = register(client, username)
    assert r.status_code == 201, r.text
    user = r.json()["data"]
    r = login(client, user["username"])
    assert r.status_code == 200, r.text
    token = r.json()["data"]["accessToken"]
    return user, {"Authorization": f"Bearer {token}"}


def publish_video(client: TestClient, headers, title: str = "My video", description: str = "About it"):
    r = client.post(
        "/api/v1/videos/",
        headers=headers,
        data={"title": title, "description": description, "duration": "12.5"},
        files={
            "videoFile": ("clip.mp4", MP4_BYTES, "video/mp4"),
            "thumbnail": ("thumb.png", PNG_BYTES, "image/png"),
        },
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]
