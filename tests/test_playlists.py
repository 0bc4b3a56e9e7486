from fastapi.testclient import TestClient

from helpers import auth_headers, publish_video


def _create(client: TestClient, headers, name: str = "Favourites"):
    return client.post(
        "/api/v1/playlist/", headers=headers, json={"name": name, "description": "Best of"}
    )


def test_empty_playlist(client: TestClient):
    _, headers = auth_headers(client)
    r = _create(client, headers)
    assert r.status_code == 201
    playlist = r.json()["data"]
    assert playlist["videos"] == []

    r = client.get(f"/api/v1/playlist/{playlist['_id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"] == {}
    assert r.json()["message"] == "Playlist does not have videos yet"


def test_duplicate_playlist_name(client: TestClient):
    _, headers = auth_headers(client)
    assert _create(client, headers, "Mix").status_code == 201
    r = _create(client, headers, "Mix")
    assert r.status_code == 409
    assert r.json()["message"] == "Playlist already exist"

    # names are only unique per owner
    _, other_headers = auth_headers(client)
    assert _create(client, other_headers, "Mix").status_code == 201


def test_add_and_remove_videos(client: TestClient):
    owner, headers = auth_headers(client)
    first = publish_video(client, headers, title="First")
    second = publish_video(client, headers, title="Second")
    playlist = _create(client, headers).json()["data"]
    pid = playlist["_id"]

    for video in (second, first, second):
        r = client.patch(f"/api/v1/playlist/add/video/{video['_id']}/playlist/{pid}", headers=headers)
        assert r.status_code == 200
    assert r.json()["data"]["videos"] == [second["_id"], first["_id"]]

    r = client.get(f"/api/v1/playlist/{pid}", headers=headers)
    rows = r.json()["data"]
    assert [row["videoTitle"] for row in rows] == ["Second", "First"]
    assert all(row["playlistId"] == pid for row in rows)
    assert rows[0]["username"] == owner["username"]

    r = client.get("/api/v1/playlist/", headers=headers)
    assert r.json()["data"][0]["totalVideos"] == 2

    r = client.patch(f"/api/v1/playlist/remove/video/{second['_id']}/playlist/{pid}", headers=headers)
    assert r.status_code == 200
    r = client.patch(f"/api/v1/playlist/remove/video/{second['_id']}/playlist/{pid}", headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Video does not exist in the playlist"

    rows = client.get(f"/api/v1/playlist/{pid}", headers=headers).json()["data"]
    assert [row["_id"] for row in rows] == [first["_id"]]


def test_playlist_owner_only_changes(client: TestClient):
    owner, headers = auth_headers(client)
    video = publish_video(client, headers)
    pid = _create(client, headers).json()["data"]["_id"]
    _, other_headers = auth_headers(client)

    r = client.patch(f"/api/v1/playlist/add/video/{video['_id']}/playlist/{pid}", headers=other_headers)
    assert r.status_code == 403
    r = client.patch(
        f"/api/v1/playlist/{pid}", headers=other_headers, json={"name": "x", "description": "y"}
    )
    assert r.status_code == 403

    r = client.patch(f"/api/v1/playlist/{pid}", headers=headers, json={"name": "Renamed", "description": "y"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Renamed"

    r = client.get(f"/api/v1/playlist/user/{owner['_id']}", headers=other_headers)
    assert [p["name"] for p in r.json()["data"]] == ["Renamed"]

    assert client.delete(f"/api/v1/playlist/{pid}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/v1/playlist/{pid}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/playlist/{pid}", headers=headers).status_code == 404


def test_deleted_video_leaves_playlist(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    pid = _create(client, headers).json()["data"]["_id"]
    client.patch(f"/api/v1/playlist/add/video/{video['_id']}/playlist/{pid}", headers=headers)

    assert client.delete(f"/api/v1/videos/{video['_id']}", headers=headers).status_code == 200

    playlist = client.get("/api/v1/playlist/", headers=headers).json()["data"][0]
    assert playlist["videos"] == []
    assert playlist["totalVideos"] == 0
    r = client.get(f"/api/v1/playlist/{pid}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Playlist does not have videos yet"
