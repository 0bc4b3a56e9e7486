from fastapi.testclient import TestClient

from helpers import PNG_BYTES, auth_headers, publish_video, unique_name


def test_publish_and_get_video_counts_views(client: TestClient):
    owner, headers = auth_headers(client)
    video = publish_video(client, headers, title="Counting views")
    assert video["views"] == 0
    assert video["isPublished"] is True
    assert video["owner"] == owner["_id"]
    assert video["videoFile"].startswith("/media/video/")

    viewer, viewer_headers = auth_headers(client)
    r = client.get(f"/api/v1/videos/{video['_id']}", headers=viewer_headers)
    assert r.status_code == 200
    detail = r.json()["data"]
    assert detail["views"] == 1
    assert detail["owner"] == owner["_id"]
    assert detail["username"] == owner["username"]
    assert detail["avatar"] == owner["avatar"]

    r = client.get(f"/api/v1/videos/{video['_id']}", headers=viewer_headers)
    assert r.json()["data"]["views"] == 2

    # watch history keeps a single entry for repeat views
    r = client.get("/api/v1/users/history", headers=viewer_headers)
    assert r.status_code == 200
    history = r.json()["data"]
    assert [h["_id"] for h in history] == [video["_id"]]
    assert history[0]["username"] == owner["username"]


def test_list_videos_search_sort_and_paginate(client: TestClient):
    owner, headers = auth_headers(client)
    tag = unique_name("tag")
    for i in range(3):
        publish_video(client, headers, title=f"{tag} part {i}")

    r = client.get(
        "/api/v1/videos/",
        headers=headers,
        params={"query": tag, "sortBy": "title", "sortType": "asc", "limit": 2},
    )
    assert r.status_code == 200
    titles = [v["title"] for v in r.json()["data"]]
    assert titles == [f"{tag} part 0", f"{tag} part 1"]
    assert r.json()["data"][0]["username"] == owner["username"]

    r = client.get(
        "/api/v1/videos/",
        headers=headers,
        params={"query": tag, "sortBy": "title", "sortType": "desc", "limit": 2, "page": 2},
    )
    assert [v["title"] for v in r.json()["data"]] == [f"{tag} part 0"]

    r = client.get("/api/v1/videos/", headers=headers, params={"query": tag, "limit": 2, "page": 3})
    assert r.status_code == 404
    assert r.json()["message"] == "Videos exhausted"

    r = client.get("/api/v1/videos/", headers=headers, params={"query": unique_name("nothing")})
    assert r.status_code == 404
    assert r.json()["message"] == "No video found"


def test_list_videos_by_owner(client: TestClient):
    owner, headers = auth_headers(client)
    publish_video(client, headers)
    r = client.get("/api/v1/videos/", headers=headers, params={"userId": owner["_id"]})
    assert r.status_code == 200
    assert len(r.json()["data"]) == 1


def test_unpublished_video_is_hidden_from_others(client: TestClient):
    _, headers = auth_headers(client)
    tag = unique_name("hidden")
    video = publish_video(client, headers, title=tag)

    r = client.patch(f"/api/v1/videos/toggle/publish/{video['_id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["isPublished"] is False

    _, other_headers = auth_headers(client)
    assert client.get(f"/api/v1/videos/{video['_id']}", headers=other_headers).status_code == 404
    assert client.get(f"/api/v1/videos/{video['_id']}", headers=headers).status_code == 200
    r = client.get("/api/v1/videos/", headers=headers, params={"query": tag})
    assert r.status_code == 404


def test_update_video_details_and_thumbnail(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)

    r = client.patch(
        f"/api/v1/videos/{video['_id']}",
        headers=headers,
        data={"title": "Renamed"},
        files={"thumbnail": ("new.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["title"] == "Renamed"
    assert updated["description"] == video["description"]
    assert updated["thumbnail"] != video["thumbnail"]

    r = client.patch(f"/api/v1/videos/{video['_id']}", headers=headers, data={"title": " "})
    assert r.status_code == 400


def test_only_owner_can_modify_video(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    _, other_headers = auth_headers(client)

    r = client.patch(f"/api/v1/videos/{video['_id']}", headers=other_headers, data={"title": "Mine"})
    assert r.status_code == 403
    assert client.delete(f"/api/v1/videos/{video['_id']}", headers=other_headers).status_code == 403
    r = client.patch(f"/api/v1/videos/toggle/publish/{video['_id']}", headers=other_headers)
    assert r.status_code == 403


def test_delete_video_removes_comments_and_likes(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    r = client.post(f"/api/v1/comments/video/{video['_id']}", headers=headers, json={"content": "hi"})
    comment_id = r.json()["data"]["_id"]
    client.post(f"/api/v1/likes/toggle/v/{video['_id']}", headers=headers)

    r = client.delete(f"/api/v1/videos/{video['_id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Video deleted successfully"

    assert client.get(f"/api/v1/videos/{video['_id']}", headers=headers).status_code == 404
    assert client.post(f"/api/v1/likes/toggle/c/{comment_id}", headers=headers).status_code == 404
    assert client.get("/api/v1/likes/videos", headers=headers).json()["data"] == []
