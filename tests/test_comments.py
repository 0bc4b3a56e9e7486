from fastapi.testclient import TestClient

from helpers import auth_headers, publish_video


def _comment(client: TestClient, headers, video_id: str, content: str):
    r = client.post(f"/api/v1/comments/video/{video_id}", headers=headers, json={"content": content})
    assert r.status_code == 201
    assert r.json()["message"] == "Comment added successfully"
    return r.json()["data"]


def test_comments_page_newest_first_with_author_and_video(client: TestClient):
    author, headers = auth_headers(client)
    video = publish_video(client, headers, title="Commented video")
    for content in ("first", "second", "third"):
        _comment(client, headers, video["_id"], content)

    r = client.get(
        f"/api/v1/comments/video/{video['_id']}", headers=headers, params={"page": 1, "limit": 2}
    )
    assert r.status_code == 200
    rows = r.json()["data"]
    assert [row["content"] for row in rows] == ["third", "second"]
    for row in rows:
        assert row["username"] == author["username"]
        assert row["fullName"] == author["fullName"]
        assert row["avatar"] == author["avatar"]
        assert row["videoTitle"] == "Commented video"

    r = client.get(
        f"/api/v1/comments/video/{video['_id']}", headers=headers, params={"page": 2, "limit": 2}
    )
    assert [row["content"] for row in r.json()["data"]] == ["first"]

    r = client.get(
        f"/api/v1/comments/video/{video['_id']}", headers=headers, params={"page": 3, "limit": 2}
    )
    assert r.status_code == 404
    assert r.json()["message"] == "Comments exhausted"


def test_invalid_paging_falls_back_to_defaults(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    _comment(client, headers, video["_id"], "only one")
    r = client.get(
        f"/api/v1/comments/video/{video['_id']}", headers=headers, params={"page": "abc", "limit": "-5"}
    )
    assert r.status_code == 200
    assert len(r.json()["data"]) == 1


def test_no_comments_on_video(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    r = client.get(f"/api/v1/comments/video/{video['_id']}", headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "No comments found for this video"


def test_comment_on_missing_video(client: TestClient):
    _, headers = auth_headers(client)
    r = client.post(f"/api/v1/comments/video/{'0' * 32}", headers=headers, json={"content": "hello"})
    assert r.status_code == 404
    assert r.json()["message"] == "Video does not exist"


def test_update_and_delete_comment_owner_only(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    comment = _comment(client, headers, video["_id"], "original")
    _, other_headers = auth_headers(client)

    r = client.patch(
        f"/api/v1/comments/comment/{comment['_id']}", headers=other_headers, json={"content": "hijack"}
    )
    assert r.status_code == 403

    r = client.patch(
        f"/api/v1/comments/comment/{comment['_id']}", headers=headers, json={"content": "edited"}
    )
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "edited"

    assert client.delete(f"/api/v1/comments/comment/{comment['_id']}", headers=other_headers).status_code == 403
    r = client.delete(f"/api/v1/comments/comment/{comment['_id']}", headers=headers)
    assert r.status_code == 200
    r = client.get(f"/api/v1/comments/video/{video['_id']}", headers=headers)
    assert r.status_code == 404
