from fastapi.testclient import TestClient

from helpers import auth_headers, publish_video


def test_toggle_video_like_twice(client: TestClient):
    owner, headers = auth_headers(client)
    video = publish_video(client, headers, title="Likeable")
    fan, fan_headers = auth_headers(client)

    r = client.post(f"/api/v1/likes/toggle/v/{video['_id']}", headers=fan_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Like toggled on video successfully"
    like = r.json()["data"]
    assert like["targetKind"] == "video"
    assert like["targetId"] == video["_id"]
    assert like["likedBy"] == fan["_id"]

    r = client.get("/api/v1/likes/videos", headers=fan_headers)
    liked = r.json()["data"]
    assert [v["_id"] for v in liked] == [video["_id"]]
    assert liked[0]["title"] == "Likeable"
    assert liked[0]["username"] == owner["username"]

    r = client.post(f"/api/v1/likes/toggle/v/{video['_id']}", headers=fan_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {}
    assert client.get("/api/v1/likes/videos", headers=fan_headers).json()["data"] == []


def test_toggle_comment_and_tweet_likes(client: TestClient):
    _, headers = auth_headers(client)
    video = publish_video(client, headers)
    comment = client.post(
        f"/api/v1/comments/video/{video['_id']}", headers=headers, json={"content": "nice"}
    ).json()["data"]
    tweet = client.post("/api/v1/tweets/", headers=headers, json={"content": "hello"}).json()["data"]

    r = client.post(f"/api/v1/likes/toggle/c/{comment['_id']}", headers=headers)
    assert r.json()["message"] == "Like toggled on comment successfully"
    assert r.json()["data"]["targetKind"] == "comment"

    r = client.post(f"/api/v1/likes/toggle/t/{tweet['_id']}", headers=headers)
    assert r.json()["message"] == "Like toggled on tweet successfully"
    assert r.json()["data"]["targetKind"] == "tweet"

    # comment and tweet likes never show up as liked videos
    assert client.get("/api/v1/likes/videos", headers=headers).json()["data"] == []


def test_like_missing_target(client: TestClient):
    _, headers = auth_headers(client)
    missing = "f" * 32
    r = client.post(f"/api/v1/likes/toggle/v/{missing}", headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Video does not exist"
    r = client.post(f"/api/v1/likes/toggle/t/{missing}", headers=headers)
    assert r.json()["message"] == "Tweet does not exist"
