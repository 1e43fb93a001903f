from db import storage
from db.database import SessionLocal
from models.video_models import Video, VideoLike, VideoDislike
from tests.conftest import register


def counters(client, video_id):
    body = client.get(f"/api/videos/{video_id}").json()
    return body["likes"], body["dislikes"]


def test_like_and_unlike(client, viewer, video):
    user, headers = viewer

    response = client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)

    assert response.status_code == 201
    assert response.json()["user_id"] == user["id"]
    assert response.json()["video_id"] == video["id"]
    assert client.get(f"/api/likes/check/{video['id']}", headers=headers).json() == {"is_liked": True}
    assert counters(client, video["id"]) == (1, 0)

    response = client.delete(f"/api/likes/{video['id']}", headers=headers)

    assert response.status_code == 200
    assert client.get(f"/api/likes/check/{video['id']}", headers=headers).json() == {"is_liked": False}
    assert counters(client, video["id"]) == (0, 0)


def test_liking_twice_counts_once(client, viewer, video):
    _, headers = viewer

    client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)
    second = client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)

    assert second.status_code == 201
    assert counters(client, video["id"]) == (1, 0)


def test_unlike_without_like(client, viewer, video):
    _, headers = viewer

    response = client.delete(f"/api/likes/{video['id']}", headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Like not found"
    assert counters(client, video["id"]) == (0, 0)


def test_like_unknown_video(client, viewer):
    _, headers = viewer

    assert client.post("/api/likes", json={"video_id": 999}, headers=headers).status_code == 404


def test_reactions_require_auth(client, video):
    assert client.post("/api/likes", json={"video_id": video["id"]}).status_code == 401
    assert client.post("/api/dislikes", json={"video_id": video["id"]}).status_code == 401


def test_dislike_and_undislike(client, viewer, video):
    _, headers = viewer

    assert client.post("/api/dislikes", json={"video_id": video["id"]}, headers=headers).status_code == 201
    assert client.get(f"/api/dislikes/check/{video['id']}", headers=headers).json() == {"is_disliked": True}
    assert counters(client, video["id"]) == (0, 1)

    assert client.delete(f"/api/dislikes/{video['id']}", headers=headers).status_code == 200
    assert counters(client, video["id"]) == (0, 0)

    response = client.delete(f"/api/dislikes/{video['id']}", headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Dislike not found"


def test_like_and_dislike_are_independent(client, viewer, video):
    _, headers = viewer

    client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)
    client.post("/api/dislikes", json={"video_id": video["id"]}, headers=headers)

    assert counters(client, video["id"]) == (1, 1)


def test_counters_track_rows_across_users(client, uploader, viewer, video, db_session):
    _, viewer_headers = viewer
    _, uploader_headers = uploader
    _, third_headers = register(client, "third")

    for headers in (viewer_headers, uploader_headers, third_headers):
        client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)
    client.delete(f"/api/likes/{video['id']}", headers=uploader_headers)
    client.post("/api/dislikes", json={"video_id": video["id"]}, headers=uploader_headers)

    row = db_session.get(Video, video["id"])
    likes = db_session.query(VideoLike).filter(VideoLike.video_id == video["id"]).count()
    dislikes = db_session.query(VideoDislike).filter(VideoDislike.video_id == video["id"]).count()

    assert (row.likes, row.dislikes) == (likes, dislikes) == (2, 1)


def test_concurrent_duplicate_like_returns_existing_row(monkeypatch, viewer, video, db_session):
    user, _ = viewer

    # Another request inserts the same like between the lookup and the insert
    other = SessionLocal()
    try:
        storage.like_video(other, user["id"], video["id"])
    finally:
        other.close()

    real_get_reaction = storage._get_reaction
    calls = []

    def stale_lookup(db, model, user_id, video_id):
        calls.append(model)
        if len(calls) == 1:
            return None
        return real_get_reaction(db, model, user_id, video_id)

    monkeypatch.setattr(storage, "_get_reaction", stale_lookup)

    like = storage.like_video(db_session, user["id"], video["id"])

    assert like.user_id == user["id"]
    assert like.video_id == video["id"]
    assert db_session.get(Video, video["id"]).likes == 1
    assert db_session.query(VideoLike).count() == 1


def test_deleting_video_removes_reactions(client, uploader, viewer, video, db_session):
    _, owner_headers = uploader
    _, headers = viewer
    client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)
    client.post("/api/dislikes", json={"video_id": video["id"]}, headers=headers)

    client.delete(f"/api/videos/{video['id']}", headers=owner_headers)

    assert db_session.query(VideoLike).count() == 0
    assert db_session.query(VideoDislike).count() == 0
