import os

from Endpoints.users import engagement_rate
from tests.conftest import UPLOAD_DIR, png_bytes, upload_video


def test_get_profile(client, viewer):
    user, _ = viewer

    response = client.get(f"/api/users/{user['id']}")

    assert response.status_code == 200
    assert response.json()["username"] == "viewer"
    assert client.get("/api/users/999").status_code == 404


def test_update_own_profile(client, viewer):
    user, headers = viewer

    response = client.put(
        f"/api/users/{user['id']}",
        json={"username": "watcher", "bio": "Monke fan"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["username"] == "watcher"
    assert response.json()["bio"] == "Monke fan"


def test_cannot_update_someone_else(client, uploader, viewer):
    user, _ = uploader
    _, headers = viewer

    response = client.put(f"/api/users/{user['id']}", json={"bio": "hacked"}, headers=headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "You can only update your own profile"


def test_update_to_taken_username(client, uploader, viewer):
    user, headers = viewer

    response = client.put(f"/api/users/{user['id']}", json={"username": "uploader"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Username already taken"


def test_avatar_upload_replaces_previous(client, viewer):
    user, headers = viewer

    first = client.post(
        f"/api/users/{user['id']}/avatar",
        files={"avatar": ("me.png", png_bytes(), "image/png")},
        headers=headers,
    ).json()["avatar"]
    second = client.post(
        f"/api/users/{user['id']}/avatar",
        files={"avatar": ("me2.png", png_bytes(color=(0, 0, 255)), "image/png")},
        headers=headers,
    ).json()["avatar"]

    assert second.startswith("/uploads/")
    assert os.path.exists(os.path.join(UPLOAD_DIR, second.rsplit("/", 1)[1]))
    assert not os.path.exists(os.path.join(UPLOAD_DIR, first.rsplit("/", 1)[1]))


def test_avatar_requires_file(client, viewer):
    user, headers = viewer

    response = client.post(f"/api/users/{user['id']}/avatar", headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_user_videos(client, uploader, viewer):
    user, headers = uploader
    video = upload_video(client, headers)
    viewer_user, _ = viewer

    assert [v["id"] for v in client.get(f"/api/users/{user['id']}/videos").json()] == [video["id"]]
    assert client.get(f"/api/users/{viewer_user['id']}/videos").json() == []


def test_engagement_rate():
    assert engagement_rate(3, 1, 1, 10) == 50.0
    assert engagement_rate(1, 0, 0, 3) == 33.33
    assert engagement_rate(5, 5, 5, 0) == 0.0


def test_analytics(client, uploader, viewer, video):
    user, _ = uploader
    _, headers = viewer
    for _ in range(4):
        client.get(f"/api/videos/{video['id']}")
    client.post("/api/likes", json={"video_id": video["id"]}, headers=headers)
    client.post(f"/api/videos/{video['id']}/comments", json={"content": "gg"}, headers=headers)

    response = client.get(f"/api/users/{user['id']}/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["videos_count"] == 1
    assert body["total_views"] == 4
    assert body["total_likes"] == 1
    assert body["total_comments"] == 1
    assert body["videos"][0]["engagement_rate"] == 50.0
