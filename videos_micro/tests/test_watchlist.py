from tests.conftest import upload_video


def test_add_and_list(client, uploader, viewer):
    _, owner_headers = uploader
    _, headers = viewer
    older = upload_video(client, owner_headers, title="Older")
    newer = upload_video(client, owner_headers, title="Newer")

    assert client.post("/api/watchlist", json={"video_id": older["id"]}, headers=headers).status_code == 201
    assert client.post("/api/watchlist", json={"video_id": newer["id"]}, headers=headers).status_code == 201

    response = client.get("/api/watchlist", headers=headers)

    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == [newer["id"], older["id"]]


def test_adding_twice_keeps_one_entry(client, viewer, video):
    _, headers = viewer

    first = client.post("/api/watchlist", json={"video_id": video["id"]}, headers=headers).json()
    second = client.post("/api/watchlist", json={"video_id": video["id"]}, headers=headers).json()

    assert first["id"] == second["id"]
    assert len(client.get("/api/watchlist", headers=headers).json()) == 1


def test_watchlist_is_per_user(client, uploader, viewer, video):
    _, owner_headers = uploader
    _, headers = viewer

    client.post("/api/watchlist", json={"video_id": video["id"]}, headers=headers)

    assert client.get("/api/watchlist", headers=owner_headers).json() == []


def test_add_unknown_video(client, viewer):
    _, headers = viewer

    assert client.post("/api/watchlist", json={"video_id": 999}, headers=headers).status_code == 404


def test_check_and_remove(client, viewer, video):
    _, headers = viewer
    client.post("/api/watchlist", json={"video_id": video["id"]}, headers=headers)

    assert client.get(f"/api/watchlist/check/{video['id']}", headers=headers).json() == {"is_in_watchlist": True}

    response = client.delete(f"/api/watchlist/{video['id']}", headers=headers)

    assert response.status_code == 200
    assert client.get(f"/api/watchlist/check/{video['id']}", headers=headers).json() == {"is_in_watchlist": False}


def test_remove_missing_entry(client, viewer, video):
    _, headers = viewer

    response = client.delete(f"/api/watchlist/{video['id']}", headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Watchlist item not found"


def test_watchlist_requires_auth(client):
    assert client.get("/api/watchlist").status_code == 401
