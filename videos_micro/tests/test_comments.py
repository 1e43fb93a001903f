def post_comment(client, headers, video_id, content="Nice climb"):
    return client.post(f"/api/videos/{video_id}/comments", json={"content": content}, headers=headers)


def test_create_and_list(client, viewer, video):
    user, headers = viewer

    response = post_comment(client, headers, video["id"], "  Nice climb  ")

    assert response.status_code == 201
    body = response.json()
    assert body["content"] == "Nice climb"
    assert body["user"]["username"] == user["username"]

    comments = client.get(f"/api/videos/{video['id']}/comments").json()
    assert [c["id"] for c in comments] == [body["id"]]


def test_comments_newest_first(client, viewer, video):
    _, headers = viewer
    first = post_comment(client, headers, video["id"], "first").json()
    second = post_comment(client, headers, video["id"], "second").json()

    comments = client.get(f"/api/videos/{video['id']}/comments").json()

    assert [c["id"] for c in comments] == [second["id"], first["id"]]


def test_blank_comment_rejected(client, viewer, video):
    _, headers = viewer

    assert post_comment(client, headers, video["id"], "   ").status_code == 422


def test_comment_on_missing_video(client, viewer):
    _, headers = viewer

    assert post_comment(client, headers, 999).status_code == 404
    assert client.get("/api/videos/999/comments").status_code == 404


def test_author_can_edit(client, viewer, video):
    _, headers = viewer
    comment = post_comment(client, headers, video["id"]).json()

    response = client.put(f"/api/comments/{comment['id']}", json={"content": "Edited"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["content"] == "Edited"


def test_other_user_cannot_edit(client, uploader, viewer, video):
    _, headers = viewer
    _, other_headers = uploader
    comment = post_comment(client, headers, video["id"]).json()

    response = client.put(f"/api/comments/{comment['id']}", json={"content": "Hijacked"}, headers=other_headers)

    assert response.status_code == 404


def test_delete_own_comment(client, viewer, video):
    _, headers = viewer
    comment = post_comment(client, headers, video["id"]).json()

    assert client.delete(f"/api/comments/{comment['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/videos/{video['id']}/comments").json() == []


def test_other_user_cannot_delete(client, uploader, viewer, video):
    _, headers = viewer
    _, other_headers = uploader
    comment = post_comment(client, headers, video["id"]).json()

    assert client.delete(f"/api/comments/{comment['id']}", headers=other_headers).status_code == 404


def test_admin_can_delete_any_comment(client, admin, viewer, video):
    _, headers = viewer
    _, admin_headers = admin
    comment = post_comment(client, headers, video["id"]).json()

    assert client.delete(f"/api/comments/{comment['id']}", headers=admin_headers).status_code == 200


def test_length_limit_applies_after_stripping(client, viewer, video):
    _, headers = viewer

    at_limit = post_comment(client, headers, video["id"], "  " + "x" * 2000 + "  ")
    over_limit = post_comment(client, headers, video["id"], "  " + "x" * 2001 + "  ")

    assert at_limit.status_code == 201
    assert at_limit.json()["content"] == "x" * 2000
    assert over_limit.status_code == 422
