import asyncio
import base64

from fastapi.testclient import TestClient


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def test_file_routes_require_token(client: TestClient) -> None:
    assert client.post("/files", json={"name": "a", "type": "folder"}).status_code == 401
    assert client.get("/files").status_code == 401
    assert client.get("/files/1").status_code == 401
    assert client.put("/files/1/publish").status_code == 401
    response = client.get("/files", headers={"X-Token": "unknown"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_create_folder_and_child_round_trip_parent_id(client, owner, login) -> None:
    headers = login(owner)

    folder = client.post("/files", json={"name": "docs", "type": "folder"}, headers=headers)
    assert folder.status_code == 201
    assert folder.json() == {
        "id": folder.json()["id"],
        "userId": owner.id,
        "name": "docs",
        "type": "folder",
        "isPublic": False,
        "parentId": 0,
    }

    folder_id = folder.json()["id"]
    child = client.post(
        "/files",
        json={"name": "a.txt", "type": "file", "parentId": folder_id, "data": _b64(b"hi")},
        headers=headers,
    )
    assert child.status_code == 201

    fetched = client.get(f"/files/{child.json()['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["parentId"] == folder_id


def test_create_file_without_data_is_rejected(client, owner, login) -> None:
    response = client.post(
        "/files",
        json={"name": "a.txt", "type": "file", "isPublic": True, "parentId": 0},
        headers=login(owner),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing data"}


def test_create_file_with_malformed_body_is_bad_request(client, owner, login) -> None:
    response = client.post(
        "/files",
        content=b"not json",
        headers={**login(owner), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_create_file_with_unknown_parent(client, owner, login) -> None:
    response = client.post(
        "/files",
        json={"name": "a", "type": "folder", "parentId": "nope"},
        headers=login(owner),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Parent not found"}


def test_list_files_pagination(client, owner, login) -> None:
    headers = login(owner)
    ids = [
        client.post("/files", json={"name": f"f{i}", "type": "folder"}, headers=headers).json()["id"]
        for i in range(25)
    ]

    first = client.get("/files", params={"page": 0}, headers=headers)
    second = client.get("/files", params={"page": 1}, headers=headers)

    assert [f["id"] for f in first.json()] == ids[:20]
    assert [f["id"] for f in second.json()] == ids[20:]
    assert client.get("/files", params={"page": "x"}, headers=headers).json() == first.json()


def test_list_files_with_invalid_parent_returns_empty_array(client, owner, login) -> None:
    headers = login(owner)
    client.post("/files", json={"name": "docs", "type": "folder"}, headers=headers)

    response = client.get("/files", params={"parentId": "not-an-id"}, headers=headers)

    assert response.status_code == 200
    assert response.json() == []


def test_show_is_owner_only(client, owner, visitor, login) -> None:
    folder_id = client.post(
        "/files", json={"name": "docs", "type": "folder", "isPublic": True}, headers=login(owner)
    ).json()["id"]

    response = client.get(f"/files/{folder_id}", headers=login(visitor))

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_publish_unpublish_idempotent(client, owner, visitor, login) -> None:
    headers = login(owner)
    file_id = client.post(
        "/files", json={"name": "a.txt", "type": "file", "data": _b64(b"x")}, headers=headers
    ).json()["id"]

    for path, expected in [
        ("publish", True),
        ("publish", True),
        ("unpublish", False),
        ("unpublish", False),
    ]:
        response = client.put(f"/files/{file_id}/{path}", headers=headers)
        assert response.status_code == 200
        assert response.json()["isPublic"] is expected

    assert client.put(f"/files/{file_id}/publish", headers=login(visitor)).status_code == 404


def test_get_file_data_visibility(client, owner, visitor, login) -> None:
    headers = login(owner)
    file_id = client.post(
        "/files", json={"name": "a.txt", "type": "file", "data": _b64(b"hello")}, headers=headers
    ).json()["id"]

    assert client.get(f"/files/{file_id}/data").status_code == 404
    assert client.get(f"/files/{file_id}/data", headers=login(visitor)).status_code == 404

    response = client.get(f"/files/{file_id}/data", headers=headers)
    assert response.status_code == 200
    assert response.content == b"hello"
    assert response.headers["content-type"].startswith("text/plain")

    client.put(f"/files/{file_id}/publish", headers=headers)
    assert client.get(f"/files/{file_id}/data").content == b"hello"


def test_get_folder_data_is_bad_request(client, owner, login) -> None:
    headers = login(owner)
    folder_id = client.post(
        "/files", json={"name": "docs", "type": "folder"}, headers=headers
    ).json()["id"]

    response = client.get(f"/files/{folder_id}/data", headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "A folder doesn't have content"}


def test_thumbnail_not_found_before_worker_runs(
    client, owner, login, thumbnail_service, message_queue, png_bytes
) -> None:
    headers = login(owner)
    image = client.post(
        "/files", json={"name": "cat.png", "type": "image", "data": _b64(png_bytes)}, headers=headers
    ).json()

    before = client.get(f"/files/{image['id']}/data", params={"size": 100}, headers=headers)
    assert before.status_code == 404

    asyncio.run(thumbnail_service.process(message_queue.messages[0][1]))

    after = client.get(f"/files/{image['id']}/data", params={"size": 100}, headers=headers)
    assert after.status_code == 200
    assert after.headers["content-type"] == "image/png"


def test_ids_beyond_int64_are_not_found(client, owner, login) -> None:
    headers = login(owner)
    too_large = "9999999999999999999"

    assert client.get(f"/files/{too_large}", headers=headers).status_code == 404
    assert client.put(f"/files/{too_large}/publish", headers=headers).status_code == 404
    assert client.get(f"/files/{too_large}/data", headers=headers).status_code == 404
    response = client.get("/files", params={"parentId": too_large}, headers=headers)

    assert response.status_code == 200
    assert response.json() == []


def test_create_file_with_too_long_name_is_bad_request(client, owner, login) -> None:
    response = client.post(
        "/files",
        json={"name": "a" * 256, "type": "file", "data": _b64(b"x")},
        headers=login(owner),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Name too long"}


def test_unexpected_error_is_internal_server_error(client, db, owner, login) -> None:
    db.fail_file_create = True

    response = client.post(
        "/files", json={"name": "docs", "type": "folder"}, headers=login(owner)
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
