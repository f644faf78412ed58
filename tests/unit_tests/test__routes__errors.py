import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tests.fixtures.app_client import TEST_EMAIL, TEST_PASSWORD, auth_headers, register
from tests.fixtures.images import HELLO_WORLD, HELLO_WORLD_B64

MISSING_ID = "5f1e881cc7ba06511e683b23"


def create_file(client: TestClient, token: str, **body):
    response = client.post("/files", json=body, headers=auth_headers(token))
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


@pytest.mark.parametrize("body, message", [
    ({}, "Missing email"),
    ({"password": "pw"}, "Missing email"),
    ({"email": "a@b.c"}, "Missing password"),
])
def test_register_missing_fields(client: TestClient, body, message):
    response = client.post("/users", json=body)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": message}


def test_register_twice(client: TestClient):
    register(client)
    response = client.post("/users", json={"email": TEST_EMAIL, "password": "different"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Already exist"}


@pytest.mark.parametrize("auth", [None, (TEST_EMAIL, "wrong"), ("nobody@example.com", TEST_PASSWORD)])
def test_connect_rejects_bad_credentials(client: TestClient, auth):
    register(client)
    response = client.get("/connect", auth=auth)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.parametrize("authorization", [
    "Basic !!!notbase64",
    "Basic Ym9iQGR5bGFuLmNvbQ==",
    "Bearer some-token",
])
def test_connect_rejects_malformed_basic_header(client: TestClient, authorization):
    register(client)
    response = client.get("/connect", headers={"Authorization": authorization})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


def test_unknown_route_is_not_found(client: TestClient):
    response = client.get("/nothing/here")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Not found"}


@pytest.mark.parametrize("method, path", [
    ("get", "/users/me"),
    ("get", "/disconnect"),
    ("get", "/files"),
    ("get", f"/files/{MISSING_ID}"),
    ("put", f"/files/{MISSING_ID}/publish"),
    ("put", f"/files/{MISSING_ID}/unpublish"),
])
@pytest.mark.parametrize("headers", [{}, {"X-Token": "not-a-session"}])
def test_token_required(client: TestClient, method, path, headers):
    response = getattr(client, method)(path, headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


def test_auth_is_checked_before_the_body(client: TestClient):
    response = client.post("/files", json={})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.parametrize("body, message", [
    ({}, "Missing name"),
    ({"name": "a.txt"}, "Missing type"),
    ({"name": "a.txt", "type": "video", "data": HELLO_WORLD_B64}, "Missing type"),
    ({"name": "a.txt", "type": "file"}, "Missing data"),
    ({"name": "a.png", "type": "image"}, "Missing data"),
    ({"name": "a.txt", "type": "file", "data": HELLO_WORLD_B64, "parentId": MISSING_ID}, "Parent not found"),
])
def test_create_file_validation(client: TestClient, token: str, body, message):
    response = client.post("/files", json=body, headers=auth_headers(token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": message}

    listing = client.get("/files", headers=auth_headers(token)).json()
    assert listing == []


def test_parent_must_be_a_folder(client: TestClient, token: str):
    parent = create_file(client, token, name="a.txt", type="file", data=HELLO_WORLD_B64)

    response = client.post(
        "/files",
        json={"name": "b.txt", "type": "file", "data": HELLO_WORLD_B64, "parentId": parent["id"]},
        headers=auth_headers(token),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Parent is not a folder"}


def test_cannot_file_into_another_users_folder(client: TestClient, token: str, other_token: str):
    folder = create_file(client, other_token, name="theirs", type="folder")

    response = client.post(
        "/files",
        json={"name": "b.txt", "type": "file", "data": HELLO_WORLD_B64, "parentId": folder["id"]},
        headers=auth_headers(token),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Parent not found"}


def test_other_users_files_are_not_found(client: TestClient, token: str, other_token: str):
    record = create_file(client, token, name="a.txt", type="file", isPublic=True, data=HELLO_WORLD_B64)

    for response in (
        client.get(f"/files/{record['id']}", headers=auth_headers(other_token)),
        client.put(f"/files/{record['id']}/publish", headers=auth_headers(other_token)),
        client.put(f"/files/{record['id']}/unpublish", headers=auth_headers(other_token)),
        client.get(f"/files/{MISSING_ID}", headers=auth_headers(token)),
        client.get("/files/not-an-object-id", headers=auth_headers(token)),
    ):
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Not found"}

    # Still public and untouched
    assert client.get(f"/files/{record['id']}", headers=auth_headers(token)).json()["isPublic"] is True


def test_private_data_hidden_from_others(client: TestClient, token: str, other_token: str):
    record = create_file(client, token, name="a.txt", type="file", data=HELLO_WORLD_B64)
    data_url = f"/files/{record['id']}/data"

    for headers in ({}, {"X-Token": "not-a-session"}, auth_headers(other_token)):
        response = client.get(data_url, headers=headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Not found"}


def test_public_data_ignores_bad_token(client: TestClient, token: str):
    record = create_file(client, token, name="a.txt", type="file", isPublic=True, data=HELLO_WORLD_B64)

    response = client.get(f"/files/{record['id']}/data", headers={"X-Token": "not-a-session"})
    assert response.status_code == status.HTTP_200_OK
    assert response.content == HELLO_WORLD


def test_folder_has_no_data(client: TestClient, token: str):
    folder = create_file(client, token, name="docs", type="folder")

    response = client.get(f"/files/{folder['id']}/data", headers=auth_headers(token))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "A folder doesn't have content"}


def test_missing_thumbnail_is_not_found(client: TestClient, token: str):
    record = create_file(client, token, name="a.png", type="image", data=HELLO_WORLD_B64)

    response = client.get(f"/files/{record['id']}/data", params={"size": 250}, headers=auth_headers(token))
    assert response.status_code == status.HTTP_404_NOT_FOUND

    # Unsupported sizes fall back to the original
    response = client.get(f"/files/{record['id']}/data", params={"size": 42}, headers=auth_headers(token))
    assert response.status_code == status.HTTP_200_OK
    assert response.content == HELLO_WORLD


def test_unexpected_errors_become_500(client: TestClient, token: str, app, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("store went away")

    monkeypatch.setattr(app.state.file_service, "list", explode)

    response = client.get("/files", headers=auth_headers(token))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Internal server error"}
