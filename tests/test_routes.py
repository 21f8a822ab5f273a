import io

import pytest

from conftest import OWNER_PASSWORD

GITHUB = {"platform": "GitHub", "username": "a@b.com", "password": "x", "accountIdentity": "a@b.com",
          "accountType": "#1-TopPriority"}


def upload(client, text: str):
    return client.post(
        '/api/credentials/csv',
        data={"file": (io.BytesIO(text.encode("utf-8")), "credentials.csv")},
        content_type="multipart/form-data",
    )


@pytest.mark.parametrize("method, path", [
    ("get", "/api/credentials"),
    ("post", "/api/credentials"),
    ("get", "/api/credentials/1"),
    ("patch", "/api/credentials/1"),
    ("delete", "/api/credentials/1"),
    ("post", "/api/credentials/bulk-delete"),
    ("post", "/api/credentials/csv"),
    ("get", "/api/credentials/export"),
    ("get", "/api/credentials/health"),
    ("get", "/auth/me"),
])
def test_credential_routes_fail_closed_without_session(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.get_json()["success"] is False


def test_register_login_logout_flow(client):
    response = client.post('/auth/register', json={"username": "New@Example.com", "password": OWNER_PASSWORD})
    assert response.status_code == 201
    assert response.get_json()["user"]["username"] == "new@example.com"

    assert client.get('/auth/me').status_code == 200
    assert client.post('/auth/logout').status_code == 200
    assert client.get('/auth/me').status_code == 401

    bad = client.post('/auth/login', json={"username": "new@example.com", "password": "wrong"})
    assert bad.status_code == 401
    good = client.post('/auth/login', json={"username": "new@example.com", "password": OWNER_PASSWORD})
    assert good.status_code == 200


def test_register_rejects_weak_password_and_existing_username(client, owner):
    weak = client.post('/auth/register', json={"username": "weak@example.com", "password": "password"})
    assert weak.status_code == 400
    assert "password" in weak.get_json()["fields"]

    taken = client.post('/auth/register', json={"username": owner.username, "password": OWNER_PASSWORD})
    assert taken.status_code == 409


def test_create_applies_status_default_and_blank_optionals(logged_in_client):
    response = logged_in_client.post('/api/credentials', json={**GITHUB, "url": "", "accountName": None})

    assert response.status_code == 201
    body = response.get_json()
    assert body["status"] == "Active"
    assert body["url"] is None
    assert body["accountName"] is None
    assert body["lastChanged"]


def test_create_duplicate_returns_conflict(logged_in_client):
    assert logged_in_client.post('/api/credentials', json=GITHUB).status_code == 201

    response = logged_in_client.post('/api/credentials', json=GITHUB)

    assert response.status_code == 409
    assert "exact duplicate" in response.get_json()["error"]


def test_create_validation_failure_lists_fields(logged_in_client):
    response = logged_in_client.post('/api/credentials', json={"platform": "GitHub"})

    assert response.status_code == 400
    fields = response.get_json()["fields"]
    assert {"username", "password", "accountIdentity", "accountType"} <= set(fields)


def test_update_get_and_delete(logged_in_client):
    created = logged_in_client.post('/api/credentials', json=GITHUB).get_json()
    path = f"/api/credentials/{created['id']}"

    patched = logged_in_client.patch(path, json={"status": "Suspended", "recoveryEmail": "r@x.io"})
    assert patched.status_code == 200
    assert patched.get_json()["status"] == "Suspended"
    assert patched.get_json()["platform"] == "GitHub"

    again = logged_in_client.patch(path, json={"status": "Suspended", "recoveryEmail": "r@x.io"})
    assert again.status_code == 200

    assert logged_in_client.get(path).get_json()["recoveryEmail"] == "r@x.io"
    assert logged_in_client.delete(path).status_code == 200
    assert logged_in_client.get(path).status_code == 404
    assert logged_in_client.delete(path).status_code == 404
    assert logged_in_client.patch(path, json={"status": "Active"}).status_code == 404


def test_update_rejects_invalid_enum(logged_in_client):
    created = logged_in_client.post('/api/credentials', json=GITHUB).get_json()

    response = logged_in_client.patch(f"/api/credentials/{created['id']}", json={"accountType": "nope"})

    assert response.status_code == 400
    assert response.get_json()["fields"] == {"accountType": ["Invalid account type"]}


def test_non_integer_id_is_not_routed(logged_in_client):
    assert logged_in_client.delete('/api/credentials/abc').status_code == 404


def test_search_and_bulk_delete(logged_in_client):
    first = logged_in_client.post('/api/credentials', json=GITHUB).get_json()
    second = logged_in_client.post('/api/credentials', json={**GITHUB, "platform": "Gmail"}).get_json()

    assert len(logged_in_client.get('/api/credentials').get_json()) == 2
    found = logged_in_client.get('/api/credentials?q=GMAIL').get_json()
    assert [c["id"] for c in found] == [second["id"]]

    response = logged_in_client.post('/api/credentials/bulk-delete', json={"ids": [first["id"], second["id"], 999]})
    body = response.get_json()
    assert body["deleted"] == [first["id"], second["id"]]
    assert body["notFound"] == [999]
    assert body["success"] is False

    assert logged_in_client.post('/api/credentials/bulk-delete', json={"ids": "all"}).status_code == 400


def test_csv_upload_reports_rows(logged_in_client):
    csv_text = (
        "platform,username,password,accountIdentity\n"
        "GitHub,a@b.com,x,a@b.com\n"
        "GitHub,a@b.com,x,a@b.com\n"
        "NoPassword,u,,id\n"
    )

    response = upload(logged_in_client, csv_text)

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is False
    assert body["created"] == 1
    assert [error["row"] for error in body["errors"]] == [2, 3]
    assert body["errorReport"].startswith("CSV Import Summary Report\n")


def test_csv_upload_without_file_or_with_garbage(logged_in_client):
    missing = logged_in_client.post('/api/credentials/csv')
    assert missing.status_code == 400
    assert missing.get_json()["message"] == "No file uploaded"

    empty = upload(logged_in_client, "")
    assert empty.status_code == 400
    assert empty.get_json()["errorReport"].startswith("CSV Processing Error\n\n")


def test_export_download(logged_in_client):
    logged_in_client.post('/api/credentials', json=GITHUB)

    response = logged_in_client.get('/api/credentials/export')

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "attachment; filename=credentials.csv" in response.headers["Content-Disposition"]
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0].startswith("platform,accountName,url,username,password")
    assert lines[1].startswith("GitHub,,,a@b.com,x,a@b.com,#1-TopPriority,Active")


def test_health_endpoint(logged_in_client):
    logged_in_client.post('/api/credentials', json=GITHUB)

    body = logged_in_client.get('/api/credentials/health').get_json()

    assert body["total"] == 1
    assert body["activeStatus"] == 1


def test_users_cannot_see_each_others_credentials(client, owner, other_owner, credential_service, credential_data):
    foreign = credential_service.create_credential(other_owner.user_id, credential_data())
    client.post('/auth/login', json={"username": owner.username, "password": OWNER_PASSWORD})

    assert client.get('/api/credentials').get_json() == []
    assert client.get(f"/api/credentials/{foreign.id}").status_code == 404
