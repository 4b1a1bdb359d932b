from fastapi.testclient import TestClient

ALICE_HEADERS = {"Authorization": "Bearer alice-token"}


def test_status_reports_database_and_blob_store(client: TestClient) -> None:
    response = client.get("/api/status", headers=ALICE_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert [item["service"] for item in body] == ["database", "blob_store"]
    assert all(item["status"] == "ok" for item in body)
    assert body[1]["details"].startswith("free=")
