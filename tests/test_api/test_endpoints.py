import pytest
from fastapi.testclient import TestClient

from thumbnail_service.api.dependencies import get_image_processing_service, get_storage_service
from thumbnail_service.main import app

ACCOUNT = "https://acct.dfs.core.windows.net"
CONTAINER = "main"


@pytest.fixture
def client(storage_service, image_processing_service):
    """Test client wired to the temporary local storage."""
    app.dependency_overrides[get_storage_service] = lambda: storage_service
    app.dependency_overrides[get_image_processing_service] = lambda: image_processing_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def blob_created(path):
    return {
        "id": "evt-1",
        "eventType": "Microsoft.Storage.BlobCreated",
        "subject": f"/blobServices/default/containers/{path}",
        "eventTime": "2024-05-01T10:00:00Z",
        "data": {"url": f"{ACCOUNT}/{path}", "api": "FlushWithClose"},
        "dataVersion": "",
    }


def test_subscription_validation_handshake(client):
    response = client.post("/api/v1/events", json=[{
        "id": "evt-0",
        "eventType": "Microsoft.EventGrid.SubscriptionValidationEvent",
        "data": {"validationCode": "512d38b6-c7b8-40c8-89fe-f46f9e9622b6"},
    }])

    assert response.status_code == 200
    assert response.json() == {"validationResponse": "512d38b6-c7b8-40c8-89fe-f46f9e9622b6"}


@pytest.mark.asyncio
async def test_blob_created_event_generates_thumbnail(client, storage_service, make_image):
    await storage_service.upload_file(
        CONTAINER, "alice/images/photo.jpg", make_image(800, 400, image_format="JPEG"), content_type="image/jpeg"
    )

    response = client.post("/api/v1/events", json=[blob_created("main/alice/images/photo.jpg")])

    assert response.status_code == 200
    data = response.json()
    assert data["received"] == 1
    assert data["processed"] == 1
    assert data["results"][0]["thumbnail_path"] == "users/alice/thumbnails/photo.jpg-thumb"
    assert await storage_service.file_exists(CONTAINER, "users/alice/thumbnails/photo.jpg-thumb")


def test_unrelated_events_are_ignored(client):
    event = blob_created("main/alice/images/photo.jpg")
    event["eventType"] = "Microsoft.Storage.BlobDeleted"

    response = client.post("/api/v1/events", json=event)

    assert response.status_code == 200
    assert response.json()["ignored"] == 1


@pytest.mark.asyncio
async def test_rejected_mime_type_returns_415(client, storage_service):
    await storage_service.upload_file(CONTAINER, "alice/docs/report.pdf", b"%PDF", content_type="application/pdf")

    response = client.post("/api/v1/events", json=[blob_created("main/alice/docs/report.pdf")])

    assert response.status_code == 415
    assert "application/pdf" in response.json()["detail"]
    assert await storage_service.file_exists(CONTAINER, "alice/docs/report.pdf") is False


def test_malformed_blob_url_returns_400(client):
    response = client.post("/api/v1/thumbnails", json={"url": f"{ACCOUNT}/main/alice/photo.jpg"})

    assert response.status_code == 400


def test_missing_source_returns_404(client):
    response = client.post("/api/v1/thumbnails", json={"url": f"{ACCOUNT}/main/alice/images/ghost.jpg"})

    assert response.status_code == 404


def test_invalid_event_returns_400(client):
    response = client.post("/api/v1/events", json={"data": {}})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_manual_thumbnail_endpoint(client, storage_service, make_image):
    await storage_service.upload_file(
        CONTAINER, "public/avatars/bob/pic.png", make_image(100, 100), content_type="image/png"
    )

    response = client.post("/api/v1/thumbnails", json={"url": f"{ACCOUNT}/main/public/avatars/bob/pic.png"})

    assert response.status_code == 200
    data = response.json()
    assert data["thumbnail_path"] == "public/thumbnails/bob/pic.png-thumb"
    assert data["tagged"] is True


def test_provision_user_directory(client):
    response = client.post("/api/v1/accounts/user123/directory")

    assert response.status_code == 200
    assert response.json()["path"] == "users/user123"
    assert response.json()["acl"] == "user:user123:rw-,other::---"


def test_health_endpoints(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/api/v1/health").json()["status"] == "ok"

    storage = client.get("/api/v1/health/storage")
    assert storage.status_code == 200
    assert storage.json()["backend"] == "local"
