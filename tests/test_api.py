"""Tests for the HTTP routes."""

from fastapi.testclient import TestClient

from photo_diary.api.app import create_app
from tests.conftest import Harness


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_then_read_photo(container, harness: Harness, png_bytes: bytes) -> None:
    client = TestClient(create_app(container))

    upload = client.post(
        "/photos", content=png_bytes, headers={"content-type": "image/png"}
    )

    assert upload.status_code == 201
    body = upload.json()
    assert body["skipped_labels"] == []
    assert body["thumbnail_signed_url"].startswith("https://storage.test/thumbnail/")

    detail = client.get(f"/photos/{body['photo_id']}")
    assert detail.status_code == 200
    data = detail.json()
    assert data["categories"] == ["개", "야외"]
    assert data["diary_content"] == "잔디 위의 개"
    assert data["emotions"] == {"main": None, "subs": []}


def test_upload_reports_fatal_stage(container, harness: Harness, png_bytes: bytes) -> None:
    harness.caption_translator.failing = {"a dog on grass"}
    client = TestClient(create_app(container))

    response = client.post("/photos", content=png_bytes)

    assert response.status_code == 502
    assert response.json()["stage"] == "translate_caption"
    assert harness.photo_repository.photos == {}


def test_upload_rejects_empty_body(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/photos", content=b"")

    assert response.status_code == 400


def test_missing_photo_is_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/photos/123")

    assert response.status_code == 404
    assert response.json() == {"detail": "photo 123 not found"}


def test_categories_and_category_photos(
    container, harness: Harness, png_bytes: bytes
) -> None:
    client = TestClient(create_app(container))
    photo_id = client.post("/photos", content=png_bytes).json()["photo_id"]

    categories = client.get("/categories").json()["categories"]
    assert [(item["name"], item["count"]) for item in categories] == [
        ("개", 1),
        ("야외", 1),
    ]

    listed = client.get(f"/categories/{categories[0]['category_id']}/photos").json()
    assert [photo["photo_id"] for photo in listed["photos"]] == [photo_id]

    assert client.get("/photos").json()["photos"][0]["photo_id"] == photo_id
    assert client.get("/categories/999/photos").status_code == 404
