from fastapi.testclient import TestClient

from product_gallery.config import settings
from product_gallery.main import app


def test_root():
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {
        "message": settings.API_TITLE,
        "status": "healthy",
        "version": settings.API_VERSION,
    }


def test_health_check():
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_unknown_route_uses_error_envelope():
    client = TestClient(app)
    response = client.get("/api/internal/no-such-route")
    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_wrong_method_uses_error_envelope():
    client = TestClient(app)
    response = client.post("/api/internal/product-image/1")
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "HTTP_ERROR"
