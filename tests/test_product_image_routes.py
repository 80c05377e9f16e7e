"""
Tests for the /api/internal/product-image routes.

Covers:
- success envelope and camelCase record shape
- list projection and gallery order
- NOT_FOUND (404) and VALIDATION_ERROR (400) envelopes
"""
from datetime import datetime

import pytest

pytestmark = pytest.mark.asyncio

BASE = "/api/internal/product-image"

FULL_FIELDS = {
    "id", "productId", "url", "caption", "isPrimary", "displayOrder",
    "width", "height", "rotation", "dateCreated", "dateModified",
}
LIST_FIELDS = {"id", "productId", "url", "caption", "isPrimary", "displayOrder", "dateCreated"}


def parse_timestamp(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create(http_client, **body):
    payload = {"productId": 9, "url": "https://x/a.jpg", **body}
    response = await http_client.post(BASE, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_returns_full_record(http_client):
    response = await http_client.post(BASE, json={"productId": 9, "url": "https://x/a.jpg", "caption": "Front"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert set(body["data"]) == FULL_FIELDS
    assert body["data"]["caption"] == "Front"
    assert body["data"]["displayOrder"] == 1
    assert body["data"]["width"] == 1200
    assert body["data"]["height"] == 800
    assert body["data"]["rotation"] == 0


async def test_create_ignores_client_timestamps(http_client):
    data = await create(http_client, dateCreated="1999-01-01T00:00:00Z")

    assert not data["dateCreated"].startswith("1999")


async def test_list_uses_light_projection_in_gallery_order(http_client):
    late = await create(http_client, displayOrder=5)
    early = await create(http_client, url="https://x/b.jpg", displayOrder=2)
    await create(http_client, productId=10)

    response = await http_client.get(BASE, params={"productId": 9})

    assert response.status_code == 200
    items = response.json()["data"]
    assert [item["id"] for item in items] == [early["id"], late["id"]]
    assert all(set(item) == LIST_FIELDS for item in items)


async def test_list_without_filter_returns_every_product(http_client):
    await create(http_client, productId=1)
    await create(http_client, productId=2)

    response = await http_client.get(BASE)

    assert {item["productId"] for item in response.json()["data"]} == {1, 2}


async def test_get_update_and_delete_round(http_client):
    image = await create(http_client, caption="Front", rotation=90)

    response = await http_client.put(f"{BASE}/{image['id']}", json={"url": "https://x/new.jpg", "width": 640})
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["url"] == "https://x/new.jpg"
    assert updated["width"] == 640
    assert updated["caption"] == "Front"
    assert updated["rotation"] == 90
    assert updated["dateCreated"].endswith("Z")
    assert updated["dateModified"].endswith("Z")
    assert parse_timestamp(updated["dateModified"]) >= parse_timestamp(updated["dateCreated"])

    response = await http_client.delete(f"{BASE}/{image['id']}")
    assert response.status_code == 200
    assert response.json()["data"] == {"message": "Product image deleted successfully"}

    response = await http_client.get(f"{BASE}/{image['id']}")
    assert response.status_code == 404


async def test_set_primary_and_reorder(http_client):
    first = await create(http_client)
    second = await create(http_client, url="https://x/b.jpg", isPrimary=True)

    response = await http_client.patch(f"{BASE}/{first['id']}/set-primary")
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Primary image set successfully"

    response = await http_client.patch(f"{BASE}/{first['id']}/reorder", json={"newOrder": 7})
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Product image reordered successfully"

    items = (await http_client.get(BASE, params={"productId": 9})).json()["data"]
    by_id = {item["id"]: item for item in items}
    assert by_id[first["id"]]["isPrimary"] is True
    assert by_id[first["id"]]["displayOrder"] == 7
    assert by_id[second["id"]]["isPrimary"] is False
    assert [item["id"] for item in items] == [second["id"], first["id"]]


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("GET", "/404", None),
        ("PUT", "/404", {"url": "https://x/a.jpg"}),
        ("DELETE", "/404", None),
        ("PATCH", "/404/reorder", {"newOrder": 1}),
        ("PATCH", "/404/set-primary", None),
    ],
)
async def test_missing_id_returns_not_found_envelope(http_client, method, path, body):
    response = await http_client.request(method, f"{BASE}{path}", json=body)

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Product image not found"},
    }


@pytest.mark.parametrize(
    "body, field",
    [
        ({"url": "https://x/a.jpg"}, "productId"),
        ({"productId": 9}, "url"),
        ({"productId": 9, "url": "not a url"}, "url"),
        ({"productId": 9, "url": "https://x/" + "a" * 500}, "url"),
        ({"productId": 9, "url": "https://x/a.jpg", "caption": "c" * 151}, "caption"),
        ({"productId": 9, "url": "https://x/a.jpg", "rotation": 45}, "rotation"),
        ({"productId": 9, "url": "https://x/a.jpg", "displayOrder": -1}, "displayOrder"),
        ({"productId": 9, "url": "https://x/a.jpg", "width": 0}, "width"),
        ({"productId": 0, "url": "https://x/a.jpg"}, "productId"),
    ],
)
async def test_create_rejects_malformed_payload(http_client, body, field):
    response = await http_client.post(BASE, json=body)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert field in {detail["field"] for detail in error["details"]}


async def test_update_requires_url(http_client):
    image = await create(http_client)

    response = await http_client.put(f"{BASE}/{image['id']}", json={"caption": "x"})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "url"


async def test_reorder_rejects_negative_order(http_client):
    image = await create(http_client)

    response = await http_client.patch(f"{BASE}/{image['id']}/reorder", json={"newOrder": -3})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_non_positive_id_is_a_validation_error(http_client):
    response = await http_client.get(f"{BASE}/0")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
