"""
Tests for ProductImageApiClient against the in-process app.
"""
import httpx
import pytest

from product_gallery.client import GalleryApiError, ProductImageApiClient, ProductImageGalleryController

pytestmark = pytest.mark.asyncio


@pytest.fixture
def api_client(http_client):
    http_client.base_url = "http://testserver/api/internal"
    return ProductImageApiClient(http_client=http_client)


async def test_create_and_list_unwrap_envelope(api_client):
    created = await api_client.create({"productId": 9, "url": "https://x/a.jpg", "caption": "Front"})

    images = await api_client.list(product_id=9)

    assert created.caption == "Front"
    assert created.width == 1200
    assert [img.id for img in images] == [created.id]
    assert images[0].product_id == 9


async def test_update_sends_only_given_fields(api_client):
    created = await api_client.create({"productId": 9, "url": "https://x/a.jpg", "caption": "Front"})

    updated = await api_client.update(created.id, {"url": "https://x/b.jpg"})

    assert updated.url == "https://x/b.jpg"
    assert updated.caption == "Front"


async def test_not_found_raises_gallery_api_error(api_client):
    with pytest.raises(GalleryApiError) as exc_info:
        await api_client.get_by_id(404)

    assert exc_info.value.code == "NOT_FOUND"
    assert exc_info.value.status_code == 404


async def test_invalid_payload_is_rejected_before_sending():
    def handler(request):
        raise AssertionError("request should not be sent")

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gallery")
    async with http_client:
        client = ProductImageApiClient(http_client=http_client)

        with pytest.raises(GalleryApiError) as exc_info:
            await client.create({"productId": 9, "url": "https://x/a.jpg", "rotation": 45})

    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.details[0]["field"] == "rotation"


async def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gallery")
    async with http_client:
        client = ProductImageApiClient(http_client=http_client)

        with pytest.raises(GalleryApiError) as exc_info:
            await client.list(product_id=9)

    assert exc_info.value.code == "INTERNAL_ERROR"
    assert exc_info.value.status_code is None


async def test_controller_end_to_end(api_client):
    first = await api_client.create({"productId": 9, "url": "https://x/a.jpg"})
    second = await api_client.create({"productId": 9, "url": "https://x/b.jpg", "isPrimary": True})
    controller = ProductImageGalleryController(9, api_client)
    await controller.refresh()

    await controller.set_primary(first.id)
    await controller.reorder_image(first.id, 7)

    assert [img.id for img in controller.images] == [second.id, first.id]
    assert [img.is_primary for img in controller.images] == [False, True]
