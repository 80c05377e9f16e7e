"""
Async HTTP client for the product image API.
Unwraps the {"success", "data"} envelope and raises GalleryApiError for error envelopes.
"""
from typing import Any, Dict, List, Optional, Union
import logging

import httpx

from product_gallery.config import settings
from product_gallery.constants import INTERNAL_ERROR, VALIDATION_ERROR
from product_gallery.schemas import (
    ProductImageCreate,
    ProductImageListItem,
    ProductImageReorder,
    ProductImageResponse,
    ProductImageUpdate,
)
from product_gallery.validation import validate_payload

logger = logging.getLogger(__name__)

Payload = Union[Dict[str, Any], ProductImageCreate, ProductImageUpdate]


class GalleryApiError(Exception):
    """Error envelope (or transport failure) returned by the product image API."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[Any]] = None,
    ):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


class ProductImageApiClient:
    """
    Client for /product-image endpoints.

    Payloads are validated locally before being sent, so malformed input
    raises GalleryApiError(VALIDATION_ERROR) without a round trip.

    Usage:
        async with ProductImageApiClient() as client:
            images = await client.list(product_id=9)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.GALLERY_API_BASE_URL,
            timeout=timeout or settings.GALLERY_API_TIMEOUT,
        )

    async def __aenter__(self) -> "ProductImageApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Product image API request failed: {method} {url}: {str(e)}")
            raise GalleryApiError(INTERNAL_ERROR, str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success and isinstance(body, dict) and body.get("success"):
            return body.get("data")

        error = (body or {}).get("error") if isinstance(body, dict) else None
        error = error or {}
        logger.warning(
            f"Product image API error on {method} {url}: "
            f"{response.status_code} {error.get('code')} {error.get('message')}"
        )
        raise GalleryApiError(
            code=error.get("code", INTERNAL_ERROR),
            message=error.get("message", response.reason_phrase or "Request failed"),
            status_code=response.status_code,
            details=error.get("details"),
        )

    @staticmethod
    def _body(model, payload: Payload) -> Dict[str, Any]:
        result = validate_payload(model, payload)
        if not result.ok:
            raise GalleryApiError(VALIDATION_ERROR, "Validation failed", details=result.errors)
        return result.value.model_dump(mode="json", by_alias=True, exclude_unset=True)

    async def list(self, product_id: Optional[int] = None) -> List[ProductImageListItem]:
        params = {"productId": product_id} if product_id is not None else None
        data = await self._request("GET", "/product-image", params=params)
        return [ProductImageListItem.model_validate(item) for item in data]

    async def get_by_id(self, image_id: int) -> ProductImageResponse:
        data = await self._request("GET", f"/product-image/{image_id}")
        return ProductImageResponse.model_validate(data)

    async def create(self, payload: Payload) -> ProductImageResponse:
        data = await self._request("POST", "/product-image", json=self._body(ProductImageCreate, payload))
        return ProductImageResponse.model_validate(data)

    async def update(self, image_id: int, payload: Payload) -> ProductImageResponse:
        data = await self._request(
            "PUT", f"/product-image/{image_id}", json=self._body(ProductImageUpdate, payload)
        )
        return ProductImageResponse.model_validate(data)

    async def delete(self, image_id: int) -> str:
        data = await self._request("DELETE", f"/product-image/{image_id}")
        return data["message"]

    async def reorder(self, image_id: int, new_order: int) -> str:
        body = self._body(ProductImageReorder, {"newOrder": new_order})
        data = await self._request("PATCH", f"/product-image/{image_id}/reorder", json=body)
        return data["message"]

    async def set_primary(self, image_id: int) -> str:
        data = await self._request("PATCH", f"/product-image/{image_id}/set-primary")
        return data["message"]
