"""
Product image routes.
Exposes the gallery ordering engine under /product-image.
"""
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from typing import List, Optional
import logging

from product_gallery.schemas import (
    ApiResponse,
    ErrorResponse,
    MessageResponse,
    ProductImageCreate,
    ProductImageListItem,
    ProductImageReorder,
    ProductImageResponse,
    ProductImageUpdate,
)
from product_gallery.services.product_image_service import (
    ProductImageService,
    get_product_image_service,
)
from product_gallery.utils.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/product-image",
    tags=["product-image"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": f"Failed to {action}", "detail": str(e)},
    )


@router.get("", response_model=ApiResponse[List[ProductImageListItem]])
async def list_product_images(
    product_id: Optional[int] = Query(None, alias="productId", gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """
    List product images.

    With productId, images come back in gallery order (displayOrder ascending,
    ties by id). The listing omits width, height, rotation and dateModified.
    """
    try:
        images = await service.list_images(product_id)
        logger.info(f"Retrieved {len(images)} product images (productId: {product_id})")
        return ApiResponse(data=[ProductImageListItem.model_validate(img) for img in images])
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("retrieve product images", e)


@router.post("", response_model=ApiResponse[ProductImageResponse], status_code=status.HTTP_201_CREATED)
async def create_product_image(
    payload: ProductImageCreate,
    service: ProductImageService = Depends(get_product_image_service),
):
    """
    Create a product image.

    Setting isPrimary demotes the product's current primary image.
    Omitting displayOrder (or sending 0) appends the image at the end of the gallery.
    """
    try:
        image = await service.create_image(payload)
        return ApiResponse(data=ProductImageResponse.model_validate(image))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("create product image", e)


@router.get("/{image_id}", response_model=ApiResponse[ProductImageResponse])
async def get_product_image(
    image_id: int = Path(..., gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """Get one product image with all fields."""
    try:
        image = await service.get_image(image_id)
        return ApiResponse(data=ProductImageResponse.model_validate(image))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("retrieve product image", e)


@router.put("/{image_id}", response_model=ApiResponse[ProductImageResponse])
async def update_product_image(
    payload: ProductImageUpdate,
    image_id: int = Path(..., gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """
    Update a product image.
    url is required; omitted optional fields keep their current value.
    """
    try:
        image = await service.update_image(image_id, payload)
        return ApiResponse(data=ProductImageResponse.model_validate(image))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("update product image", e)


@router.delete("/{image_id}", response_model=ApiResponse[MessageResponse])
async def delete_product_image(
    image_id: int = Path(..., gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """Permanently delete a product image. No sibling is promoted to primary."""
    try:
        message = await service.delete_image(image_id)
        return ApiResponse(data=MessageResponse(message=message))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("delete product image", e)


@router.patch("/{image_id}/reorder", response_model=ApiResponse[MessageResponse])
async def reorder_product_image(
    payload: ProductImageReorder,
    image_id: int = Path(..., gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """Set an image's displayOrder to newOrder. Duplicate orders are allowed."""
    try:
        message = await service.reorder_image(image_id, payload.new_order)
        return ApiResponse(data=MessageResponse(message=message))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("reorder product image", e)


@router.patch("/{image_id}/set-primary", response_model=ApiResponse[MessageResponse])
async def set_primary_product_image(
    image_id: int = Path(..., gt=0),
    service: ProductImageService = Depends(get_product_image_service),
):
    """Make an image the primary image of its product."""
    try:
        message = await service.set_primary(image_id)
        return ApiResponse(data=MessageResponse(message=message))
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error("set primary image", e)
