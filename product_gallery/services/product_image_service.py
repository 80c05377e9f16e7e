"""
Business logic for product image galleries.

Keeps two rules for every product:
  - at most one image is flagged primary
  - display_order decides the presentation sequence

Input is validated by the request schemas before it gets here.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, List, Optional
import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from product_gallery.constants import (
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_ROTATION,
)
from product_gallery.database import get_db
from product_gallery.models import ProductImage
from product_gallery.schemas import ProductImageCreate, ProductImageUpdate
from product_gallery.services.locks import ProductLockRegistry, product_locks
from product_gallery.services.product_image_store import ProductImageStore
from product_gallery.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

# Optional fields copied onto the record when an update provides them
UPDATABLE_FIELDS = ("caption", "is_primary", "display_order", "width", "height", "rotation")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductImageService:
    """
    Gallery ordering engine.

    Every mutating call runs inside a per-product critical section and
    commits before leaving it, so the primary sweep and the write that
    follows it are never interleaved with another writer of the same product.

    Args:
        session: Database session (one per request)
        locks: Per-product lock registry, process-wide by default
        clock: Timestamp source for date_created/date_modified
    """

    def __init__(
        self,
        session: AsyncSession,
        locks: Optional[ProductLockRegistry] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.session = session
        self.store = ProductImageStore(session)
        self.locks = locks or product_locks
        self.clock = clock or utcnow

    @asynccontextmanager
    async def _product_transaction(self, product_id: int) -> AsyncIterator[None]:
        async with self.locks.hold(product_id):
            try:
                await self.store.lock_product(product_id)
                yield
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                raise

    async def _get_or_raise(self, image_id: int, refresh: bool = False) -> ProductImage:
        image = await self.store.get_by_id(image_id, refresh=refresh)
        if image is None:
            raise NotFoundError()
        return image

    async def _sweep_primary(self, product_id: int, now: datetime, keep_id: Optional[int] = None) -> int:
        """
        Unset is_primary on every image of the product except keep_id.

        This is the only place the primary flag is cleared.

        Returns:
            int: Number of images that lost the flag
        """
        swept = 0
        for image in await self.store.get_by_product_id(product_id, for_update=True):
            if image.id != keep_id and image.is_primary:
                await self.store.update(image.id, is_primary=False, date_modified=now)
                swept += 1

        if swept:
            logger.info(f"Cleared primary flag on {swept} image(s) of product {product_id}")
        return swept

    async def _next_display_order(self, product_id: int) -> int:
        max_order = await self.store.max_display_order(product_id)
        return 1 if max_order is None else max_order + 1

    async def list_images(self, product_id: Optional[int] = None) -> List[ProductImage]:
        """
        List images, optionally restricted to one product.

        With a product filter the result is in gallery order
        (display_order ascending, ties by id); without one it is by id.
        """
        if product_id is not None:
            return await self.store.get_by_product_id(product_id)
        return await self.store.get_all()

    async def create_image(self, data: ProductImageCreate) -> ProductImage:
        """
        Create a product image.

        If is_primary is set, the product's current primary image is demoted
        before the new one is inserted. A display_order of 0 or None means
        "append": max(sibling display_order) + 1, or 1 for the first image.

        Returns:
            ProductImage: The stored record with id and timestamps
        """
        async with self._product_transaction(data.product_id):
            now = self.clock()

            if data.is_primary:
                await self._sweep_primary(data.product_id, now)

            display_order = data.display_order or 0
            if display_order == 0:
                display_order = await self._next_display_order(data.product_id)

            image = ProductImage(
                product_id=data.product_id,
                url=data.url,
                caption=data.caption,
                is_primary=bool(data.is_primary),
                display_order=display_order,
                width=data.width if data.width is not None else DEFAULT_IMAGE_WIDTH,
                height=data.height if data.height is not None else DEFAULT_IMAGE_HEIGHT,
                rotation=data.rotation if data.rotation is not None else DEFAULT_IMAGE_ROTATION,
                date_created=now,
                date_modified=now,
            )
            await self.store.add(image)

        logger.info(
            f"Created product image: ID {image.id}, product {image.product_id}, "
            f"display_order={image.display_order}, is_primary={image.is_primary}"
        )
        return image

    async def get_image(self, image_id: int) -> ProductImage:
        """
        Raises:
            NotFoundError: If no image has this id
        """
        return await self._get_or_raise(image_id)

    async def update_image(self, image_id: int, data: ProductImageUpdate) -> ProductImage:
        """
        Update an image.

        url is always replaced. Other fields, caption included, keep their
        value when omitted or null. Promoting the image to primary demotes its
        siblings first.

        Raises:
            NotFoundError: If no image has this id
        """
        existing = await self._get_or_raise(image_id)

        async with self._product_transaction(existing.product_id):
            existing = await self._get_or_raise(image_id, refresh=True)
            now = self.clock()

            if data.is_primary and not existing.is_primary:
                await self._sweep_primary(existing.product_id, now, keep_id=image_id)

            fields = {"url": data.url, "date_modified": now}
            for name in UPDATABLE_FIELDS:
                value = getattr(data, name)
                if value is not None:
                    fields[name] = value

            image = await self.store.update(image_id, **fields)

        logger.info(f"Updated product image: ID {image_id}")
        return image

    async def delete_image(self, image_id: int) -> str:
        """
        Permanently delete an image.

        Siblings are left untouched: no renumbering, and deleting the
        primary image does not promote another one.

        Raises:
            NotFoundError: If no image has this id
        """
        existing = await self._get_or_raise(image_id)

        async with self._product_transaction(existing.product_id):
            if not await self.store.delete(image_id):
                raise NotFoundError()

        logger.info(f"Deleted product image: ID {image_id}, product {existing.product_id}")
        return "Product image deleted successfully"

    async def reorder_image(self, image_id: int, new_order: int) -> str:
        """
        Overwrite an image's display_order.
        Duplicates among siblings are allowed; list order breaks ties by id.

        Raises:
            NotFoundError: If no image has this id
        """
        existing = await self._get_or_raise(image_id)

        async with self._product_transaction(existing.product_id):
            await self._get_or_raise(image_id, refresh=True)
            await self.store.update(image_id, display_order=new_order, date_modified=self.clock())

        logger.info(f"Reordered product image: ID {image_id}, display_order={new_order}")
        return "Product image reordered successfully"

    async def set_primary(self, image_id: int) -> str:
        """
        Make an image the primary image of its product.

        Raises:
            NotFoundError: If no image has this id
        """
        existing = await self._get_or_raise(image_id)

        async with self._product_transaction(existing.product_id):
            await self._get_or_raise(image_id, refresh=True)
            now = self.clock()
            await self._sweep_primary(existing.product_id, now, keep_id=image_id)
            await self.store.update(image_id, is_primary=True, date_modified=now)

        logger.info(f"Set primary image: ID {image_id}, product {existing.product_id}")
        return "Primary image set successfully"


def get_product_image_service(db: AsyncSession = Depends(get_db)) -> ProductImageService:
    """FastAPI dependency building the engine on the request's session."""
    return ProductImageService(db)
