"""
Storage access for product images.
Thin record-level operations over an AsyncSession; business rules live in
product_image_service.
"""
from typing import List, Optional
import logging

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from product_gallery.models import ProductImage

logger = logging.getLogger(__name__)

# First key of the two-key advisory lock, so gallery locks don't collide
# with other advisory lock users on the same database
ADVISORY_LOCK_NAMESPACE = 7311


class ProductImageStore:
    """
    Record store for ProductImage rows.

    Each call is atomic on its own. Sequences of calls are only consistent
    inside a transaction that holds the product lock (see lock_product).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[ProductImage]:
        result = await self.session.execute(
            select(ProductImage).order_by(ProductImage.id.asc())
        )
        return list(result.scalars().all())

    async def get_by_product_id(self, product_id: int, for_update: bool = False) -> List[ProductImage]:
        """
        Images of one product, by ascending display_order then id.

        Args:
            product_id: Owning product id
            for_update: Lock the rows and reload them from the database
        """
        query = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.display_order.asc(), ProductImage.id.asc())
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, image_id: int, refresh: bool = False) -> Optional[ProductImage]:
        return await self.session.get(ProductImage, image_id, populate_existing=refresh)

    async def add(self, image: ProductImage) -> ProductImage:
        """Insert a new record. Flushing assigns the id from the table sequence."""
        self.session.add(image)
        await self.session.flush()
        return image

    async def update(self, image_id: int, **fields) -> Optional[ProductImage]:
        image = await self.get_by_id(image_id)
        if image is None:
            return None

        for name, value in fields.items():
            setattr(image, name, value)

        await self.session.flush()
        return image

    async def delete(self, image_id: int) -> bool:
        image = await self.get_by_id(image_id)
        if image is None:
            return False

        await self.session.delete(image)
        await self.session.flush()
        return True

    async def exists(self, image_id: int) -> bool:
        result = await self.session.execute(
            select(ProductImage.id).where(ProductImage.id == image_id)
        )
        return result.scalar_one_or_none() is not None

    async def max_display_order(self, product_id: int) -> Optional[int]:
        """Highest display_order among the product's images, None if it has none."""
        result = await self.session.execute(
            select(func.max(ProductImage.display_order)).where(ProductImage.product_id == product_id)
        )
        return result.scalar()

    async def lock_product(self, product_id: int) -> None:
        """
        Take a transaction-scoped lock on a product's image set.

        On PostgreSQL this is an advisory lock released at commit/rollback.
        Other backends rely on the in-process lock held by the caller.
        """
        dialect = self.session.get_bind().dialect.name
        if dialect != "postgresql":
            return

        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :key)"),
            {"namespace": ADVISORY_LOCK_NAMESPACE, "key": product_id},
        )
        logger.debug(f"Acquired advisory lock for product {product_id}")
