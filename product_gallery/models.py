"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, CheckConstraint
from sqlalchemy.types import TypeDecorator
from product_gallery.database import Base
from product_gallery.constants import (
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_ROTATION,
    ROTATION_ANGLES,
    URL_MAX_LENGTH,
    CAPTION_MAX_LENGTH,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp on every backend.
    SQLite drops the offset on storage, so values read back without one are UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return _as_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return _as_utc(value)


class ProductImage(Base):
    """
    Product image model.
    One entry in a product's gallery. Timestamps are written by the ordering
    engine, not by database defaults.
    """
    __tablename__ = "product_images"
    __table_args__ = (
        Index("ix_product_images_product_order", "product_id", "display_order", "id"),
        CheckConstraint(f"rotation IN ({', '.join(map(str, ROTATION_ANGLES))})", name="ck_product_images_rotation"),
        CheckConstraint("display_order >= 0", name="ck_product_images_display_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)
    url = Column(String(URL_MAX_LENGTH), nullable=False)
    caption = Column(String(CAPTION_MAX_LENGTH), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    width = Column(Integer, nullable=False, default=DEFAULT_IMAGE_WIDTH)
    height = Column(Integer, nullable=False, default=DEFAULT_IMAGE_HEIGHT)
    rotation = Column(Integer, nullable=False, default=DEFAULT_IMAGE_ROTATION)
    date_created = Column(UTCDateTime(), nullable=False)
    date_modified = Column(UTCDateTime(), nullable=False)

    def __repr__(self):
        return (
            f"<ProductImage id={self.id} product_id={self.product_id} "
            f"display_order={self.display_order} is_primary={self.is_primary}>"
        )
