"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints with automatic validation and serialization.
Field names are camelCase on the wire and snake_case in Python.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Generic, List, Literal, Optional, TypeVar
from urllib.parse import urlparse

from product_gallery.constants import URL_MAX_LENGTH, CAPTION_MAX_LENGTH

T = TypeVar("T")

Rotation = Literal[0, 90, 180, 270]


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


class ProductImageCreate(CamelModel):
    """
    Request schema for creating a product image.
    Used by POST /api/internal/product-image.

    A display_order of 0 (or omitted) asks the engine to append the image
    after its siblings.
    """
    product_id: int = Field(..., gt=0)
    url: str = Field(..., min_length=1, max_length=URL_MAX_LENGTH)
    caption: Optional[str] = Field(None, max_length=CAPTION_MAX_LENGTH)
    is_primary: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    rotation: Optional[Rotation] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)


class ProductImageUpdate(CamelModel):
    """
    Request schema for updating a product image.
    Used by PUT /api/internal/product-image/{id}.
    url is required on every update; omitted optional fields keep their value.
    """
    url: str = Field(..., min_length=1, max_length=URL_MAX_LENGTH)
    caption: Optional[str] = Field(None, max_length=CAPTION_MAX_LENGTH)
    is_primary: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    rotation: Optional[Rotation] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)


class ProductImageReorder(CamelModel):
    """
    Request schema for moving one image.
    Used by PATCH /api/internal/product-image/{id}/reorder.
    """
    new_order: int = Field(..., ge=0)


class ProductImageResponse(CamelModel):
    """
    Full product image record.
    Returned by get, create and update.
    """
    id: int
    product_id: int
    url: str
    caption: Optional[str] = None
    is_primary: bool
    display_order: int
    width: int
    height: int
    rotation: int
    date_created: datetime
    date_modified: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Enable conversion from SQLAlchemy models
    )


class ProductImageListItem(CamelModel):
    """
    Listing projection of a product image.
    Excludes dimensions, rotation and modification date to reduce payload size.
    """
    id: int
    product_id: int
    url: str
    caption: Optional[str] = None
    is_primary: bool
    display_order: int
    date_created: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Confirmation payload for delete, reorder and set-primary."""
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {"success": true, "data": ...}."""
    success: bool = True
    data: T


class ErrorDetail(BaseModel):
    field: str
    message: str
    type: Optional[str] = None


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(BaseModel):
    """Error envelope: {"success": false, "error": {...}}."""
    success: bool = False
    error: ErrorBody
