from product_gallery.client.api_client import GalleryApiError, ProductImageApiClient
from product_gallery.client.gallery_controller import (
    GalleryViewState,
    PanOffset,
    ProductImageGalleryController,
)
from product_gallery.client.keyboard import KeyEventDispatcher, keyboard_bound

__all__ = [
    "GalleryApiError",
    "GalleryViewState",
    "KeyEventDispatcher",
    "PanOffset",
    "ProductImageApiClient",
    "ProductImageGalleryController",
    "keyboard_bound",
]
