"""
Interactive gallery controller.

Holds the view state of one open product gallery (current image, zoom,
rotation, fullscreen, pan) and reacts to navigation, keyboard and pointer
input. Primary and order changes go to the engine; the image list is always
re-fetched afterwards, never patched locally.
"""
from dataclasses import dataclass
from typing import Any, ContextManager, List, Optional, Protocol, Sequence
import logging

from product_gallery.client.keyboard import KeyEventSource, keyboard_bound
from product_gallery.constants import FULL_TURN, MAX_ZOOM, MIN_ZOOM, ROTATION_STEP, ZOOM_STEP
from product_gallery.schemas import ProductImageListItem

logger = logging.getLogger(__name__)

KEY_PREVIOUS = "ArrowLeft"
KEY_NEXT = "ArrowRight"
KEY_FIRST = "Home"
KEY_LAST = "End"
KEY_EXIT_FULLSCREEN = "Escape"


class GalleryBackend(Protocol):
    """What the controller needs from the engine (ProductImageApiClient satisfies it)."""

    async def list(self, product_id: Optional[int] = None) -> Sequence[ProductImageListItem]: ...

    async def set_primary(self, image_id: int) -> Any: ...

    async def reorder(self, image_id: int, new_order: int) -> Any: ...


@dataclass
class GalleryViewState:
    current_index: int = 0
    zoom_level: float = MIN_ZOOM
    rotation_offset: int = 0
    is_fullscreen: bool = False


@dataclass
class PanOffset:
    """Render-only translation of a zoomed image."""
    x: float = 0.0
    y: float = 0.0


class ProductImageGalleryController:
    """
    View-state machine for one product's gallery.

    Args:
        product_id: Product whose images are shown
        backend: Engine access used for list, set_primary and reorder
    """

    def __init__(self, product_id: int, backend: GalleryBackend):
        self.product_id = product_id
        self.backend = backend
        self.images: List[ProductImageListItem] = []
        self.state = GalleryViewState()
        self.pan = PanOffset()
        self.is_loading = False
        self.error: Optional[Exception] = None
        self._dragging = False
        self._drag_start = (0.0, 0.0)

    @property
    def current_image(self) -> Optional[ProductImageListItem]:
        index = self.state.current_index
        if 0 <= index < len(self.images):
            return self.images[index]
        return None

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    # Data

    async def refresh(self) -> List[ProductImageListItem]:
        """
        Fetch the product's images in gallery order.

        The current index is clamped into the new list, which may be shorter
        than the one navigation was based on. Fetch errors are stored in
        `error` and re-raised.
        """
        self.is_loading = True
        try:
            images = list(await self.backend.list(product_id=self.product_id))
        except Exception as e:
            self.error = e
            logger.error(f"Failed to load images for product {self.product_id}: {str(e)}")
            raise
        finally:
            self.is_loading = False

        self.error = None
        self.images = images

        last_index = max(len(images) - 1, 0)
        if self.state.current_index > last_index:
            self._set_index(last_index)

        logger.debug(f"Loaded {len(images)} images for product {self.product_id}")
        return images

    async def set_primary(self, image_id: int) -> None:
        await self.backend.set_primary(image_id)
        await self.refresh()

    async def reorder_image(self, image_id: int, new_order: int) -> None:
        await self.backend.reorder(image_id, new_order)
        await self.refresh()

    # Navigation

    def _set_index(self, index: int) -> None:
        self.state.current_index = index
        self.state.zoom_level = MIN_ZOOM
        self.state.rotation_offset = 0
        self._reset_pan()

    def go_to_next(self) -> None:
        if not self.images:
            return
        self._set_index((self.state.current_index + 1) % len(self.images))

    def go_to_previous(self) -> None:
        if not self.images:
            return
        self._set_index((self.state.current_index - 1) % len(self.images))

    def go_to_image(self, index: int) -> None:
        """Jump to index. The caller must pass 0 <= index < len(images)."""
        self._set_index(index)

    # View transforms

    def zoom_in(self) -> None:
        self.state.zoom_level = min(self.state.zoom_level + ZOOM_STEP, MAX_ZOOM)

    def zoom_out(self) -> None:
        self.state.zoom_level = max(self.state.zoom_level - ZOOM_STEP, MIN_ZOOM)
        if self.state.zoom_level == MIN_ZOOM:
            self._reset_pan()

    def reset_zoom(self) -> None:
        self.state.zoom_level = MIN_ZOOM
        self._reset_pan()

    def rotate_image(self) -> None:
        # View only, the record's stored rotation is not touched
        self.state.rotation_offset = (self.state.rotation_offset + ROTATION_STEP) % FULL_TURN

    def toggle_fullscreen(self) -> None:
        self.state.is_fullscreen = not self.state.is_fullscreen

    # Keyboard

    def handle_key_down(self, key: str) -> bool:
        """
        Apply the transition bound to a key-down event.

        Returns:
            bool: True if the key triggered a transition
        """
        if key == KEY_PREVIOUS:
            self.go_to_previous()
        elif key == KEY_NEXT:
            self.go_to_next()
        elif key == KEY_FIRST:
            self.go_to_image(0)
        elif key == KEY_LAST and self.images:
            self.go_to_image(len(self.images) - 1)
        elif key == KEY_EXIT_FULLSCREEN and self.state.is_fullscreen:
            self.toggle_fullscreen()
        else:
            return False
        return True

    def bind_keyboard(self, source: KeyEventSource) -> ContextManager["ProductImageGalleryController"]:
        """Listen to source for as long as the returned context is open."""
        return keyboard_bound(source, self)

    # Pointer

    def _reset_pan(self) -> None:
        self.pan = PanOffset()
        self._dragging = False

    def start_drag(self, x: float, y: float) -> None:
        if self.state.zoom_level > MIN_ZOOM:
            self._dragging = True
            self._drag_start = (x - self.pan.x, y - self.pan.y)

    def drag_to(self, x: float, y: float) -> None:
        if self._dragging and self.state.zoom_level > MIN_ZOOM:
            start_x, start_y = self._drag_start
            self.pan = PanOffset(x - start_x, y - start_y)

    def end_drag(self) -> None:
        self._dragging = False

    def click_image(self) -> None:
        if self.state.zoom_level == MIN_ZOOM:
            self.zoom_in()
