"""
Keyboard listener lifecycle for open galleries.
"""
from contextlib import contextmanager
from typing import Callable, Iterator, List, Protocol, TypeVar
import logging

logger = logging.getLogger(__name__)

KeyListener = Callable[[str], object]


class KeyEventSource(Protocol):
    def add_listener(self, listener: KeyListener) -> None: ...

    def remove_listener(self, listener: KeyListener) -> None: ...


class KeyHandler(Protocol):
    def handle_key_down(self, key: str) -> bool: ...


H = TypeVar("H", bound=KeyHandler)


class KeyEventDispatcher:
    """
    Minimal key-down event source.
    A UI layer calls dispatch() once per key-down event it receives.
    """

    def __init__(self):
        self._listeners: List[KeyListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        self._listeners.remove(listener)

    def dispatch(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)


@contextmanager
def keyboard_bound(source: KeyEventSource, handler: H) -> Iterator[H]:
    """
    Route key-down events from source to handler while the context is open.
    The listener is removed on exit, including when the body raises.
    """
    listener = handler.handle_key_down
    source.add_listener(listener)
    logger.debug("Gallery keyboard listener attached")
    try:
        yield handler
    finally:
        source.remove_listener(listener)
        logger.debug("Gallery keyboard listener removed")
