"""Time-windowed response cache that serialises device polls."""

from __future__ import annotations

import threading
import time
from typing import Callable

from loguru import logger

from vdslmon.models import CachedPage

DEFAULT_WINDOW = 0.5


class ResponseCache:
    """Hold the last rendered page and gate all polls behind one lock.

    The lock stays held while ``compute`` talks to the modem, so concurrent
    requests queue behind a running poll and then see its result.
    """

    def __init__(self, window: float = DEFAULT_WINDOW, clock: Callable[[], float] = time.monotonic) -> None:
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._page: CachedPage | None = None
        self.polls = 0

    @property
    def page(self) -> CachedPage | None:
        return self._page

    def get_or_compute(self, compute: Callable[[], tuple[str, str]]) -> CachedPage:
        """Return the cached page if fresh, else run ``compute`` and cache it.

        Args:
            compute: Returns ``(content, content_type)``. Exceptions propagate
                and leave the previous page in place.
        """
        with self._lock:
            if self._page is not None and self._clock() - self._page.timestamp < self.window:
                return self._page

            content, content_type = compute()
            self.polls += 1
            self._page = CachedPage(content=content, content_type=content_type, timestamp=self._clock())
            logger.debug(f"Cached page from poll #{self.polls}")
            return self._page

    def close(self, release: Callable[[], None]) -> None:
        """Run ``release`` once no poll is in flight.

        Takes the poll lock, so ``release`` never overlaps a running ``compute``.
        """
        with self._lock:
            release()
