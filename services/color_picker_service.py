import asyncio
import logging
import threading
from typing import Awaitable, Optional, Tuple

from models.errors import CaptureUnavailable, ClipboardWriteFailure
from models.picker_state import (
    PickerState, ERROR, INFO,
    capture_started, capture_completed, capture_failed, notify, notification_expired,
)
from models.pixel_buffer import PixelBuffer
from pipeline.capture_and_sample import capture_and_sample
from services.clipboard_service import ClipboardService
from services.layout_service import LayoutPolicy, get_layout_policy

logger = logging.getLogger(__name__)


class ColorPickerService:
    """
    One picker session: the displayed colors, the current notification, and
    the rule that only one capture runs at a time.

    The capture guard is a threading.Lock taken without blocking, since
    request threads each drive their own event loop.
    """

    def __init__(
        self,
        layout_policy: LayoutPolicy = None,
        clipboard_service: ClipboardService = None,
    ):
        self.layout_policy = layout_policy or get_layout_policy()
        self.clipboard_service = clipboard_service or ClipboardService()
        self.state = PickerState()
        self._capture_lock = threading.Lock()

    async def capture(
        self,
        frame: Awaitable[PixelBuffer],
        layout_policy: LayoutPolicy = None,
    ) -> Optional[PickerState]:
        """
        Run a capture and return the new state.

        Returns None when another capture is still in flight; the request is
        dropped rather than queued. On CaptureUnavailable the state is moved
        to capture_failed (colors unchanged) and the error is re-raised.
        """
        if not self._capture_lock.acquire(blocking=False):
            logger.warning("Capture already in progress, dropping request")
            if asyncio.iscoroutine(frame):
                frame.close()
            return None

        try:
            self.state = capture_started(self.state)
            try:
                colors = await capture_and_sample(frame, layout_policy or self.layout_policy)
            except CaptureUnavailable as err:
                logger.warning(f"Capture unavailable: {err}")
                self.state = capture_failed(self.state)
                raise
            except Exception:
                self.state = capture_failed(self.state)
                raise

            self.state = capture_completed(self.state, colors)
            return self.state
        finally:
            self._capture_lock.release()

    def copy(self, index: int, representation: str = "hex") -> Tuple[PickerState, Optional[str]]:
        """
        Copy the color at *index* to the clipboard.

        Returns the new state and the copied text. A clipboard failure turns
        into an error notification and the text is None; the colors are left
        alone either way.
        """
        colors = self.state.colors
        if not 0 <= index < len(colors):
            raise IndexError(f"No captured color at index {index}")

        try:
            text = self.clipboard_service.copy_color(colors[index], representation)
        except ClipboardWriteFailure as err:
            logger.error(f"Clipboard write failed: {err}")
            self.state = notify(self.state, "Could not copy to clipboard", ERROR)
            return self.state, None

        self.state = notify(self.state, f"Copied {text}", INFO)
        return self.state, text

    def dismiss_notification(self) -> PickerState:
        self.state = notification_expired(self.state)
        return self.state
