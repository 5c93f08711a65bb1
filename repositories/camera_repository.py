import os
import logging
import threading
import cv2
from dotenv import load_dotenv
from models.pixel_buffer import PixelBuffer
from models.errors import CaptureUnavailable

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class CameraRepository:
    """
    Owns the single shared camera device.

    The device is opened lazily on the first read and kept open until
    release(). Reads are serialized because cv2.VideoCapture is not
    thread-safe.
    """

    def __init__(self, index: int = None, width: int = None, height: int = None):
        self.index = int(os.getenv("CAMERA_INDEX", "0")) if index is None else index
        self.width = int(os.getenv("CAMERA_WIDTH", "1280")) if width is None else width
        self.height = int(os.getenv("CAMERA_HEIGHT", "720")) if height is None else height
        self._cap = None
        self._lock = threading.Lock()

    def _open(self):
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CaptureUnavailable(f"Camera {self.index} could not be opened")
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        logger.info(f"Opened camera {self.index} at {self.width}x{self.height}")
        return cap

    def read_frame(self) -> PixelBuffer:
        with self._lock:
            if self._cap is None:
                self._cap = self._open()
            ok, frame_bgr = self._cap.read()
        if not ok or frame_bgr is None:
            raise CaptureUnavailable(f"Camera {self.index} returned no frame")
        return PixelBuffer.from_array(cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGBA))

    def release(self) -> None:
        with self._lock:
            if self._cap is not None:
                self._cap.release()
                self._cap = None
                logger.info(f"Released camera {self.index}")
