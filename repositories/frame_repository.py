from pathlib import Path
from typing import Union
from io import BytesIO
import base64
import binascii
import logging
import numpy as np
import cv2
from PIL import Image as PILImage, UnidentifiedImageError
from models.pixel_buffer import PixelBuffer
from models.errors import CaptureUnavailable

logger = logging.getLogger(__name__)


class FrameRepository:
    """
    Turns snapshots (data URLs, files) into PixelBuffer entities.
    No sampling logic here.
    """

    @staticmethod
    def create_buffer(pixels: np.ndarray) -> PixelBuffer:
        return PixelBuffer.from_array(pixels)

    @staticmethod
    def retrieve_dimensions(buffer: PixelBuffer):
        return buffer.width, buffer.height

    @staticmethod
    def decode_data_url(data_url: str) -> PixelBuffer:
        """
        Decode a browser snapshot such as ``data:image/jpeg;base64,...``.
        A bare base64 payload without the ``data:`` header is accepted too.
        """
        if not data_url:
            raise CaptureUnavailable("Empty snapshot")

        payload = data_url.strip()
        if payload.startswith("data:"):
            header, _, payload = payload.partition(",")
            if ";base64" not in header:
                raise CaptureUnavailable(f"Snapshot is not base64 encoded: {header}")

        try:
            raw = base64.b64decode(payload, validate=True)
            with PILImage.open(BytesIO(raw)) as pil_image:
                arr = np.array(pil_image.convert("RGBA"))
        except (binascii.Error, UnidentifiedImageError, OSError) as err:
            raise CaptureUnavailable(f"Snapshot could not be decoded: {err}") from err

        logger.debug(f"Decoded snapshot: {arr.shape[1]}x{arr.shape[0]}")
        return PixelBuffer.from_array(arr)

    @staticmethod
    def encode_data_url(buffer: PixelBuffer, fmt: str = "PNG") -> str:
        """Inverse of decode_data_url. JPEG drops the alpha channel."""
        pil_image = PILImage.fromarray(np.ascontiguousarray(buffer.pixels))
        if fmt.upper() == "JPEG":
            pil_image = pil_image.convert("RGB")

        out = BytesIO()
        pil_image.save(out, format=fmt.upper())
        base64_string = base64.b64encode(out.getvalue()).decode("utf-8")
        return f"data:image/{fmt.lower()};base64,{base64_string}"

    @staticmethod
    def load(path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise CaptureUnavailable(f"Image not found or unreadable: {path}")
        return PixelBuffer.from_array(cv2.cvtColor(arr_bgr, cv2.COLOR_BGR2RGBA))
