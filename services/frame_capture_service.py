import asyncio
from pathlib import Path
from typing import Union
from models.pixel_buffer import PixelBuffer
from repositories.frame_repository import FrameRepository
from repositories.camera_repository import CameraRepository


class FrameCaptureService:
    """
    Produces still frames. Decoding is blocking, so each method runs it in a
    worker thread and the caller awaits the finished buffer.
    """

    def __init__(self, camera_repository: CameraRepository = None):
        self.frame_repository = FrameRepository()
        self.camera_repository = camera_repository or CameraRepository()

    async def from_data_url(self, data_url: str) -> PixelBuffer:
        return await asyncio.to_thread(self.frame_repository.decode_data_url, data_url)

    async def from_file(self, path: Union[str, Path]) -> PixelBuffer:
        return await asyncio.to_thread(self.frame_repository.load, path)

    async def from_camera(self) -> PixelBuffer:
        return await asyncio.to_thread(self.camera_repository.read_frame)

    def get_dimensions(self, buffer: PixelBuffer):
        return self.frame_repository.retrieve_dimensions(buffer)
