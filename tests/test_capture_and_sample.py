import tempfile
import unittest
from pathlib import Path
import numpy as np
from PIL import Image as PILImage
from models.pixel_buffer import PixelBuffer
from pipeline.capture_and_sample import capture_and_sample, to_records
from repositories.frame_repository import FrameRepository
from services.frame_capture_service import FrameCaptureService
from services.layout_service import get_layout_policy

# run with: python -m unittest tests.test_capture_and_sample -v


class TestCaptureAndSample(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.capture_service = FrameCaptureService()

    async def test_center_snapshot_1280x720(self):
        snapshot = FrameRepository.encode_data_url(PixelBuffer.filled(1280, 720, (10, 20, 30)))
        colors = await capture_and_sample(
            self.capture_service.from_data_url(snapshot),
            get_layout_policy("single-averaged", anchor="center"),
        )
        self.assertEqual(to_records(colors), [{"hex": "#0a141e", "rgb": {"r": 10, "g": 20, "b": 30}}])

    async def test_five_points_on_white_540x280(self):
        snapshot = FrameRepository.encode_data_url(PixelBuffer.filled(540, 280, (255, 255, 255)))
        colors = await capture_and_sample(
            self.capture_service.from_data_url(snapshot),
            get_layout_policy("multi-point-responsive", anchor="center"),
        )
        self.assertEqual(to_records(colors), [{"hex": "#ffffff", "rgb": {"r": 255, "g": 255, "b": 255}}] * 5)

    async def test_colors_follow_layout_order(self):
        policy = get_layout_policy("multi-point-responsive", anchor="center")
        palette = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0), (0, 255, 255)]
        arr = np.zeros((600, 600, 3), dtype=np.uint8)
        for point, rgb in zip(policy.points(600, 600), palette):
            arr[point.y - 5:point.y + 5, point.x - 5:point.x + 5] = rgb

        colors = await capture_and_sample(
            self.capture_service.from_data_url(FrameRepository.encode_data_url(PixelBuffer.from_array(arr))),
            policy,
        )
        self.assertEqual([c.rgb for c in colors], palette)

    async def test_top_left_anchor_reads_below_right_of_point(self):
        arr = np.zeros((40, 40, 3), dtype=np.uint8)
        arr[20:30, 20:30] = (200, 100, 0)
        policy = get_layout_policy("single-averaged", anchor="top-left")

        async def frame():
            return PixelBuffer.from_array(arr)

        colors = await capture_and_sample(frame(), policy)
        self.assertEqual(colors[0].hex, "#c86400")

    async def test_file_capture(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "frame.png"
            PILImage.new("RGB", (64, 64), (12, 34, 56)).save(path)
            colors = await capture_and_sample(
                self.capture_service.from_file(path),
                get_layout_policy("multi-point-fixed", anchor="center"),
            )
        self.assertEqual({c.hex for c in colors}, {"#0c2238"})
        self.assertEqual(len(colors), 5)


if __name__ == "__main__":
    unittest.main()
