import os
import sys
import json
import asyncio
import logging
import argparse
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "WARNING"),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.errors import CaptureUnavailable, ClipboardWriteFailure, OutOfBoundsSample
from models.sample_point import ANCHORS
from pipeline.capture_and_sample import capture_and_sample, to_records
from services.clipboard_service import ClipboardService, REPRESENTATIONS
from services.frame_capture_service import FrameCaptureService
from services.layout_service import available_layouts, get_layout_policy

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Sample colors from an image or the local camera")
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", help="path to an image file")
    source.add_argument("--camera", action="store_true", help="grab one frame from the camera")
    ap.add_argument("--layout", choices=available_layouts(),
                    help="sample layout (default: LAYOUT_POLICY)")
    ap.add_argument("--window-size", type=int, help="side of the averaging window in pixels")
    ap.add_argument("--anchor", choices=ANCHORS, help="what the sample coordinate marks")
    ap.add_argument("--copy", choices=REPRESENTATIONS, help="copy the first color to the clipboard")
    ap.add_argument("--json", action="store_true", help="print a JSON list instead of text")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        layout = get_layout_policy(args.layout, args.window_size, args.anchor)
    except ValueError as e:
        print(f"Invalid sampling configuration: {e}", file=sys.stderr)
        return 2
    capture_service = FrameCaptureService()

    frame = capture_service.from_camera() if args.camera else capture_service.from_file(args.image)
    try:
        colors = asyncio.run(capture_and_sample(frame, layout))
    except CaptureUnavailable as e:
        print(f"No frame available: {e}", file=sys.stderr)
        return 1
    except OutOfBoundsSample as e:
        print(f"Layout does not fit this frame: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid sampling configuration: {e}", file=sys.stderr)
        return 2
    finally:
        capture_service.camera_repository.release()

    if args.json:
        print(json.dumps(to_records(colors), indent=2))
    else:
        for i, color in enumerate(colors):
            print(f"{i}: {color.hex}  {color.rgb_text}")

    if args.copy and colors:
        try:
            copied = ClipboardService().copy_color(colors[0], args.copy)
            print(f"Copied {copied}", file=sys.stderr)
        except ClipboardWriteFailure as e:
            logger.warning(str(e))
            print("Could not copy to clipboard", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
