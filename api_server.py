#!/usr/bin/env python3
"""
Webcam Color Picker API Server
The browser posts a webcam snapshot, the server samples it and returns the
colors. Local camera capture and clipboard copy have their own endpoints.
"""

import os
import asyncio
import logging
import uuid
from typing import Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.errors import CaptureUnavailable, OutOfBoundsSample
from pipeline.capture_and_sample import to_records
from services.clipboard_service import REPRESENTATIONS
from services.color_picker_service import ColorPickerService
from services.frame_capture_service import FrameCaptureService
from services.layout_service import available_layouts, get_layout_policy

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10")) * 1024 * 1024
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
frame_capture_service = FrameCaptureService()

logger = logging.getLogger(__name__)

# One picker per browser session
sessions = {}


def get_or_create_session(session_id: Optional[str] = None):
    """Get existing session or create new one. Returns (session_id, picker)."""
    if session_id is None:
        session_id = str(uuid.uuid4())

    if session_id not in sessions:
        sessions[session_id] = ColorPickerService()

    return session_id, sessions[session_id]


def run_capture(body: dict, frame_factory):
    """
    Shared body of /api/sample and /api/capture.
    frame_factory() returns the coroutine that produces the PixelBuffer.
    """
    layout_name = body.get('layout')
    try:
        layout = get_layout_policy(layout_name) if layout_name else None
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400

    session_id, picker = get_or_create_session(body.get('session_id'))
    policy = layout or picker.layout_policy

    try:
        state = asyncio.run(picker.capture(frame_factory(), layout))
    except CaptureUnavailable as e:
        return jsonify({
            'success': False,
            'session_id': session_id,
            'colors': [],
            'message': f'No frame available: {e}'
        }), 503
    except OutOfBoundsSample as e:
        logger.error(f"Layout {policy.name} produced an out-of-bounds sample: {e}")
        return jsonify({
            'success': False,
            'session_id': session_id,
            'message': 'Sample layout does not fit this frame'
        }), 500

    if state is None:
        return jsonify({
            'success': False,
            'session_id': session_id,
            'message': 'A capture is already in progress'
        }), 409

    return jsonify({
        'success': True,
        'session_id': session_id,
        'layout': policy.name,
        'colors': to_records(list(state.colors)),
    })


@app.route('/api/sample', methods=['POST'])
def sample_snapshot():
    """Sample colors from a browser webcam snapshot (data URL)."""
    body = request.get_json(silent=True) or {}
    image = body.get('image')
    if not image:
        return jsonify({'success': False, 'message': 'No image provided'}), 400

    logger.info(f"Sampling snapshot ({len(image)} chars)")
    return run_capture(body, lambda: frame_capture_service.from_data_url(image))


@app.route('/api/capture', methods=['POST'])
def capture_camera():
    """Grab a frame from the local camera and sample it."""
    body = request.get_json(silent=True) or {}
    logger.info("Capturing from local camera")
    return run_capture(body, frame_capture_service.from_camera)


@app.route('/api/copy', methods=['POST'])
def copy_color():
    """Copy one of the displayed colors to the clipboard."""
    body = request.get_json(silent=True) or {}
    session_id = body.get('session_id')
    if not session_id or session_id not in sessions:
        return jsonify({'success': False, 'message': 'Invalid session'}), 400

    representation = body.get('representation', 'hex')
    if representation not in REPRESENTATIONS:
        return jsonify({'success': False, 'message': f'Representation must be one of {list(REPRESENTATIONS)}'}), 400

    picker = sessions[session_id]
    try:
        index = int(body.get('index', 0))
        state, copied = picker.copy(index, representation)
    except (TypeError, ValueError, IndexError) as e:
        return jsonify({'success': False, 'message': str(e)}), 400

    # clipboard failures come back as an error notification, not an HTTP error
    response = {
        'success': copied is not None,
        'session_id': session_id,
        'notification': state.notification,
    }
    if copied is not None:
        response['copied'] = copied
    return jsonify(response)


@app.route('/api/dismiss-notification', methods=['POST'])
def dismiss_notification():
    body = request.get_json(silent=True) or {}
    session_id = body.get('session_id')
    if not session_id or session_id not in sessions:
        return jsonify({'success': False, 'message': 'Invalid session'}), 400

    state = sessions[session_id].dismiss_notification()
    return jsonify({'success': True, 'state': state.to_dict()})


@app.route('/api/state/<session_id>', methods=['GET'])
def get_state(session_id):
    if session_id not in sessions:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify({'session_id': session_id, 'state': sessions[session_id].state.to_dict()})


@app.route('/api/layouts', methods=['GET'])
def list_layouts():
    return jsonify({
        'layouts': available_layouts(),
        'default': get_layout_policy().name,
    })


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Webcam Color Picker API is running',
        'active_sessions': len(sessions)
    })


@app.route('/api/clear-session', methods=['POST'])
def clear_session():
    """Forget a session and its displayed colors."""
    body = request.get_json(silent=True) or {}
    session_id = body.get('session_id')
    if session_id and session_id in sessions:
        del sessions[session_id]
        return jsonify({'success': True, 'message': 'Session cleared'})
    return jsonify({'success': False, 'message': 'Session not found'})


@app.errorhandler(413)
def too_large(e):
    """Handle snapshot too large error."""
    return jsonify({'error': f'Snapshot too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


def main():
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "5000"))
    debug = os.getenv("FLASK_DEBUG", "0") == "1"

    print("🎨 Starting Webcam Color Picker API Server...")
    print(f"🧭 Default layout: {get_layout_policy().name}")
    print(f"🔧 Max snapshot size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB")
    print("🌐 CORS enabled for frontend communication")
    print("📋 Endpoints:")
    print("   POST /api/sample   (browser snapshot)")
    print("   POST /api/capture  (local camera)")
    print("   POST /api/copy")
    print("=" * 60)

    try:
        app.run(host=host, port=port, debug=debug)
    finally:
        frame_capture_service.camera_repository.release()


if __name__ == '__main__':
    main()
