import threading
import unittest
from unittest.mock import patch
import pyperclip
from models.errors import CaptureUnavailable
from models.pixel_buffer import PixelBuffer
from repositories.frame_repository import FrameRepository
import api_server

# run with: python -m unittest tests.test_api_server -v


class TestApiServer(unittest.TestCase):
    def setUp(self):
        api_server.app.config['TESTING'] = True
        api_server.sessions.clear()
        self.client = api_server.app.test_client()
        self.snapshot = FrameRepository.encode_data_url(PixelBuffer.filled(60, 60, (10, 20, 30)), "PNG")

    def sample(self, **body):
        payload = {'image': self.snapshot, 'layout': 'single-averaged'}
        payload.update(body)
        return self.client.post('/api/sample', json=payload)

    def test_sample_snapshot(self):
        resp = self.sample()
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['layout'], 'single-averaged')
        self.assertEqual(data['colors'], [{'hex': '#0a141e', 'rgb': {'r': 10, 'g': 20, 'b': 30}}])
        self.assertIn(data['session_id'], api_server.sessions)

    def test_sample_reuses_session(self):
        session_id = self.sample().get_json()['session_id']
        resp = self.sample(session_id=session_id, layout='multi-point-responsive')
        self.assertEqual(resp.get_json()['session_id'], session_id)
        self.assertEqual(len(resp.get_json()['colors']), 5)
        self.assertEqual(len(api_server.sessions), 1)

    def test_sample_requires_image(self):
        resp = self.client.post('/api/sample', json={})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_layout(self):
        resp = self.sample(layout='spiral')
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.get_json()['success'])

    def test_undecodable_snapshot_is_a_no_op(self):
        resp = self.sample(image='data:image/jpeg;base64,AAAA')
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.get_json()['colors'], [])

    def test_frame_smaller_than_window(self):
        tiny = FrameRepository.encode_data_url(PixelBuffer.filled(4, 4, (1, 2, 3)))
        resp = self.sample(image=tiny)
        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.get_json()['success'])

    def test_camera_capture(self):
        camera = api_server.frame_capture_service.camera_repository
        with patch.object(camera, 'read_frame', return_value=PixelBuffer.filled(1280, 720, (255, 255, 255))):
            resp = self.client.post('/api/capture', json={'layout': 'multi-point-responsive'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([c['hex'] for c in resp.get_json()['colors']], ['#ffffff'] * 5)

    def test_camera_unavailable(self):
        camera = api_server.frame_capture_service.camera_repository
        with patch.object(camera, 'read_frame', side_effect=CaptureUnavailable('no camera')):
            resp = self.client.post('/api/capture', json={})
        self.assertEqual(resp.status_code, 503)
        self.assertFalse(resp.get_json()['success'])

    def test_overlapping_capture_returns_409(self):
        session_id = self.sample().get_json()['session_id']
        in_flight = threading.Event()
        release = threading.Event()

        def slow_read():
            in_flight.set()
            release.wait(5)
            return PixelBuffer.filled(64, 48, (7, 7, 7))

        responses = {}

        def first_capture():
            client = api_server.app.test_client()
            responses['first'] = client.post('/api/capture', json={'session_id': session_id,
                                                                'layout': 'single-averaged'})

        camera = api_server.frame_capture_service.camera_repository
        with patch.object(camera, 'read_frame', side_effect=slow_read):
            worker = threading.Thread(target=first_capture)
            worker.start()
            self.assertTrue(in_flight.wait(5))
            try:
                second = self.client.post('/api/capture', json={'session_id': session_id})
            finally:
                release.set()
                worker.join(5)

        self.assertEqual(second.status_code, 409)
        self.assertFalse(second.get_json()['success'])
        self.assertEqual(responses['first'].status_code, 200)
        self.assertEqual(responses['first'].get_json()['colors'][0]['hex'], '#070707')

    @patch('repositories.clipboard_repository.pyperclip.copy')
    def test_copy(self, copy):
        session_id = self.sample().get_json()['session_id']
        resp = self.client.post('/api/copy', json={'session_id': session_id, 'index': 0, 'representation': 'rgb'})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['copied'], 'rgb(10, 20, 30)')
        copy.assert_called_once_with('rgb(10, 20, 30)')

    @patch('repositories.clipboard_repository.pyperclip.copy',
           side_effect=pyperclip.PyperclipException('no clipboard mechanism'))
    def test_copy_failure_is_notified(self, _):
        session_id = self.sample().get_json()['session_id']
        resp = self.client.post('/api/copy', json={'session_id': session_id, 'index': 0})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertFalse(data['success'])
        self.assertEqual(data['notification'], 'Could not copy to clipboard')

        state = self.client.get(f'/api/state/{session_id}').get_json()['state']
        self.assertEqual(state['notification_level'], 'error')
        self.assertEqual(state['colors'][0]['hex'], '#0a141e')

        dismissed = self.client.post('/api/dismiss-notification', json={'session_id': session_id}).get_json()
        self.assertIsNone(dismissed['state']['notification'])

    def test_copy_bad_requests(self):
        self.assertEqual(self.client.post('/api/copy', json={'session_id': 'nope'}).status_code, 400)
        session_id = self.sample().get_json()['session_id']
        resp = self.client.post('/api/copy', json={'session_id': session_id, 'index': 3})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post('/api/copy', json={'session_id': session_id, 'representation': 'hsl'})
        self.assertEqual(resp.status_code, 400)

    def test_layouts_and_health(self):
        layouts = self.client.get('/api/layouts').get_json()
        self.assertIn('multi-point-responsive', layouts['layouts'])
        self.assertIn(layouts['default'], layouts['layouts'])
        self.assertEqual(self.client.get('/api/health').get_json()['status'], 'healthy')

    def test_clear_session(self):
        session_id = self.sample().get_json()['session_id']
        self.assertTrue(self.client.post('/api/clear-session', json={'session_id': session_id}).get_json()['success'])
        self.assertEqual(self.client.get(f'/api/state/{session_id}').status_code, 404)


if __name__ == "__main__":
    unittest.main()
