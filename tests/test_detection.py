#!/usr/bin/env python3
"""
Tests for local and remote HVAC model detection
"""

import json
import unittest
from unittest.mock import MagicMock, patch

import requests

from tuyair import IRBlasterDevice, TransportRegistry
from tuyair.CodeGenerator import HVACCodeGenerator
from tuyair.Detection import DetectionClient, LocalDetector, hvac_config
from tuyair.core import ir_helper


def mock_response(status_code=200, data=None, content=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = content if content is not None else json.dumps(data).encode()
    response.text = response.content.decode(errors='replace')
    return response


class TestLocalDetector(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.code = HVACCodeGenerator('FUJITSU_AC').generate_code('on', 'cool', 22, 'low')
        cls.result = LocalDetector().detect(cls.code)

    def test_detect(self):
        result = self.result
        self.assertEqual(result['protocol'], 'FUJITSU_AC')
        self.assertEqual(result['model'], 'FUJITSU_AC')
        self.assertEqual(result['confidence'], 1.0)
        self.assertEqual(result['manufacturer'], 'Fujitsu, Fujitsu General, OGeneral')
        self.assertEqual((result['minTemperature'], result['maxTemperature']), (16, 30))
        self.assertEqual(result['operationModes'], ['cool', 'heat', 'dry', 'fan', 'auto'])
        self.assertEqual(result['fanModes'], ['auto', 'low', 'medium', 'high', 'quiet'])

    def test_commands(self):
        commands = self.result['commands']
        self.assertEqual(len(commands), 1 + 4 * 5 * 15)
        self.assertEqual(commands[0]['name'], 'power_off')
        names = {c['name']: c['tuya_code'] for c in commands}
        self.assertEqual(names['22_cool_low'], self.code)
        for c in commands[:10]:
            self.assertTrue(ir_helper.validate(c['tuya_code']))

    def test_configures_device(self):
        device = IRBlasterDevice('dev', MagicMock(), registry=TransportRegistry())
        device.set_hvac_config(hvac_config(self.result))
        seq = device.hvac_send_command('cool', 22, 'low')
        envelope = json.loads(bytes(device.transport.sessions.send_sessions[seq].buffer).decode())
        self.assertEqual(envelope['key1']['key_code'], self.code)

    def test_bad_input(self):
        detector = LocalDetector()
        self.assertEqual(detector.detect('')['Err'], '904')
        self.assertEqual(detector.detect('  \n ')['Err'], '904')
        self.assertEqual(detector.detect('abc')['Err'], '904')
        self.assertEqual(detector.detect('!!!!!!!!')['Err'], '904')

    def test_unknown_protocol(self):
        result = LocalDetector().detect(ir_helper.encode([100, 100, 100, 100]))
        self.assertEqual(result['Err'], '907')


class TestDetectionClient(unittest.TestCase):

    def setUp(self):
        self.client = DetectionClient()

    @patch('tuyair.Detection.requests.post')
    def test_detect(self, post):
        post.return_value = mock_response(data={
            'protocol': 'DAIKIN',
            'confidence': 0.92,
            'commands': [{'name': 'power_off', 'tuya_code': 'OFF'}],
            'operationModes': ['cool'],
            'fanModes': ['auto'],
            'notes': 'Daikin ARC series remotes',
        })
        result = self.client.detect(' CODE\nWITH SPACES ')

        args, kwargs = post.call_args
        self.assertEqual(args[0], 'https://maestro-tuya-ir.vercel.app/api/identify')
        self.assertEqual(kwargs['json'], {'tuya_code': 'CODEWITHSPACES'})
        self.assertEqual(kwargs['timeout'], 30)
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/json')

        self.assertEqual(result['protocol'], 'DAIKIN')
        self.assertEqual(result['model'], 'DAIKIN')
        self.assertEqual(result['confidence'], 0.92)
        self.assertEqual(result['commands'], [{'name': 'power_off', 'tuya_code': 'OFF'}])
        self.assertEqual((result['minTemperature'], result['maxTemperature']), (16, 30))
        self.assertEqual(result['notes'], 'Daikin ARC series remotes')

    @patch('tuyair.Detection.requests.post')
    def test_custom_url(self, post):
        post.return_value = mock_response(data={'protocol': 'LG'})
        DetectionClient('http://localhost:8000/', timeout=5).detect('CODE')
        self.assertEqual(post.call_args[0][0], 'http://localhost:8000/api/identify')
        self.assertEqual(post.call_args[1]['timeout'], 5)

    @patch('tuyair.Detection.requests.post')
    def test_not_identified(self, post):
        post.return_value = mock_response(data={'protocol': None, 'error': 'no match'})
        result = self.client.detect('CODE')
        self.assertEqual(result['Err'], '907')
        self.assertEqual(result['Payload'], 'no match')

    @patch('tuyair.Detection.requests.post')
    def test_http_error(self, post):
        post.return_value = mock_response(500, data={'error': 'boom'})
        result = self.client.detect('CODE')
        self.assertEqual(result['Err'], '911')
        self.assertEqual(result['Payload']['status'], 500)

    @patch('tuyair.Detection.requests.post')
    def test_invalid_json(self, post):
        post.return_value = mock_response(content=b'<html>')
        self.assertEqual(self.client.detect('CODE')['Err'], '900')

    @patch('tuyair.Detection.requests.post')
    def test_timeout(self, post):
        post.side_effect = requests.exceptions.Timeout('slow')
        self.assertEqual(self.client.detect('CODE')['Err'], '902')

    @patch('tuyair.Detection.requests.post')
    def test_connection_error(self, post):
        post.side_effect = requests.exceptions.ConnectionError('down')
        self.assertEqual(self.client.detect('CODE')['Err'], '901')

    @patch('tuyair.Detection.requests.post')
    def test_empty_code_not_sent(self, post):
        self.assertEqual(self.client.detect('')['Err'], '904')
        post.assert_not_called()


if __name__ == '__main__':
    unittest.main()
