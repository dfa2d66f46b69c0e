#!/usr/bin/env python3
"""
Tests for IRBlasterDevice: learning, sending and the HVAC command table
"""

import base64
import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from tuyair import IRBlasterDevice, TransportRegistry
from tuyair.core import message_helper as mh
from tuyair.core.command_types import START_TRANSMIT_ACK, TRANSMIT_CLUSTER, START_TRANSMIT
from tuyair.core.exceptions import CommandNotFound, InvalidParameter, NotConfigured
from tuyair.core.struct_helper import checksum


HVAC_COMMANDS = [
    {'name': 'power_off', 'tuya_code': 'OFFCODE'},
    {'name': '24_cool_auto', 'tuya_code': 'XYZ'},
    {'name': '26_heat_low', 'tuya_code': 'HEAT26'},
]


class DeviceTestCase(unittest.TestCase):

    def setUp(self):
        self.sender = MagicMock()
        self.device = IRBlasterDevice('dev1', self.sender, registry=TransportRegistry())
        self.events = []
        self.device.add_listener(self.events.append)

    def sent_code(self, seq):
        """Code inside the send envelope stored for seq"""
        envelope = json.loads(bytes(self.device.transport.sessions.send_sessions[seq].buffer).decode())
        return envelope['key1']['key_code']

    def simulate_learn(self, seq, data):
        self.device.receive(*mh.new_start_transmit_message(seq, len(data)))
        self.device.receive(*mh.new_ack_message(START_TRANSMIT_ACK))
        self.device.receive(*mh.new_code_data_response_message(seq, 0, data, checksum(data)))
        self.device.receive(*mh.new_done_receiving_message(seq))
        return base64.b64encode(data).decode()


class TestLearn(DeviceTestCase):

    def test_learn_named_code(self):
        self.device.learn('power')
        code = self.simulate_learn(0x10, b'learned-bytes')
        self.assertEqual(self.device.learned_codes, {'power': code})
        self.assertEqual(self.device.last_learned_code, code)
        self.assertEqual(self.events[-1]['name'], 'lastLearnedCode')
        self.assertEqual(self.events[-1]['value'], code)
        self.assertIn(code, self.events[-1]['descriptionText'])

    def test_learn_anonymous(self):
        self.device.learn()
        code = self.simulate_learn(0x10, b'abc')
        self.assertEqual(self.device.learned_codes, {})
        self.assertEqual(self.device.last_learned_code, code)

    def test_last_learn_request_resolves_first(self):
        self.device.learn('first')
        self.device.learn('second')
        code = self.simulate_learn(0x10, b'abc')
        self.assertEqual(self.device.learned_codes, {'second': code})

    def test_completion_without_request(self):
        code = self.simulate_learn(0x10, b'abc')
        self.assertEqual(self.device.learned_codes, {})
        self.assertEqual(self.device.last_learned_code, code)

    def test_failing_event_listener(self):
        self.device.listeners.insert(0, MagicMock(side_effect=ValueError('bad listener')))
        self.device.learn('power')
        code = self.simulate_learn(0x10, b'abc')
        self.assertEqual(self.device.learned_codes, {'power': code})
        self.assertTrue(self.device.transport.sessions.pending_names.empty())
        self.assertEqual(self.events[-1]['value'], code)
        self.assertEqual(bytes.fromhex(self.sender.call_args[0][2]), b'{"study":1}')
        self.assertFalse(self.device.transport.sessions.learn_armed)

    def test_relearn_replaces(self):
        self.device.learn('power')
        self.simulate_learn(1, b'abc')
        self.device.learn('power')
        code = self.simulate_learn(2, b'def')
        self.assertEqual(self.device.learned_codes['power'], code)

    def test_remove_code(self):
        self.device.learned_codes['power'] = 'ABC'
        self.device.map_button(1, 'power')
        self.device.remove_code('power')
        self.assertEqual(self.device.learned_codes, {})
        self.assertEqual(self.device.buttons, {})
        with self.assertRaises(CommandNotFound):
            self.device.remove_code('power')

    def test_receive_button(self):
        with patch.object(self.device.transport, 'start_learn', side_effect=lambda: self.device._learned('CODE', 1)):
            self.assertEqual(self.device.receive_button('tv', timeout=1), 'CODE')
        self.assertEqual(self.device.learned_codes, {'tv': 'CODE'})
        # the temporary listener is gone
        self.assertEqual(self.device.listeners, [self.events.append])

    def test_receive_button_timeout(self):
        self.assertIsNone(self.device.receive_button(timeout=0.01))
        self.assertEqual(self.device.listeners, [self.events.append])


class TestSend(DeviceTestCase):

    def test_send_raw_code(self):
        seq = self.device.send_code(' AB C\nD ')
        self.assertEqual(self.sent_code(seq), 'ABCD')
        cluster, command, payload = self.sender.call_args[0]
        self.assertEqual((cluster, command), (TRANSMIT_CLUSTER, START_TRANSMIT))

    def test_send_envelope(self):
        seq = self.device.send_code('ABCD')
        envelope = bytes(self.device.transport.sessions.send_sessions[seq].buffer).decode()
        self.assertEqual(envelope, '{"key_num":1,"delay":300,"key1":{"num":1,"freq":38000,"type":1,"key_code":"ABCD"}}')
        self.assertEqual(mh.parse_message(*self.sender.call_args[0]).length, len(envelope))

    def test_send_learned_code(self):
        self.device.learned_codes['power'] = 'LEARNED'
        seq = self.device.send_code('power')
        self.assertEqual(self.sent_code(seq), 'LEARNED')

    def test_buttons(self):
        self.device.learned_codes['power'] = 'LEARNED'
        self.device.map_button('3', 'power')
        seq = self.device.push(3)
        self.assertEqual(self.sent_code(seq), 'LEARNED')
        self.assertEqual(self.device.unmap_button(3), 'power')
        with self.assertRaises(CommandNotFound):
            self.device.push(3)


class TestHVAC(DeviceTestCase):

    def configure(self, commands=HVAC_COMMANDS, model='ARRAH2E'):
        self.device.set_hvac_config({'model': model, 'commands': commands})

    def test_not_configured(self):
        with self.assertRaises(NotConfigured):
            self.device.hvac_turn_off()
        with self.assertRaises(NotConfigured):
            self.device.hvac_send_command('cool', '24', 'auto')
        with self.assertRaises(NotConfigured):
            self.device.hvac_restore_state()
        self.sender.assert_not_called()

    def test_set_hvac_config(self):
        self.configure()
        config = self.device.get_hvac_config()
        self.assertEqual(config['model'], 'ARRAH2E')
        self.assertEqual(config['commands'], HVAC_COMMANDS)
        self.assertEqual(config['currentState'], {'mode': 'off', 'temp': None, 'fan': None})
        self.assertEqual([(e['name'], e['value']) for e in self.events], [('hvacModel', 'ARRAH2E'), ('hvacConfigured', 'Yes')])

    def test_set_hvac_config_without_model(self):
        self.device.set_hvac_config({'commands': HVAC_COMMANDS})
        self.assertEqual(self.events[0]['value'], 'Unknown')

    def test_invalid_config(self):
        for config in (None, {}, {'model': 'x', 'commands': []}):
            with self.assertRaises(InvalidParameter):
                self.device.set_hvac_config(config)
        self.assertIsNone(self.device.get_hvac_config())

    def test_send_command(self):
        self.configure(commands={'24_cool_auto': 'XYZ', 'off': 'OFFCODE'})
        seq = self.device.hvac_send_command('cool', '24', 'auto')
        self.assertEqual(self.sent_code(seq), 'XYZ')
        self.assertEqual(self.device.get_hvac_config()['currentState'], {'mode': 'cool', 'temp': 24, 'fan': 'auto'})

    def test_turn_off(self):
        self.configure()
        self.device.hvac_send_command('heat', 26, 'low')
        seq = self.device.hvac_turn_off()
        self.assertEqual(self.sent_code(seq), 'OFFCODE')
        self.assertEqual(self.device.get_hvac_config()['currentState'], {'mode': 'off', 'temp': None, 'fan': None})

    def test_command_name_case_insensitive(self):
        self.configure()
        seq = self.device.hvac_send_command_name('24_COOL_AUTO')
        self.assertEqual(self.sent_code(seq), 'XYZ')

    def test_command_not_found(self):
        self.configure()
        self.device.hvac_send_command('cool', 24, 'auto')
        self.sender.reset_mock()
        with self.assertRaises(CommandNotFound):
            self.device.hvac_send_command('cool', 18, 'high')
        self.sender.assert_not_called()
        self.assertEqual(self.device.get_hvac_config()['currentState'], {'mode': 'cool', 'temp': 24, 'fan': 'auto'})

    def test_invalid_temperature(self):
        self.configure()
        with self.assertRaises(InvalidParameter):
            self.device.hvac_send_command('cool', None, 'auto')

    def test_nested_command_set(self):
        self.configure(commands={'off': 'OFFCODE', 'cool': {'auto': {'24': 'XYZ'}}})
        self.assertEqual(self.sent_code(self.device.hvac_send_command('cool', 24, 'auto')), 'XYZ')
        self.assertEqual(self.sent_code(self.device.hvac_turn_off()), 'OFFCODE')

    def test_restore_state(self):
        self.configure()
        self.assertIsNone(self.device.hvac_restore_state())
        self.sender.assert_not_called()

        self.device.hvac_send_command('heat', 26, 'low')
        seq = self.device.hvac_restore_state()
        self.assertEqual(self.sent_code(seq), 'HEAT26')


class TestPersistence(DeviceTestCase):

    def setUp(self):
        super(TestPersistence, self).setUp()
        self.tmpdir = tempfile.mkdtemp()
        self.fname = os.path.join(self.tmpdir, 'tuyair.json')

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_save_and_load(self):
        self.device.learned_codes['power'] = 'LEARNED'
        self.device.map_button(2, 'power')
        self.device.set_hvac_config({'model': 'X', 'commands': HVAC_COMMANDS})
        self.device.hvac_send_command('cool', 24, 'auto')
        self.device.save_state(self.fname)

        other = IRBlasterDevice('dev2', MagicMock(), registry=TransportRegistry())
        other.load_state(self.fname)
        self.assertEqual(other.learned_codes, {'power': 'LEARNED'})
        self.assertEqual(other.buttons, {2: 'power'})
        self.assertEqual(other.get_hvac_config()['currentState'], {'mode': 'cool', 'temp': 24, 'fan': 'auto'})
        self.assertEqual(other.transport.sessions.last_seq, 1)
        self.assertEqual(other.hvac_turn_off(), 2)


if __name__ == '__main__':
    unittest.main()
