# TuyaIR Module - IR Blaster Device
# -*- coding: utf-8 -*-
"""
 Control infrared appliances through a Tuya Zigbee IR blaster (ZS06 / TS1201)

 The radio is not part of this module.  Outbound messages go through a
 sender(cluster, command, payload) callable and inbound messages are fed
 to receive(cluster, command, payload).  payload is a hex byte string.

 Classes
    IRBlasterDevice(device_id, sender, registry=None)
        device_id (str): Key for the session tables, e.g. the Zigbee network id
        sender (callable): sender(cluster, command, payload), puts a message on the radio
        registry (TransportRegistry, optional): shared session tables, private if None

    Functions
        ir.learn( name=None )
            -> arm learn mode, the next button pressed on the real remote is stored under name
        ir.receive_button( name=None, timeout=30 )
            -> learn() and wait for the code, returns the base64 code or None on timeout
        ir.send_code( name_or_code )
            -> send a learned code by name or a raw base64 code, returns the sequence number
        ir.remove_code( name )
        ir.map_button( button, name ) / ir.unmap_button( button ) / ir.push( button )
            -> numbered buttons for learned codes

        ir.set_hvac_config( config ) / ir.get_hvac_config()
        ir.hvac_turn_off()
        ir.hvac_send_command( mode, temp, fan )
        ir.hvac_send_command_name( name )
        ir.hvac_restore_state()

        ir.add_listener( callback )
            -> callback(event) for each event, event = {'name':..., 'value':..., 'descriptionText':...}
               names: lastLearnedCode, hvacModel, hvacConfigured
        ir.receive( cluster, command, payload )
            -> feed an inbound message from the radio, returns None or an error_json dict
        ir.save_state( fname ) / ir.load_state( fname )
            -> persist learned codes, button mapping and the HVAC configuration as JSON
"""

import json
import logging
import queue

from .core import SEND_DELAY, DEFAULT_FREQ, SEND_ENVELOPE, STATEFILE
from .core import CommandNotFound, InvalidParameter, NotConfigured
from .core import TransportSession, normalize_code

log = logging.getLogger(__name__)

OFF_STATE = {'mode': 'off', 'temp': None, 'fan': None}
SPECIAL_COMMANDS = ('power_on', 'power_off', 'off')


class IRBlasterDevice(object):
    def __init__(self, device_id, sender, registry=None):
        self.id = device_id
        self.transport = TransportSession(device_id, sender, registry=registry, on_learned=self._learned)
        self.learned_codes = {}
        self.buttons = {}
        self.hvac_config = None
        self._hvac_index = {}
        self.last_learned_code = None
        self.listeners = []

    def __repr__(self):
        return 'IRBlasterDevice(%r, learned=%d, hvac=%s)' % (
            self.id, len(self.learned_codes), 'yes' if self.hvac_config else 'no')

    @property
    def lock(self):
        return self.transport.sessions.lock

    ########
    # Events
    ########

    def add_listener(self, callback):
        self.listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self.listeners:
            self.listeners.remove(callback)

    def _send_event(self, name, value, description=None):
        event = {'name': name, 'value': value, 'descriptionText': description}
        log.debug('event: %r', event)
        for callback in list(self.listeners):
            try:
                callback(event)
            except Exception:
                log.exception('event listener %r failed on %s', callback, name)

    #######
    # Learn
    #######

    def learn(self, name=None):
        log.info('learn(%s)', name)
        with self.lock:
            self.transport.sessions.pending_names.put(name)
            self.transport.start_learn()

    def _learned(self, code, seq):
        self.last_learned_code = code
        try:
            name = self.transport.sessions.pending_names.get_nowait()
        except queue.Empty:
            log.debug('learned code for seq %d has no pending learn request', seq)
            name = None
        if name is not None:
            self.learned_codes[name] = code
            log.info('stored learned code as %r', name)
        self._send_event('lastLearnedCode', code, '%s lastLearnedCode is %s' % (self.id, code))

    def receive_button(self, name=None, timeout=30):
        """
        Arm learn mode and wait for a button press on the real remote.

        Returns the base64 code, or None if nothing arrives within timeout
        seconds.  Inbound messages must be delivered from another thread.
        """
        codes = queue.Queue()

        def _listener(event):
            if event['name'] == 'lastLearnedCode':
                codes.put(event['value'])

        self.add_listener(_listener)
        try:
            self.learn(name)
            return codes.get(timeout=timeout)
        except queue.Empty:
            log.debug('receive_button: timeout after %s seconds', timeout)
            return None
        finally:
            self.remove_listener(_listener)

    def remove_code(self, name):
        with self.lock:
            if name not in self.learned_codes:
                raise CommandNotFound('No learned code named %r' % name)
            del self.learned_codes[name]
            for button in [b for b, n in self.buttons.items() if n == name]:
                del self.buttons[button]

    #########
    # Buttons
    #########

    def map_button(self, button, name):
        self.buttons[int(button)] = name

    def unmap_button(self, button):
        return self.buttons.pop(int(button), None)

    def push(self, button):
        button = int(button)
        if button not in self.buttons:
            raise CommandNotFound('Button %d is not mapped' % button)
        return self.send_code(self.buttons[button])

    ######
    # Send
    ######

    def send_code(self, name_or_code):
        log.info('send_code(%s)', name_or_code)
        with self.lock:
            code = self.learned_codes.get(name_or_code)
            if code is None:
                code = normalize_code(name_or_code)
            envelope = SEND_ENVELOPE % (SEND_DELAY, DEFAULT_FREQ, code)
            log.debug('JSON to send: %s', envelope)
            return self.transport.send_payload(envelope.encode('utf-8'))

    def receive(self, cluster, command, payload):
        return self.transport.receive(cluster, command, payload)

    ######
    # HVAC
    ######

    @staticmethod
    def _command_index(commands):
        """Lower-cased command name -> (name, code) for every accepted command layout"""
        index = {}
        if isinstance(commands, dict):
            for key, value in commands.items():
                if isinstance(value, dict):
                    # {mode: {fan: {temp: code}}}
                    for fan, temps in value.items():
                        for temp, code in temps.items():
                            name = '%s_%s_%s' % (temp, key, fan)
                            index[name.lower()] = (name, code)
                else:
                    name = 'power_off' if key == 'off' else key
                    index[name.lower()] = (name, value)
        else:
            for cmd in commands:
                name = cmd.get('name')
                if name and cmd.get('tuya_code'):
                    index[name.lower()] = (name, cmd['tuya_code'])
        return index

    def set_hvac_config(self, config):
        log.info('set_hvac_config(%s)', config.get('model') if config else None)
        if not config or not config.get('commands'):
            raise InvalidParameter('Invalid config: missing required fields')

        with self.lock:
            self.hvac_config = {
                'model': config.get('model'),
                'commands': config['commands'],
                'currentState': dict(OFF_STATE),
            }
            self._hvac_index = self._command_index(config['commands'])

        self._send_event('hvacModel', config.get('model') or 'Unknown')
        self._send_event('hvacConfigured', 'Yes')
        log.info('HVAC configuration saved: %d commands', len(self._hvac_index))

    def get_hvac_config(self):
        return self.hvac_config

    def hvac_turn_off(self):
        return self.hvac_send_command_name('power_off')

    def hvac_send_command_name(self, name):
        log.info('hvac_send_command_name(%s)', name)
        with self.lock:
            if not self.hvac_config:
                raise NotConfigured('HVAC not configured')

            found = self._hvac_index.get(name.lower())
            if found is None:
                raise CommandNotFound("Command '%s' not found in configuration" % name)

            seq = self.send_code(found[1])

            parts = name.split('_')
            if len(parts) == 3 and parts[0].isdigit():
                self.hvac_config['currentState'] = {'mode': parts[1], 'temp': int(parts[0]), 'fan': parts[2]}
            elif name.lower() in ('power_off', 'off'):
                self.hvac_config['currentState'] = dict(OFF_STATE)
            log.info('HVAC command sent: %s', found[0])
            return seq

    def hvac_send_command(self, mode, temp=None, fan=None):
        if mode in SPECIAL_COMMANDS:
            name = mode
        else:
            try:
                name = '%d_%s_%s' % (int(temp), mode, fan)
            except (TypeError, ValueError):
                raise InvalidParameter('Invalid temperature: %r' % (temp,)) from None
        return self.hvac_send_command_name(name)

    def hvac_restore_state(self):
        if not self.hvac_config:
            raise NotConfigured('HVAC not configured')

        current = self.hvac_config.get('currentState')
        if not current or current['mode'] == 'off':
            log.info('Last state was OFF or unknown - nothing to restore')
            return None
        return self.hvac_send_command(current['mode'], current['temp'], current['fan'])

    #############
    # Persistence
    #############

    def state(self):
        return {
            'learnedCodes': dict(self.learned_codes),
            'buttons': {str(b): n for b, n in self.buttons.items()},
            'hvacConfig': self.hvac_config,
            'seq': self.transport.sessions.last_seq,
        }

    def save_state(self, fname=STATEFILE):
        with self.lock:
            data = self.state()
        with open(fname, 'w') as f:
            json.dump(data, f, indent=4)
        log.debug('saved state to %s', fname)

    def load_state(self, fname=STATEFILE):
        with open(fname, 'r') as f:
            data = json.load(f)

        with self.lock:
            self.learned_codes = dict(data.get('learnedCodes') or {})
            self.buttons = {int(b): n for b, n in (data.get('buttons') or {}).items()}
            self.hvac_config = data.get('hvacConfig')
            self._hvac_index = self._command_index(self.hvac_config['commands']) if self.hvac_config else {}
            self.transport.sessions.last_seq = int(data.get('seq', 0))
        log.debug('loaded state from %s', fname)
