# TuyaIR Module - HVAC Code Generator
# -*- coding: utf-8 -*-
"""
 Synthesize Tuya IR codes for the HVAC protocols in the protocol database

 The bit layout is a placeholder and not the real over-the-air frame of any
 protocol.  Codes carry the right header and bit timings so they identify
 as their protocol, which is what the setup flow needs.

 Classes
    HVACCodeGenerator(protocol, database=None)
        gen.generate_code(power='on', mode='cool', temperature=24, fan='auto', swing='off')
            -> Tuya base64 IR code
        gen.generate_all_commands(modes=None, temp_range=None, fan_speeds=None)
            -> {'off': code, mode: {fan: {'<temp>': code}}}

 Functions
    generate_command(protocol, power='on', mode='cool', temperature=24, fan='auto', swing='off')
    command_list(commands)
        -> flatten generate_all_commands() output into [{'name': ..., 'tuya_code': ...}]
"""

import logging

from .core import InvalidParameter
from .core import ir_helper
from .protocols import default_database

log = logging.getLogger(__name__)

FRAME_BITS = 96
PATTERN_REPEAT = 8

MODE_BITS = {
    'cool': '000',
    'heat': '001',
    'dry': '010',
    'fan': '011',
    'auto': '100',
}
FAN_BITS = {
    'auto': '00',
    'low': '01',
    'medium': '10',
    'high': '11',
    'quiet': '00',
}
ON_OFF = ('on', 'off')


def _whole_degrees(temperature):
    """Temperature as an int, raises InvalidParameter for anything that is not a whole number"""
    try:
        value = float(temperature)
        degrees = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidParameter('Invalid temperature: %r' % (temperature,)) from None
    if value != degrees:
        raise InvalidParameter('Temperature must be a whole number of degrees: %r' % (temperature,))
    return degrees


class HVACCodeGenerator(object):
    def __init__(self, protocol, database=None):
        """
        Code generator for one protocol.

        Args:
            protocol: Protocol name, e.g. FUJITSU_AC
            database: ProtocolDatabase to look the protocol up in, the default table if None

        Raises UnknownProtocol if the protocol is not registered.
        """
        self.database = database if database is not None else default_database
        self.protocol = protocol
        self.signature = self.database.get(protocol)
        self.capabilities = self.database.capabilities(protocol)

    def _validate(self, power, mode, temperature, fan, swing):
        caps = self.capabilities
        if power not in ON_OFF:
            raise InvalidParameter('Invalid power: %s' % power)
        if mode not in caps['modes']:
            raise InvalidParameter('Invalid mode: %s. Supported: %s' % (mode, caps['modes']))
        tmin = caps['tempRange']['min']
        tmax = caps['tempRange']['max']
        if temperature < tmin or temperature > tmax:
            raise InvalidParameter('Temperature %d out of range (%d-%d)' % (temperature, tmin, tmax))
        if fan not in caps['fanSpeeds']:
            raise InvalidParameter('Invalid fan speed: %s. Supported: %s' % (fan, caps['fanSpeeds']))
        if swing not in ON_OFF:
            raise InvalidParameter('Invalid swing: %s' % swing)

    def bit_pattern(self, power, mode, temperature, fan, swing):
        base = ('1' if power == 'on' else '0') + MODE_BITS.get(mode, '000') \
            + format(temperature - 16, '05b') + FAN_BITS.get(fan, '00') \
            + ('1' if swing == 'on' else '0')
        return (base * PATTERN_REPEAT)[:FRAME_BITS]

    def timings(self, power='on', mode='cool', temperature=24, fan='auto', swing='off'):
        sig = self.signature
        timings = [sig.header_mark, sig.header_space]
        for bit in self.bit_pattern(power, mode, temperature, fan, swing):
            timings.append(sig.bit_mark)
            timings.append(sig.one_space if bit == '1' else sig.zero_space)
        timings.append(sig.bit_mark)
        return timings

    def generate_code(self, power='on', mode='cool', temperature=24, fan='auto', swing='off'):
        temperature = _whole_degrees(temperature)
        self._validate(power, mode, temperature, fan, swing)
        return ir_helper.encode(self.timings(power, mode, temperature, fan, swing))

    def generate_all_commands(self, modes=None, temp_range=None, fan_speeds=None):
        caps = self.capabilities
        if not modes:
            modes = [m for m in caps['modes'] if m != 'auto']
        if not temp_range:
            temp_range = (caps['tempRange']['min'], caps['tempRange']['max'])
        if not fan_speeds:
            fan_speeds = caps['fanSpeeds']

        commands = {'off': self.generate_code('off', 'cool', 24)}
        for mode in modes:
            fans = {}
            for fan in fan_speeds:
                temps = {}
                for temp in range(temp_range[0], temp_range[1] + 1):
                    try:
                        temps[str(temp)] = self.generate_code('on', mode, temp, fan, 'off')
                    except InvalidParameter:
                        log.debug('skipping unsupported combination %s/%s/%d', mode, fan, temp)
                if temps:
                    fans[fan] = temps
            # modes with nothing supported are left out
            if fans:
                commands[mode] = fans

        log.debug('generated %s command set: %d modes', self.protocol, len(modes))
        return commands


def generate_command(protocol, power='on', mode='cool', temperature=24, fan='auto', swing='off'):
    return HVACCodeGenerator(protocol).generate_code(power, mode, temperature, fan, swing)

def command_list(commands):
    """Flatten a nested command set into the name/code list used by the detection service"""
    result = []
    if 'off' in commands:
        result.append({'name': 'power_off', 'tuya_code': commands['off']})
    for mode, fans in commands.items():
        if mode == 'off':
            continue
        for fan, temps in fans.items():
            for temp, code in temps.items():
                result.append({'name': '%s_%s_%s' % (temp, mode, fan), 'tuya_code': code})
    return result
