# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 Tuya IR code conversion

 A Tuya IR code ("wire code") is a base64 string of a FastLZ-compressed
 sequence of little-endian uint16 mark/space timings in microseconds.

 Functions
    decode( code )
        -> convert a base64 code to a list of timings
    encode( timings )
        -> convert a list of timings to a base64 code
    validate( code )
        -> True if the code decodes without error
    code_info( code )
        -> dict with 'valid', 'timingsCount', 'totalDuration' and 'timings' (or 'error')
    print_pulses( code_or_timings )
        -> pretty-print a sequence of pulses and gaps length
"""

import base64
import binascii
import logging
import re
import struct

from . import fastlz
from .exceptions import CorruptData, OutOfRange, TuyaIRError

log = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s')


def normalize_code(code):
    """Remove all whitespace, learned codes are often displayed wrapped"""
    return _WHITESPACE.sub('', code)

def decode(code):
    try:
        compressed = base64.b64decode(normalize_code(code), validate=True)
    except (binascii.Error, ValueError) as err:
        raise CorruptData('Invalid base64 IR code: %s' % err) from err

    raw_bytes = fastlz.decompress(compressed)
    if len(raw_bytes) % 2:
        log.debug('decode: dropping odd trailing byte %02X', raw_bytes[-1])
    fmt = '<%dH' % (len(raw_bytes) >> 1)
    return list(struct.unpack(fmt, raw_bytes[:len(raw_bytes) & ~1]))

def encode(timings):
    for t in timings:
        if t < 0 or t > 0xFFFF:
            raise OutOfRange('Timing value %r out of range (0-65535)' % (t,))
    fmt = '<%dH' % len(timings)
    compressed = fastlz.compress(struct.pack(fmt, *timings))
    return base64.b64encode(compressed).decode('ascii')

def validate(code):
    if not code or not code.strip():
        return False
    try:
        decode(code)
        return True
    except TuyaIRError:
        return False

def code_info(code):
    try:
        timings = decode(code)
    except TuyaIRError as err:
        return {'valid': False, 'error': str(err)}

    return {
        'valid': True,
        'timingsCount': len(timings),
        'totalDuration': sum(timings),
        'timings': timings,
    }

def print_pulses(code, use_log=None):
    if not use_log: use_log = log
    if isinstance(code, (list, tuple)):
        pulses = code
    else:
        pulses = decode(code)
    message = "Pulses and gaps (microseconds): " + ' '.join([f'{"p" if i % 2 == 0 else "g"}{pulses[i]}' for i in range(len(pulses))])
    if use_log.getEffectiveLevel() <= logging.DEBUG:
        use_log.debug( message )
    return message
