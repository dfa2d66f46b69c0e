# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 Fixed-layout binary records carried as hex byte strings.

 Most Zigbee payloads of the IR blaster are little-endian structs. A layout is
 an ordered sequence of (name, type) pairs where type is one of:

    uint8, uint16, uint24, uint32   unsigned little-endian integers
    octetStr                        one length byte followed by that many raw bytes

 This is a dumb packer: integers wider than their field are truncated and
 nothing beyond the length of the input is validated.
"""

import logging
import struct

from .exceptions import MalformedRecord

log = logging.getLogger(__name__)

# Integer field widths in bytes
FIELD_SIZES = {
    'uint8': 1,
    'uint16': 2,
    'uint24': 3,
    'uint32': 4,
}
OCTET_STR = 'octetStr'
MAX_OCTET_STR = 0xFF


def payload_to_bytes(payload):
    """Convert a hex byte string ("0A 1B ..."), a list of hex byte strings, or bytes into bytes"""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    if isinstance(payload, (list, tuple)):
        return bytes(int(x, 16) for x in payload)
    return bytes.fromhex(payload)

def bytes_to_payload(data):
    """Format bytes as a string of space-separated hex bytes, the payload of most commands"""
    return ' '.join('%02X' % b for b in bytearray(data))

def checksum(data):
    """
    Checksum used to ensure the code parts are assembled correctly.

    Returns the sum of all bytes mod 256.  The device firmware uses this, so
    the order of the bytes does not matter to it.
    """
    return sum(bytearray(data)) % 0x100

def _write_int(out, value, size):
    value &= (1 << (size * 8)) - 1
    if size == 3:
        out += struct.pack('<HB', value & 0xFFFF, value >> 16)
    else:
        out += struct.pack({1: '<B', 2: '<H', 4: '<I'}[size], value)

def _read_int(data, pos, size):
    if size == 3:
        low, high = struct.unpack_from('<HB', data, pos)
        return low | (high << 16)
    return struct.unpack_from({1: '<B', 2: '<H', 4: '<I'}[size], data, pos)[0]

def pack_struct(layout, fields):
    """Pack a dict of fields into bytes according to layout"""
    out = bytearray()
    for name, ftype in layout:
        value = fields[name]
        if ftype in FIELD_SIZES:
            _write_int(out, int(value), FIELD_SIZES[ftype])
        elif ftype == OCTET_STR:
            value = bytes(bytearray(value))
            if len(value) > MAX_OCTET_STR:
                raise ValueError('%s is %d bytes, an octetStr holds at most %d' % (name, len(value), MAX_OCTET_STR))
            out.append(len(value))
            out += value
        else:
            raise ValueError('Unknown type: %s (name: %s)' % (ftype, name))
    return bytes(out)

def unpack_struct(layout, data):
    """Unpack bytes into a dict according to layout"""
    data = bytes(data)
    result = {}
    pos = 0
    for name, ftype in layout:
        if ftype in FIELD_SIZES:
            size = FIELD_SIZES[ftype]
            if pos + size > len(data):
                raise MalformedRecord('Not enough data to unpack %s: need %d bytes at offset %d, have %d' % (name, size, pos, len(data)))
            result[name] = _read_int(data, pos, size)
            pos += size
        elif ftype == OCTET_STR:
            if pos >= len(data):
                raise MalformedRecord('Not enough data to unpack length of %s at offset %d' % (name, pos))
            length = data[pos]
            pos += 1
            if pos + length > len(data):
                raise MalformedRecord('Not enough data to unpack %s: need %d bytes, have %d' % (name, length, len(data) - pos))
            result[name] = data[pos:pos+length]
            pos += length
        else:
            raise ValueError('Unknown type: %s (name: %s)' % (ftype, name))
    return result

def to_payload(layout, fields):
    """Format a struct as a string of space-separated hex bytes"""
    return bytes_to_payload(pack_struct(layout, fields))

def to_struct(layout, payload):
    """Parse a struct from a hex byte string (or list of hex bytes, or raw bytes)"""
    try:
        data = payload_to_bytes(payload)
    except ValueError as err:
        raise MalformedRecord('Payload is not a hex byte string: %r' % (payload,)) from err
    return unpack_struct(layout, data)
