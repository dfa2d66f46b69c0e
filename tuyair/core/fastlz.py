# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 FastLZ (level 1 format) compression as used by Tuya IR codes

 Compressed stream layout, one block at a time:

    000LLLLL <L+1 literal bytes>             literal run of 1-32 bytes
    LLLDDDDD DDDDDDDD                        match of L+2 bytes (L = 1..6)
    111DDDDD LLLLLLLL DDDDDDDD               match of L+9 bytes

 The distance D counts back from the byte before the current output
 position, so D=0 repeats the last byte written.

 Reference: https://gist.github.com/mildsunrise/1d576669b63a260d2cff35fda63ec0b5
"""

import logging

from .exceptions import CorruptData

log = logging.getLogger(__name__)

MIN_MATCH = 3
MAX_MATCH = 264         # 7 + 255 + 2
MAX_DISTANCE = 8192     # 13 bit distance field
MAX_LITERAL_RUN = 32


def decompress(data):
    """Decompress a FastLZ stream, raising CorruptData on malformed input"""
    data = bytes(data)
    out = bytearray()
    ip = 0

    while ip < len(data):
        ctrl = data[ip]
        ip += 1

        if ctrl < 32:
            ctrl += 1
            if ip + ctrl > len(data):
                raise CorruptData('Literal run of %d bytes at offset %d exceeds input' % (ctrl, ip - 1))
            out += data[ip:ip+ctrl]
            ip += ctrl
            continue

        length = ctrl >> 5
        if length == 7:
            if ip >= len(data):
                raise CorruptData('Extended length byte missing at offset %d' % ip)
            length += data[ip]
            ip += 1
        length += 2

        if ip >= len(data):
            raise CorruptData('Back reference distance byte missing at offset %d' % ip)
        ref = len(out) - ((ctrl & 31) << 8) - data[ip] - 1
        ip += 1

        if ref < 0:
            raise CorruptData('Back reference points %d bytes before start of output' % -ref)

        # byte at a time, a match may overlap the bytes it is producing
        for i in range(length):
            out.append(out[ref + i])

    return bytes(out)

def _emit_literals(out, data):
    for i in range(0, len(data), MAX_LITERAL_RUN):
        run = data[i:i+MAX_LITERAL_RUN]
        out.append(len(run) - 1)
        out += run

def _emit_match(out, length, distance):
    length -= 2
    if length < 7:
        out.append((length << 5) | (distance >> 8))
    else:
        out.append((7 << 5) | (distance >> 8))
        out.append(length - 7)
    out.append(distance & 0xFF)

def compress(data):
    """
    Compress bytes into a FastLZ stream.

    Greedy matcher: each 3-byte sequence is hashed to its most recent
    position, and a match is taken whenever that position repeats at least
    MIN_MATCH bytes.  Output is valid but not optimal.
    """
    data = bytes(data)
    out = bytearray()
    table = {}
    anchor = 0
    ip = 0

    while ip < len(data):
        match_len = 0
        match_pos = 0

        if ip + MIN_MATCH <= len(data):
            key = data[ip:ip+MIN_MATCH]
            candidate = table.get(key)
            table[key] = ip
            if candidate is not None and ip - candidate <= MAX_DISTANCE:
                limit = min(len(data) - ip, MAX_MATCH)
                while (match_len < limit and candidate + match_len < ip
                        and data[candidate + match_len] == data[ip + match_len]):
                    match_len += 1
                match_pos = candidate

        if match_len >= MIN_MATCH:
            _emit_literals(out, data[anchor:ip])
            _emit_match(out, match_len, ip - match_pos - 1)
            ip += match_len
            anchor = ip
        else:
            ip += 1

    _emit_literals(out, data[anchor:])
    log.debug('compress: %d bytes -> %d bytes', len(data), len(out))
    return bytes(out)
