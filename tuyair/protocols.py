# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 HVAC IR protocol timing database and header based protocol identification

 Timing values come from IRremoteESP8266 (https://github.com/crankyoldgit/IRremoteESP8266)
 and real-world captures.  They are good enough to tell protocols apart by
 their header, nothing more.

 Classes
    ProtocolSignature(name, manufacturer, header_mark, header_space, bit_mark, one_space, zero_space, tolerance, frequency, notes)
    ProtocolDatabase(signatures=None)
        db.register(signature)
        db.get(name)                          -> ProtocolSignature, raises UnknownProtocol
        db.names()                            -> list of protocol names in registration order
        db.all_manufacturers()                -> sorted list of unique manufacturer names
        db.protocols_by_manufacturer(name)    -> list of protocol names (case-insensitive match)
        db.capabilities(name)                 -> dict with 'modes', 'fanSpeeds', 'tempRange', 'features'
        db.identify(timings, tolerance_multiplier=1.5)

 Functions
    identify_protocol(timings, tolerance_multiplier=1.5, database=None)
        -> dict with 'protocol', 'manufacturer', 'confidence', 'timingMatch' and 'notes', or None
    match_score(signature, timings, tolerance_multiplier=1.5)
        -> 0.0 - 1.0 header match score
"""

from collections import namedtuple
import logging
import math

from .core import DEFAULT_FREQ, MIN_TIMINGS, TOLERANCE_MULTIPLIER
from .core import UnknownProtocol

log = logging.getLogger(__name__)

ProtocolSignature = namedtuple(
    'ProtocolSignature',
    'name manufacturer header_mark header_space bit_mark one_space zero_space tolerance frequency notes'
)
ProtocolSignature.__new__.__defaults__ = (200, DEFAULT_FREQ, '')

# Every protocol in the table accepts the same settings
CAPABILITIES = {
    'modes': ['cool', 'heat', 'dry', 'fan', 'auto'],
    'fanSpeeds': ['auto', 'low', 'medium', 'high', 'quiet'],
    'tempRange': {'min': 16, 'max': 30, 'unit': 'celsius'},
    'features': ['swing'],
}

DEFAULT_SIGNATURES = (
    ProtocolSignature('FUJITSU_AC', ('Fujitsu', 'Fujitsu General', 'OGeneral'), 3300, 1600, 420, 1200, 400, 300, 38000,
                      'Standard Fujitsu AC protocol (ARRAH2E, AR-RAx series)'),
    ProtocolSignature('FUJITSU_AC264', ('Fujitsu',), 3300, 1600, 420, 1200, 400, 300, 38000,
                      'Extended 264-bit Fujitsu protocol'),
    ProtocolSignature('DAIKIN', ('Daikin',), 3650, 1623, 428, 1280, 428, 200, 38000,
                      'Daikin ARC series remotes'),
    ProtocolSignature('DAIKIN2', ('Daikin',), 3500, 1728, 460, 1270, 420, 200, 38000,
                      'Daikin ARC4xx series'),
    ProtocolSignature('MITSUBISHI_AC', ('Mitsubishi', 'Mitsubishi Electric'), 3400, 1750, 450, 1300, 420, 200, 38000,
                      'Standard Mitsubishi AC (MSZ series)'),
    ProtocolSignature('MITSUBISHI_HEAVY_152', ('Mitsubishi Heavy Industries',), 3200, 1600, 400, 1200, 400, 200, 38000,
                      'Mitsubishi Heavy SRK series'),
    ProtocolSignature('GREE', ('Gree', 'Cooper & Hunter', 'RusClimate', 'Soleus Air'), 9000, 4500, 620, 1600, 540, 300, 38000,
                      'Gree YAW1F, Cooper & Hunter'),
    ProtocolSignature('LG', ('LG', 'General Electric'), 8000, 4000, 600, 1600, 550, 300, 38000,
                      'LG AKB series remotes'),
    ProtocolSignature('SAMSUNG_AC', ('Samsung',), 690, 17844, 690, 1614, 492, 200, 38000,
                      'Samsung AR series'),
    ProtocolSignature('PANASONIC_AC', ('Panasonic',), 3500, 1750, 435, 1300, 435, 200, 38000,
                      'Panasonic CS series'),
    ProtocolSignature('HITACHI_AC', ('Hitachi',), 3400, 1700, 400, 1250, 400, 200, 38000,
                      'Hitachi RAK/RAS series'),
    ProtocolSignature('HITACHI_AC1', ('Hitachi',), 3300, 1700, 400, 1200, 400, 200, 38000,
                      'Alternate Hitachi protocol'),
    ProtocolSignature('TOSHIBA_AC', ('Toshiba', 'Carrier'), 4400, 4300, 543, 1623, 543, 300, 38000,
                      'Toshiba RAS series'),
    ProtocolSignature('SHARP_AC', ('Sharp',), 3800, 1900, 470, 1400, 470, 200, 38000,
                      'Sharp CRMC-A series'),
    ProtocolSignature('HAIER_AC', ('Haier', 'Daichi'), 3000, 3000, 520, 1650, 650, 250, 38000,
                      'Haier HSU series'),
    ProtocolSignature('MIDEA', ('Midea', 'Comfee', 'Electrolux', 'Keystone', 'Trotec'), 4420, 4420, 560, 1680, 560, 300, 38000,
                      'Midea MWMA series, Electrolux variants'),
    ProtocolSignature('COOLIX', ('Midea', 'Tokio', 'Airwell', 'Beko', 'Bosch'), 4480, 4480, 560, 1680, 560, 300, 38000,
                      'Coolix/Midea variant used by multiple brands'),
    ProtocolSignature('CARRIER_AC', ('Carrier',), 8960, 4480, 560, 1680, 560, 300, 38000,
                      'Carrier 619EGX series'),
    ProtocolSignature('ELECTRA_AC', ('Electra', 'AEG', 'AUX', 'Frigidaire'), 9000, 4500, 630, 1650, 530, 300, 38000,
                      'Electra YKR series remotes'),
    ProtocolSignature('WHIRLPOOL_AC', ('Whirlpool',), 8950, 4484, 597, 1649, 547, 300, 38000,
                      'Whirlpool SPIS series'),
)


def match_score(signature, timings, tolerance_multiplier=TOLERANCE_MULTIPLIER):
    """Score how well the header (first mark and space) of timings fits signature"""
    if not timings or len(timings) < 2:
        return 0.0

    adjusted = signature.tolerance * tolerance_multiplier
    mark_diff = abs(timings[0] - signature.header_mark)
    space_diff = abs(timings[1] - signature.header_space)

    if mark_diff > adjusted or space_diff > adjusted:
        return 0.0

    return ((1.0 - mark_diff / adjusted) + (1.0 - space_diff / adjusted)) / 2.0

def _round2(value):
    # half-up, round() would use banker's rounding
    return math.floor(value * 100 + 0.5) / 100.0


class ProtocolDatabase(object):
    def __init__(self, signatures=None):
        """
        Ordered registry of protocol signatures.

        Args:
            signatures: Iterable of ProtocolSignature, DEFAULT_SIGNATURES if None

        Registration order matters: on equal identification scores the
        protocol registered first wins.
        """
        self._protocols = {}
        if signatures is None:
            signatures = DEFAULT_SIGNATURES
        for sig in signatures:
            self.register(sig)

    def register(self, signature):
        if signature.name in self._protocols:
            raise ValueError('Protocol %s is already registered' % signature.name)
        self._protocols[signature.name] = signature

    def get(self, name):
        try:
            return self._protocols[name]
        except KeyError:
            raise UnknownProtocol('Unsupported protocol: %s' % name) from None

    def names(self):
        return list(self._protocols)

    def all_manufacturers(self):
        manufacturers = set()
        for sig in self._protocols.values():
            manufacturers.update(sig.manufacturer)
        return sorted(manufacturers)

    def protocols_by_manufacturer(self, manufacturer):
        manufacturer = manufacturer.lower()
        return [name for name, sig in self._protocols.items()
                if any(m.lower() == manufacturer for m in sig.manufacturer)]

    def capabilities(self, name):
        self.get(name)
        return {
            'modes': list(CAPABILITIES['modes']),
            'fanSpeeds': list(CAPABILITIES['fanSpeeds']),
            'tempRange': dict(CAPABILITIES['tempRange']),
            'features': list(CAPABILITIES['features']),
        }

    def identify(self, timings, tolerance_multiplier=TOLERANCE_MULTIPLIER):
        if not timings or len(timings) < MIN_TIMINGS:
            log.debug('identify: need at least %d timings, got %d', MIN_TIMINGS, len(timings) if timings else 0)
            return None

        best = None
        best_score = 0.0
        for sig in self._protocols.values():
            score = match_score(sig, timings, tolerance_multiplier)
            log.debug('identify: %s scored %.3f', sig.name, score)
            if score > best_score:
                best_score = score
                best = sig

        if best is None:
            log.debug('identify: no protocol matches header [%d, %d]', timings[0], timings[1])
            return None

        return {
            'protocol': best.name,
            'manufacturer': list(best.manufacturer),
            'confidence': _round2(best_score),
            'timingMatch': {
                'headerMark': timings[0],
                'headerSpace': timings[1],
                'expectedMark': best.header_mark,
                'expectedSpace': best.header_space,
            },
            'notes': best.notes,
        }

    def __contains__(self, name):
        return name in self._protocols

    def __len__(self):
        return len(self._protocols)

    def __iter__(self):
        return iter(self._protocols.values())


default_database = ProtocolDatabase()

def identify_protocol(timings, tolerance_multiplier=TOLERANCE_MULTIPLIER, database=None):
    if database is None:
        database = default_database
    return database.identify(timings, tolerance_multiplier)
