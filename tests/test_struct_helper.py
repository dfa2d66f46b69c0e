#!/usr/bin/env python3
"""
Tests for the struct packer and the chunk checksum
"""

import unittest

from tuyair.core import struct_helper
from tuyair.core.struct_helper import checksum, to_payload, to_struct
from tuyair.core.exceptions import MalformedRecord
from tuyair.core.message_helper import CODE_DATA_REQUEST_FMT, CODE_DATA_RESPONSE_FMT, START_TRANSMIT_FMT


class TestChecksum(unittest.TestCase):

    def test_sum_mod_256(self):
        self.assertEqual(checksum(b'\x01\x02\x03'), 6)
        self.assertEqual(checksum(bytes([200, 100])), 44)
        self.assertEqual(checksum(b''), 0)

    def test_order_does_not_matter(self):
        data = bytes(range(50))
        self.assertEqual(checksum(data), checksum(data[::-1]))

    def test_accepts_lists(self):
        self.assertEqual(checksum([255, 1]), 0)


class TestToPayload(unittest.TestCase):

    def test_little_endian_integers(self):
        layout = (('a', 'uint8'), ('b', 'uint16'), ('c', 'uint24'), ('d', 'uint32'))
        payload = to_payload(layout, {'a': 0x01, 'b': 0x0203, 'c': 0x040506, 'd': 0x0708090A})
        self.assertEqual(payload, '01 03 02 06 05 04 0A 09 08 07')

    def test_code_data_request_layout(self):
        payload = to_payload(CODE_DATA_REQUEST_FMT, {'seq': 1, 'position': 0, 'maxlen': 0x38})
        self.assertEqual(payload, '01 00 00 00 00 00 38')

    def test_octet_string(self):
        payload = to_payload((('s', 'octetStr'),), {'s': b'\x01\x02'})
        self.assertEqual(payload, '02 01 02')

    def test_empty_octet_string(self):
        self.assertEqual(to_payload((('s', 'octetStr'),), {'s': b''}), '00')

    def test_wide_values_are_truncated(self):
        self.assertEqual(to_payload((('a', 'uint8'),), {'a': 0x1FF}), 'FF')
        self.assertEqual(to_payload((('a', 'uint16'),), {'a': 0x12345}), '45 23')

    def test_octet_string_too_long(self):
        with self.assertRaises(ValueError):
            to_payload((('s', 'octetStr'),), {'s': bytes(256)})

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            to_payload((('a', 'float'),), {'a': 1})


class TestToStruct(unittest.TestCase):

    def test_round_trip(self):
        fields = {'seq': 0xBEEF, 'length': 140, 'unk1': 0, 'unk2': 0xE004, 'unk3': 1, 'cmd': 2, 'unk4': 0}
        self.assertEqual(to_struct(START_TRANSMIT_FMT, to_payload(START_TRANSMIT_FMT, fields)), fields)

    def test_response_round_trip(self):
        fields = {'zero': 0, 'seq': 7, 'position': 55, 'msgpart': b'abc', 'msgpartcrc': checksum(b'abc')}
        self.assertEqual(to_struct(CODE_DATA_RESPONSE_FMT, to_payload(CODE_DATA_RESPONSE_FMT, fields)), fields)

    def test_payload_forms(self):
        layout = (('a', 'uint16'),)
        for payload in ('01 00', '0100', ['01', '00'], b'\x01\x00'):
            self.assertEqual(to_struct(layout, payload), {'a': 1})

    def test_trailing_bytes_ignored(self):
        self.assertEqual(to_struct((('a', 'uint8'),), '05 FF FF'), {'a': 5})

    def test_short_input(self):
        with self.assertRaises(MalformedRecord):
            to_struct((('a', 'uint16'),), '01')

    def test_short_octet_string(self):
        with self.assertRaises(MalformedRecord):
            to_struct((('s', 'octetStr'),), '05 01 02')
        with self.assertRaises(MalformedRecord):
            to_struct((('a', 'uint8'), ('s', 'octetStr')), '01')

    def test_not_hex(self):
        with self.assertRaises(MalformedRecord):
            to_struct((('a', 'uint8'),), 'zz')

    def test_bytes_to_payload(self):
        self.assertEqual(struct_helper.bytes_to_payload(b'\x00\xab\x10'), '00 AB 10')


if __name__ == '__main__':
    unittest.main()
