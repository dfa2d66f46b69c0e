# TuyaIR Module
# -*- coding: utf-8 -*-

from collections import namedtuple
import json
import logging

from .command_types import *  # pylint: disable=W0401, W0614
from .exceptions import MalformedRecord
from .struct_helper import bytes_to_payload, to_payload, to_struct, payload_to_bytes

log = logging.getLogger(__name__)


# Outbound/inbound cluster command, payload is a hex byte string
ZigbeeCommand = namedtuple('ZigbeeCommand', 'cluster command payload')

# Payload Layouts
START_TRANSMIT_FMT = (
    ('seq', 'uint16'),
    ('length', 'uint32'),
    ('unk1', 'uint32'),
    ('unk2', 'uint16'),     # always the learn cluster id
    ('unk3', 'uint8'),
    ('cmd', 'uint8'),
    ('unk4', 'uint16'),
)
START_TRANSMIT_ACK_FMT = (('zero', 'uint8'),) + START_TRANSMIT_FMT
CODE_DATA_REQUEST_FMT = (
    ('seq', 'uint16'),
    ('position', 'uint32'),
    ('maxlen', 'uint8'),
)
CODE_DATA_RESPONSE_FMT = (
    ('zero', 'uint8'),
    ('seq', 'uint16'),
    ('position', 'uint32'),
    ('msgpart', 'octetStr'),
    ('msgpartcrc', 'uint8'),
)
DONE_SENDING_FMT = (
    ('zero1', 'uint8'),
    ('seq', 'uint16'),
    ('zero2', 'uint16'),
)
DONE_RECEIVING_FMT = (
    ('seq', 'uint16'),
    ('zero', 'uint16'),
)
ACK_FMT = (
    ('cmd', 'uint16'),
)

# Decoded Messages
LearnMessage = namedtuple('LearnMessage', 'study')
LearnAck = namedtuple('LearnAck', 'data')
StartTransmit = namedtuple('StartTransmit', [f[0] for f in START_TRANSMIT_FMT])
StartTransmitAck = namedtuple('StartTransmitAck', [f[0] for f in START_TRANSMIT_ACK_FMT])
CodeDataRequest = namedtuple('CodeDataRequest', [f[0] for f in CODE_DATA_REQUEST_FMT])
CodeDataResponse = namedtuple('CodeDataResponse', [f[0] for f in CODE_DATA_RESPONSE_FMT])
DoneSending = namedtuple('DoneSending', [f[0] for f in DONE_SENDING_FMT])
DoneReceiving = namedtuple('DoneReceiving', [f[0] for f in DONE_RECEIVING_FMT])
TransmitAck = namedtuple('TransmitAck', [f[0] for f in ACK_FMT])
UnknownMessage = namedtuple('UnknownMessage', 'cluster command payload')

# (cluster, command) -> (message type, layout)
MESSAGE_TYPES = {
    (TRANSMIT_CLUSTER, START_TRANSMIT): (StartTransmit, START_TRANSMIT_FMT),
    (TRANSMIT_CLUSTER, START_TRANSMIT_ACK): (StartTransmitAck, START_TRANSMIT_ACK_FMT),
    (TRANSMIT_CLUSTER, CODE_DATA_REQUEST): (CodeDataRequest, CODE_DATA_REQUEST_FMT),
    (TRANSMIT_CLUSTER, CODE_DATA_RESPONSE): (CodeDataResponse, CODE_DATA_RESPONSE_FMT),
    (TRANSMIT_CLUSTER, DONE_SENDING): (DoneSending, DONE_SENDING_FMT),
    (TRANSMIT_CLUSTER, DONE_RECEIVING): (DoneReceiving, DONE_RECEIVING_FMT),
    (TRANSMIT_CLUSTER, TRANSMIT_ACK): (TransmitAck, ACK_FMT),
}


def _message_id(value, what):
    # string ids are hex, the way zigbee stacks print them ('ED00', '0B')
    if isinstance(value, int):
        return value
    try:
        return int(value, 16)
    except (TypeError, ValueError):
        raise MalformedRecord('Invalid %s id: %r' % (what, value)) from None

def parse_message(cluster, command, payload):
    """
    Decode a cluster message into one of the message tuples above.

    cluster and command are ints or hex strings.  Messages this module does
    not understand come back as UnknownMessage.  Raises MalformedRecord if
    an id is not a number or the payload is too short for its layout.
    """
    cluster = _message_id(cluster, 'cluster')
    command = _message_id(command, 'command')
    if (cluster, command) in MESSAGE_TYPES:
        msgtype, layout = MESSAGE_TYPES[(cluster, command)]
        return msgtype(**to_struct(layout, payload))
    if cluster == LEARN_CLUSTER and command in (LEARN, LEARN_ACK):
        try:
            data = payload_to_bytes(payload)
        except ValueError as err:
            raise MalformedRecord('Payload is not a hex byte string: %r' % (payload,)) from err
        if command == LEARN_ACK:
            return LearnAck(data)
        try:
            study = json.loads(data.decode('ascii'))['study']
        except (ValueError, KeyError, TypeError):
            study = None
        return LearnMessage(study)
    return UnknownMessage(cluster, command, payload)

def new_learn_message(learn):
    data = json.dumps({'study': STUDY_START if learn else STUDY_END}, separators=(',', ':')).encode('ascii')
    return ZigbeeCommand(LEARN_CLUSTER, LEARN, bytes_to_payload(data))

def new_start_transmit_message(seq, length):
    return ZigbeeCommand(TRANSMIT_CLUSTER, START_TRANSMIT, to_payload(START_TRANSMIT_FMT, {
        'seq': seq,
        'length': length,
        'unk1': 0,
        'unk2': LEARN_CLUSTER,
        'unk3': 0x01,
        'cmd': 0x02,
        'unk4': 0,
    }))

def new_start_transmit_ack_message(seq, length):
    return ZigbeeCommand(TRANSMIT_CLUSTER, START_TRANSMIT_ACK, to_payload(START_TRANSMIT_ACK_FMT, {
        'zero': 0,
        'seq': seq,
        'length': length,
        'unk1': 0,
        'unk2': LEARN_CLUSTER,
        'unk3': 0x01,
        'cmd': 0x02,
        'unk4': 0,
    }))

def new_code_data_request_message(seq, position, maxlen):
    return ZigbeeCommand(TRANSMIT_CLUSTER, CODE_DATA_REQUEST, to_payload(CODE_DATA_REQUEST_FMT, {
        'seq': seq,
        'position': position,
        'maxlen': maxlen,
    }))

def new_code_data_response_message(seq, position, data, crc):
    return ZigbeeCommand(TRANSMIT_CLUSTER, CODE_DATA_RESPONSE, to_payload(CODE_DATA_RESPONSE_FMT, {
        'zero': 0,
        'seq': seq,
        'position': position,
        'msgpart': data,
        'msgpartcrc': crc,
    }))

def new_done_sending_message(seq):
    return ZigbeeCommand(TRANSMIT_CLUSTER, DONE_SENDING, to_payload(DONE_SENDING_FMT, {
        'zero1': 0,
        'seq': seq,
        'zero2': 0,
    }))

def new_done_receiving_message(seq):
    return ZigbeeCommand(TRANSMIT_CLUSTER, DONE_RECEIVING, to_payload(DONE_RECEIVING_FMT, {
        'seq': seq,
        'zero': 0,
    }))

def new_ack_message(cmd):
    return ZigbeeCommand(TRANSMIT_CLUSTER, TRANSMIT_ACK, to_payload(ACK_FMT, {'cmd': cmd}))
