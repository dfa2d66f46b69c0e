# TuyaIR Module - Transport
# -*- coding: utf-8 -*-
"""
 Chunked learn/send exchange with the Tuya Zigbee IR blaster

 The names for these messages are not official and just guesses.

 learn sequence:
  1. hub sends LEARN {"study":0}, device LED lights up
  2. device sends START_TRANSMIT with a sequence number it picked + the code length
  3. hub sends START_TRANSMIT_ACK
  4. device sends TRANSMIT_ACK naming START_TRANSMIT_ACK
  5. hub sends CODE_DATA_REQUEST at position 0
  6. device sends CODE_DATA_RESPONSE with a chunk of the code and its checksum
     [hub requests the next position until the length from (2) is reached]
  7. hub sends DONE_SENDING
  8. device sends DONE_RECEIVING
  9. hub base64-encodes the code, drops the session and sends LEARN {"study":1}

 send sequence:
  1. hub sends START_TRANSMIT with a sequence number it picked + the payload length
  2. device sends START_TRANSMIT_ACK (ignored)
  3. device sends CODE_DATA_REQUEST, hub answers with CODE_DATA_RESPONSE
     [repeated until the device has everything]
  4. device sends DONE_SENDING
  5. hub drops the session and sends DONE_RECEIVING, the device emits the IR code

 There is no retry or timeout logic.  A stalled exchange simply never
 completes, callers that need bounded latency wait with their own timeout.
"""

import base64
import logging
import queue
import threading

from .const import ADVERTISED_MAXLEN, CHUNK_SIZE, SEQ_MODULO
from .error_helper import ERR_CHECKSUM, ERR_PAYLOAD, ERR_POSITION, error_json
from .exceptions import ChecksumMismatch, MalformedRecord, PositionMismatch
from .message_helper import (
    CodeDataRequest, CodeDataResponse, DoneReceiving, DoneSending, LearnAck, LearnMessage,
    StartTransmit, StartTransmitAck, TransmitAck, UnknownMessage, START_TRANSMIT_ACK,
    new_code_data_request_message, new_code_data_response_message, new_done_receiving_message,
    new_done_sending_message, new_learn_message, new_start_transmit_ack_message,
    new_start_transmit_message, parse_message,
)
from .struct_helper import checksum

log = logging.getLogger(__name__)

# Session directions
LEARNING = 'LEARNING'
SENDING = 'SENDING'

# Session states
IDLE = 'IDLE'
LEARN_ARMED = 'LEARN_ARMED'
LEARN_RECEIVING = 'LEARN_RECEIVING'
LEARN_COMPLETE = 'LEARN_COMPLETE'
SEND_STARTING = 'SEND_STARTING'
SEND_TRANSMITTING = 'SEND_TRANSMITTING'
SEND_COMPLETE = 'SEND_COMPLETE'


class Session(object):
    """One in-flight learn or send operation"""

    def __init__(self, seq, direction, expected_length=0, buffer=b''):
        self.seq = seq
        self.direction = direction
        self.expected_length = expected_length
        self.buffer = bytearray(buffer)
        self.position = 0
        self.state = LEARN_RECEIVING if direction == LEARNING else SEND_STARTING

    def __repr__(self):
        return 'Session(seq=%r, direction=%s, state=%s, position=%d, buffered=%d, expected=%d)' % (
            self.seq, self.direction, self.state, self.position, len(self.buffer), self.expected_length)


class DeviceSessions(object):
    """Session tables and correlation stacks for one device"""

    def __init__(self, device_id):
        self.device_id = device_id
        self.lock = threading.RLock()
        self.send_sessions = {}
        self.receive_sessions = {}
        # learn requests and device-picked sequence numbers, resolved last-in first-out
        self.pending_names = queue.LifoQueue()
        self.pending_seqs = queue.LifoQueue()
        self.learn_armed = False
        self.last_seq = 0

    def next_seq(self):
        self.last_seq = (self.last_seq + 1) % SEQ_MODULO
        return self.last_seq


class TransportRegistry(object):
    """
    Session state for every managed device, keyed by device id.

    Entries are created on first use and survive between message handling
    calls.  Call remove() when a device goes away.
    """

    def __init__(self):
        self._devices = {}
        self._lock = threading.Lock()

    def get(self, device_id):
        with self._lock:
            if device_id not in self._devices:
                self._devices[device_id] = DeviceSessions(device_id)
            return self._devices[device_id]

    def remove(self, device_id):
        with self._lock:
            return self._devices.pop(device_id, None)

    def devices(self):
        with self._lock:
            return list(self._devices)

    def __contains__(self, device_id):
        return device_id in self._devices


class TransportSession(object):
    def __init__(self, device_id, sender, registry=None, on_learned=None):
        """
        Drive the learn/send exchange for one device.

        Args:
            device_id: Key for this device in the registry
            sender: Callable sender(cluster, command, payload) that puts a
                message on the radio, payload is a hex byte string
            registry: TransportRegistry shared by every device, a private one is created if None
            on_learned: Optional callable on_learned(code, seq) run when a learn completes
        """
        self.device_id = device_id
        self.sender = sender
        self.registry = registry if registry is not None else TransportRegistry()
        self.listeners = []
        if on_learned:
            self.listeners.append(on_learned)

        self._handlers = {
            LearnMessage: self._handle_learn,
            LearnAck: self._handle_learn_ack,
            StartTransmit: self._handle_start_transmit,
            StartTransmitAck: self._handle_start_transmit_ack,
            CodeDataRequest: self._handle_code_data_request,
            CodeDataResponse: self._handle_code_data_response,
            DoneSending: self._handle_done_sending,
            DoneReceiving: self._handle_done_receiving,
            TransmitAck: self._handle_ack,
            UnknownMessage: self._handle_unknown,
        }

    @property
    def sessions(self):
        return self.registry.get(self.device_id)

    def add_listener(self, callback):
        self.listeners.append(callback)

    def state(self, seq=None):
        """Current state of the session with this seq, or of the device when seq is None"""
        sessions = self.sessions
        with sessions.lock:
            if seq is None:
                return LEARN_ARMED if sessions.learn_armed else IDLE
            session = sessions.receive_sessions.get(seq) or sessions.send_sessions.get(seq)
            return session.state if session else IDLE

    def _send(self, cmd, name):
        log.debug("sending (%s): cluster 0x%04X cmd 0x%02X {%s}", name, cmd.cluster, cmd.command, cmd.payload)
        self.sender(cmd.cluster, cmd.command, cmd.payload)

    ##########
    # Outbound
    ##########

    def start_learn(self):
        with self.sessions.lock:
            self.sessions.learn_armed = True
            self._send(new_learn_message(True), 'learn(True)')

    def end_learn(self):
        with self.sessions.lock:
            self.sessions.learn_armed = False
            self._send(new_learn_message(False), 'learn(False)')

    def send_payload(self, data):
        """Start a send session for data, returns its sequence number"""
        sessions = self.sessions
        with sessions.lock:
            seq = sessions.next_seq()
            sessions.send_sessions[seq] = Session(seq, SENDING, len(data), data)
            self._send(new_start_transmit_message(seq, len(data)), 'start transmit')
        return seq

    #########
    # Inbound
    #########

    def receive(self, cluster, command, payload):
        """
        Handle one message from the device.

        Integrity failures abort only the session they belong to, they are
        logged and returned as an error_json dict.  Returns None otherwise.
        """
        try:
            message = parse_message(cluster, command, payload)
        except MalformedRecord as err:
            log.error("Malformed message cluster %r cmd %r: %s", cluster, command, err)
            return error_json(ERR_PAYLOAD, str(err))

        try:
            self.handle(message)
        except ChecksumMismatch as err:
            return error_json(ERR_CHECKSUM, {'seq': err.seq, 'message': str(err)})
        except PositionMismatch as err:
            return error_json(ERR_POSITION, {'seq': err.seq, 'message': str(err)})
        return None

    def handle(self, message):
        """Dispatch a decoded message, raises TransportError after aborting a corrupt session"""
        with self.sessions.lock:
            self._handlers[type(message)](message)

    def _abort(self, err):
        self.sessions.receive_sessions.pop(err.seq, None)
        log.error("Aborting seq %d: %s", err.seq, err)
        raise err

    def _handle_unknown(self, message):
        log.debug("received unknown message: cmd 0x%02X (cluster 0x%04X). Ignoring", message.command, message.cluster)

    def _handle_learn(self, message):
        log.debug("received learn: %r", message)

    def _handle_learn_ack(self, message):
        log.debug("received learn ack: %r", message)

    def _handle_ack(self, message):
        log.debug("received ack: %r", message)
        # the only ack that matters, it means the device is ready for code data requests
        if message.cmd != START_TRANSMIT_ACK:
            return
        try:
            seq = self.sessions.pending_seqs.get_nowait()
        except queue.Empty:
            log.warning("Ack for start transmit but no receive is pending. Ignoring")
            return
        self._send(new_code_data_request_message(seq, 0, ADVERTISED_MAXLEN), 'code data request')

    def _handle_start_transmit(self, message):
        log.debug("received start transmit: %r", message)
        sessions = self.sessions
        sessions.pending_seqs.put(message.seq)
        sessions.receive_sessions[message.seq] = Session(message.seq, LEARNING, message.length)
        self._send(new_start_transmit_ack_message(message.seq, message.length), 'start transmit ack')

    def _handle_start_transmit_ack(self, message):
        # nothing to do, the device follows up with code data requests
        log.debug("received start transmit ack: %r", message)

    def _handle_code_data_request(self, message):
        session = self.sessions.send_sessions.get(message.seq)
        if session is None:
            log.warning("Code data request for unknown seq %d. Ignoring", message.seq)
            return

        # always CHUNK_SIZE, regardless of the maxlen the device asks for
        part = bytes(session.buffer[message.position:message.position + CHUNK_SIZE])
        session.state = SEND_TRANSMITTING
        session.position = message.position + len(part)
        self._send(new_code_data_response_message(message.seq, message.position, part, checksum(part)),
                   'code data response, position: %d' % message.position)

    def _handle_code_data_response(self, message):
        session = self.sessions.receive_sessions.get(message.seq)
        if session is None:
            log.error("Unexpected seq: %d", message.seq)
            return

        if message.position != len(session.buffer) or session.position != len(session.buffer):
            self._abort(PositionMismatch(message.seq, "Position mismatch! expected: %d was: %d" % (len(session.buffer), message.position)))

        actual_crc = checksum(message.msgpart)
        if actual_crc != message.msgpartcrc:
            self._abort(ChecksumMismatch(message.seq, "CRC mismatch! expected: %d was: %d" % (message.msgpartcrc, actual_crc)))

        session.buffer += message.msgpart
        session.position = len(session.buffer)

        if len(session.buffer) < session.expected_length:
            self._send(new_code_data_request_message(message.seq, len(session.buffer), ADVERTISED_MAXLEN), 'code data request')
        else:
            self._send(new_done_sending_message(message.seq), 'done sending')

    def _handle_done_sending(self, message):
        session = self.sessions.send_sessions.pop(message.seq, None)
        if session is not None:
            session.state = SEND_COMPLETE
            log.info("code fully sent (seq %d, %d bytes)", message.seq, len(session.buffer))
        else:
            log.debug("done sending for unknown seq %d", message.seq)
        self._send(new_done_receiving_message(message.seq), 'done receiving')

    def _handle_done_receiving(self, message):
        session = self.sessions.receive_sessions.pop(message.seq, None)
        if session is None:
            log.warning("Done receiving for unknown seq %d. Ignoring", message.seq)
            return

        session.state = LEARN_COMPLETE
        code = base64.b64encode(bytes(session.buffer)).decode('ascii')
        log.info("learned code: %s", code)

        for callback in self.listeners:
            try:
                callback(code, message.seq)
            except Exception:
                log.exception("learn listener %r failed for seq %d", callback, message.seq)

        self.end_learn()
