# TuyaIR Module
# -*- coding: utf-8 -*-

# Transport Settings
CHUNK_SIZE = 55         # Bytes moved per code data request/response
ADVERTISED_MAXLEN = 0x38  # maxlen sent in code data requests (56, but CHUNK_SIZE is what gets used)
SEQ_MODULO = 0x10000    # Sequence numbers are uint16 and wrap

# Send Envelope
DEFAULT_FREQ = 38000    # Carrier frequency in Hz
SEND_DELAY = 300        # "delay" field of the send envelope
SEND_ENVELOPE = '{"key_num":1,"delay":%d,"key1":{"num":1,"freq":%d,"type":1,"key_code":"%s"}}'

# Protocol Identification
TOLERANCE_MULTIPLIER = 1.5
MIN_TIMINGS = 4         # Fewer timing values than this cannot be identified

# Detection Service
DETECTION_API_URL = 'https://maestro-tuya-ir.vercel.app'
DETECTION_API_PATH = '/api/identify'
DETECTION_TIMEOUT = 30  # Seconds to wait for the detection service
USER_AGENT = 'tuyair'

# Configuration Files
STATEFILE = 'tuyair.json'
