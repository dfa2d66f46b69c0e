# TuyaIR Module
# -*- coding: utf-8 -*-

import json
import logging

log = logging.getLogger(__name__)

# TuyaIR Error Response Codes
ERR_JSON = 900
ERR_CONNECT = 901
ERR_TIMEOUT = 902
ERR_RANGE = 903
ERR_PAYLOAD = 904
ERR_CHECKSUM = 905
ERR_POSITION = 906
ERR_PROTOCOL = 907
ERR_CONFIG = 908
ERR_COMMAND = 909
ERR_PARAMS = 910
ERR_SERVICE = 911

error_codes = {
    ERR_JSON: "Invalid JSON Response from Detection Service",
    ERR_CONNECT: "Network Error: Unable to Connect",
    ERR_TIMEOUT: "Timeout Waiting for Response",
    ERR_RANGE: "Specified Value Out of Range",
    ERR_PAYLOAD: "Unexpected Payload from Device",
    ERR_CHECKSUM: "Code Chunk Checksum Mismatch",
    ERR_POSITION: "Code Chunk Position Mismatch",
    ERR_PROTOCOL: "Unable to Identify IR Protocol",
    ERR_CONFIG: "HVAC Not Configured",
    ERR_COMMAND: "HVAC Command Not Found",
    ERR_PARAMS: "Missing Function Parameters",
    ERR_SERVICE: "Error Response from Detection Service",
    None: "Unknown Error",
}

def error_json(number=None, payload=None):
    """Return error details in JSON"""
    try:
        spayload = json.dumps(payload)
    except (TypeError, ValueError):
        spayload = '""'

    vals = (error_codes[number], str(number), spayload)
    log.debug("ERROR %s - %s - payload: %s", *vals)

    return json.loads('{ "Error":"%s", "Err":"%s", "Payload":%s }' % vals)
