# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 Python module to control infrared appliances through a Tuya Zigbee IR blaster

 For more information see README.md

 Core Classes and Helper Functions

 Classes
  * TransportRegistry() - Per-device session tables
  * TransportSession(device_id, sender, registry=None, on_learned=None) - Learn/send state machine

 Module Functions
    set_debug(toggle, color)                    # Activate verbose debugging output
    to_payload(layout, fields)                  # Pack a dict into a hex byte string using a struct layout
    to_struct(layout, payload)                  # Unpack a hex byte string into a dict using a struct layout
    checksum(data)                              # Byte sum mod 256 used on every code chunk
    compress(data) / decompress(data)           # FastLZ codec used by Tuya IR codes
    decode(code) / encode(timings)              # Tuya base64 IR code <-> list of microsecond timings
    validate(code)                              # True if the IR code decodes
    parse_message(cluster, command, payload)    # Decode a cluster message into a message tuple

"""

# Modules
import logging
import sys

from colorama import init

# Colorama terminal color capability for all platforms
init()

version_tuple = (1, 0, 0)  # Major, Minor, Patch
version = __version__ = "%d.%d.%d" % version_tuple
__author__ = "tuyair"

log = logging.getLogger(__name__)


def set_debug(toggle=True, color=True):
    """Enable tuyair verbose logging"""
    if toggle:
        if color:
            logging.basicConfig(
                format="\x1b[31;1m%(levelname)s:%(message)s\x1b[0m", level=logging.DEBUG
            )
        else:
            logging.basicConfig(format="%(levelname)s:%(message)s", level=logging.DEBUG)
        logging.getLogger('tuyair').setLevel(logging.DEBUG)
        log.debug("TuyaIR [%s]\n", __version__)
        log.debug("Python %s on %s", sys.version, sys.platform)
    else:
        logging.getLogger('tuyair').setLevel(logging.NOTSET)

# Terminal color helper
def termcolor(color=True):
    if color is False:
        # Disable Terminal Color Formatting
        bold = subbold = normal = dim = alert = alertdim = cyan = red = yellow = ""
    else:
        # Terminal Color Formatting
        bold = "\033[0m\033[97m\033[1m"
        subbold = "\033[0m\033[32m"
        normal = "\033[97m\033[0m"
        dim = "\033[0m\033[97m\033[2m"
        alert = "\033[0m\033[91m\033[1m"
        alertdim = "\033[0m\033[91m\033[2m"
        cyan = "\033[0m\033[36m"
        red = "\033[0m\033[31m"
        yellow = "\033[0m\033[33m"
    return bold,subbold,normal,dim,alert,alertdim,cyan,red,yellow
