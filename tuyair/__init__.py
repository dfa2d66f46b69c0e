# TuyaIR Module
# -*- coding: utf-8 -*-
"""
 Python module to control infrared appliances (mostly HVAC units) through a
 Tuya Zigbee IR blaster (ZS06 / TS1201, "Zosung" firmware)

 For more information see README.md

 Classes
    IRBlasterDevice(device_id, sender, registry=None)
        device_id (str): Key for the session tables, e.g. the Zigbee network id
        sender (callable): sender(cluster, command, payload), puts a message on the radio
        registry (TransportRegistry, optional): shared session tables

    HVACCodeGenerator(protocol, database=None)
    ProtocolDatabase(signatures=None)
    LocalDetector(database=None)
    DetectionClient(url, timeout)

 Functions
    IRBlasterDevice:
        learn(name=None)                       # Arm learn mode
        receive_button(name=None, timeout=30)  # Learn and wait for the code
        send_code(name_or_code)                # Send a learned or raw base64 code
        set_hvac_config(config)                # Store an HVAC command set
        hvac_turn_off()
        hvac_send_command(mode, temp, fan)     # e.g. ('cool', 24, 'auto')
        hvac_send_command_name(name)           # e.g. '24_cool_auto'
        hvac_restore_state()
        receive(cluster, command, payload)     # Feed an inbound message

    decode(code)                               # Tuya base64 IR code -> list of timings
    encode(timings)                            # list of timings -> Tuya base64 IR code
    validate(code)
    identify_protocol(timings)                 # Header based protocol match or None

 Credits
  * zigbee-herdsman-converters https://github.com/Koenkk/zigbee-herdsman-converters
    For the Zosung IR transport reverse engineering
  * IRremoteESP8266 https://github.com/crankyoldgit/IRremoteESP8266
    For the HVAC protocol timings

"""

from .core import *
from .core import __version__
from .core import __author__

from .protocols import *
from .CodeGenerator import *
from .IRBlasterDevice import *
from .Detection import *
