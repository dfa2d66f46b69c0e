# TuyaIR Module
# -*- coding: utf-8 -*-

# Zigbee Clusters used by the Tuya (Zosung) IR blaster
# Reference: https://github.com/Koenkk/zigbee-herdsman-converters/blob/master/src/lib/zosung.ts
LEARN_CLUSTER       = 0xE004
TRANSMIT_CLUSTER    = 0xED00

# Learn cluster commands
LEARN               = 0x00  # {"study":0} arms learning, {"study":1} ends it
LEARN_ACK           = 0x0B

# Transmit cluster commands
START_TRANSMIT      = 0x00  # seq + total length of the code
START_TRANSMIT_ACK  = 0x01  # same body as START_TRANSMIT with a leading zero byte
CODE_DATA_REQUEST   = 0x02  # seq + position
CODE_DATA_RESPONSE  = 0x03  # seq + position + chunk + checksum
DONE_SENDING        = 0x04
DONE_RECEIVING      = 0x05
TRANSMIT_ACK        = 0x0B  # names the command being acknowledged

# Learn payload values
STUDY_START = 0
STUDY_END   = 1
