# TuyaIR Module
# -*- coding: utf-8 -*-


class TuyaIRError(Exception):
    """Base class for all tuyair errors"""
    pass

class MalformedRecord(TuyaIRError):
    """Struct payload is shorter than its layout requires"""
    pass

class CorruptData(TuyaIRError):
    """Compressed or encoded data cannot be decoded"""
    pass

class OutOfRange(TuyaIRError, ValueError):
    """Value does not fit the field or capability it is meant for"""
    pass

class InvalidParameter(OutOfRange):
    """HVAC command parameter not supported by the protocol"""
    pass

class TransportError(TuyaIRError):
    """Integrity failure on one transport session"""
    def __init__(self, seq, msg):
        super(TransportError, self).__init__(msg)
        self.seq = seq

class ChecksumMismatch(TransportError):
    pass

class PositionMismatch(TransportError):
    pass

class UnknownProtocol(TuyaIRError):
    pass

class NotConfigured(TuyaIRError):
    """HVAC command requested before a configuration was stored"""
    pass

class CommandNotFound(TuyaIRError):
    pass
