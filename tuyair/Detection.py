# TuyaIR Module - Detection
# -*- coding: utf-8 -*-
"""
 Identify the HVAC model behind a learned IR code and build its command set

 Classes
    LocalDetector(database=None)
        Identify the protocol locally and generate the commands with HVACCodeGenerator

    DetectionClient(url=DETECTION_API_URL, timeout=DETECTION_TIMEOUT)
        Ask the remote detection service

    Functions (both classes)
        result = detect( code )
            -> dict with 'protocol', 'confidence', 'model', 'manufacturer', 'commands',
               'operationModes', 'fanModes', 'minTemperature', 'maxTemperature' and 'notes'
               or an error_json dict on failure

 Module Functions
    hvac_config( result )
        -> configuration for IRBlasterDevice.set_hvac_config() built from a detect() result
"""

import json
import logging

import requests

from .core import DETECTION_API_PATH, DETECTION_API_URL, DETECTION_TIMEOUT, USER_AGENT
from .core import ERR_CONNECT, ERR_JSON, ERR_PAYLOAD, ERR_PROTOCOL, ERR_SERVICE, ERR_TIMEOUT, error_json
from .core import TuyaIRError, ir_helper
from .CodeGenerator import HVACCodeGenerator, command_list
from .protocols import default_database

log = logging.getLogger(__name__)

MIN_CODE_LENGTH = 4


def _check_code(code):
    if not code or not code.strip():
        return None, error_json(ERR_PAYLOAD, 'Cannot match empty IR code')
    code = ir_helper.normalize_code(code)
    if len(code) < MIN_CODE_LENGTH:
        return None, error_json(ERR_PAYLOAD, 'IR code too short (%d chars)' % len(code))
    return code, None

def hvac_config(result):
    return {
        'manufacturer': result.get('manufacturer'),
        'model': result.get('model') or result.get('protocol'),
        'commands': result.get('commands') or [],
        'minTemperature': result.get('minTemperature') or 16,
        'maxTemperature': result.get('maxTemperature') or 30,
        'operationModes': result.get('operationModes') or [],
        'fanModes': result.get('fanModes') or [],
    }


class LocalDetector(object):
    def __init__(self, database=None):
        self.database = database if database is not None else default_database

    def detect(self, code):
        code, error = _check_code(code)
        if error:
            return error

        try:
            timings = ir_helper.decode(code)
        except TuyaIRError as err:
            log.debug('detect: unable to decode code: %s', err)
            return error_json(ERR_PAYLOAD, str(err))
        log.info('Decoded %d timing values', len(timings))

        info = self.database.identify(timings)
        if not info:
            log.warning('Could not identify protocol from IR timings')
            return error_json(ERR_PROTOCOL, {'headerMark': timings[0] if timings else None,
                                             'headerSpace': timings[1] if len(timings) > 1 else None})
        log.info('Protocol identified: %s (confidence %s)', info['protocol'], info['confidence'])

        generator = HVACCodeGenerator(info['protocol'], self.database)
        caps = generator.capabilities
        return {
            'protocol': info['protocol'],
            'confidence': info['confidence'],
            'model': info['protocol'],
            'manufacturer': ', '.join(info['manufacturer']),
            'supportedModels': info['manufacturer'],
            'commands': command_list(generator.generate_all_commands()),
            'operationModes': caps['modes'],
            'fanModes': caps['fanSpeeds'],
            'minTemperature': caps['tempRange']['min'],
            'maxTemperature': caps['tempRange']['max'],
            'timingMatch': info['timingMatch'],
            'notes': info['notes'],
        }


class DetectionClient(object):
    def __init__(self, url=DETECTION_API_URL, timeout=DETECTION_TIMEOUT):
        self.url = url.rstrip('/') + DETECTION_API_PATH
        self.timeout = timeout
        self.raw_response = None

    def detect(self, code):
        code, error = _check_code(code)
        if error:
            return error

        headers = {
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT,
        }
        body = {'tuya_code': code}
        log.debug("POST: URL=%s DATA=%s", self.url, body)
        try:
            response = requests.post(self.url, headers=headers, json=body, timeout=self.timeout)
        except requests.exceptions.Timeout as err:
            return error_json(ERR_TIMEOUT, 'Detection service timeout: %s' % err)
        except requests.exceptions.RequestException as err:
            return error_json(ERR_CONNECT, 'Detection service unreachable: %s' % err)
        log.debug("POST RESPONSE: code=%d text=%s", response.status_code, response.text)

        try:
            result = json.loads(response.content.decode())
        except (ValueError, UnicodeDecodeError):
            return error_json(ERR_JSON, 'Detection service invalid response: %r' % response.content)
        self.raw_response = result

        if response.status_code != 200:
            return error_json(ERR_SERVICE, {'status': response.status_code, 'details': result})

        if not isinstance(result, dict) or not result.get('protocol'):
            log.warning('Detection service could not identify protocol')
            return error_json(ERR_PROTOCOL, result.get('error') if isinstance(result, dict) else result)

        log.info('Protocol identified: %s', result['protocol'])
        return {
            'protocol': result['protocol'],
            'confidence': result.get('confidence'),
            'model': result.get('model') or result['protocol'],
            'manufacturer': result.get('manufacturer'),
            'supportedModels': result.get('supportedModels') or [],
            'commands': result.get('commands') or [],
            'operationModes': result.get('operationModes') or [],
            'fanModes': result.get('fanModes') or [],
            'minTemperature': result.get('minTemperature') or 16,
            'maxTemperature': result.get('maxTemperature') or 30,
            'notes': result.get('notes'),
        }
