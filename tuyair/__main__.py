#!/usr/bin/env python
# -*- coding: utf-8 -*-
# PYTHON_ARGCOMPLETE_OK
# TuyaIR Module
"""
 Python module to control infrared appliances through a Tuya Zigbee IR blaster

 For more information see README.md

 Decode a learned code into microsecond timings:
    python -m tuyair decode <code>
 Identify the HVAC protocol of a learned code:
    python -m tuyair identify <code>
 Build an HVAC command set for a learned code:
    python -m tuyair detect <code> [-remote]

"""

# Modules
import sys
import json
import argparse
try:
    import argcomplete
    HAVE_ARGCOMPLETE = True
except ImportError:
    HAVE_ARGCOMPLETE = False

from . import version, set_debug, termcolor, DETECTION_API_URL
from . import decode, encode, code_info, print_pulses, TuyaIRError
from . import default_database, identify_protocol, HVACCodeGenerator
from . import LocalDetector, DetectionClient

prog = 'python3 -m tuyair' if sys.argv[0][-11:] == '__main__.py' else None
description = 'TuyaIR [%s]' % (version,)
parser = argparse.ArgumentParser( prog=prog, description=description )

# Options for all functions.
# Add both here and in subparsers (with alternate `dest=`) if you want to allow it to be positioned anywhere
parser.add_argument( '-debug', '-d', help='Enable debug messages', action='store_true' )

subparser = parser.add_subparsers( dest='command', title='commands (run <command> -h to see usage information)' )
subparsers = {}
cmd_list = {
    'decode': 'Decode a Tuya IR code into mark/space timings',
    'encode': 'Encode mark/space timings into a Tuya IR code',
    'info': 'Show information about a Tuya IR code',
    'identify': 'Identify the HVAC protocol of a Tuya IR code',
    'generate': 'Generate HVAC codes for a protocol',
    'detect': 'Detect the HVAC model of a Tuya IR code and build its command set',
    'protocols': 'List the known HVAC protocols',
}
for sp in cmd_list:
    subparsers[sp] = subparser.add_parser(sp, help=cmd_list[sp])
    subparsers[sp].add_argument( '-debug', '-d', help='Enable debug messages', action='store_true', dest='debug2' )
    subparsers[sp].add_argument( '-nocolor', help='Disable color text output', action='store_true' )

    if sp in ('decode', 'info', 'identify', 'detect'):
        subparsers[sp].add_argument( 'code', help='Base64 Tuya IR code' )

subparsers['decode'].add_argument( '-pulses', help='Show as p<mark> g<space> pairs', action='store_true' )
subparsers['encode'].add_argument( 'timings', help='Mark/space timings in microseconds', nargs='+', type=int )
subparsers['identify'].add_argument( '-tolerance', help='Tolerance multiplier [Default: 1.5]', type=float, default=1.5 )

gen = subparsers['generate']
gen.add_argument( 'protocol', help='Protocol name (see the protocols command)' )
gen.add_argument( '-power', help='Power [Default: on]', choices=('on', 'off'), default='on' )
gen.add_argument( '-mode', help='Operation mode [Default: cool]', default='cool' )
gen.add_argument( '-temp', help='Temperature in Celsius [Default: 24]', type=int, default=24 )
gen.add_argument( '-fan', help='Fan speed [Default: auto]', default='auto' )
gen.add_argument( '-swing', help='Swing [Default: off]', choices=('on', 'off'), default='off' )
gen.add_argument( '-all', help='Generate the complete command set as JSON', action='store_true' )

subparsers['detect'].add_argument( '-remote', help='Use the detection service instead of local detection', action='store_true' )
subparsers['detect'].add_argument( '-url', help='Detection service URL [Default: %s]' % DETECTION_API_URL, default=DETECTION_API_URL )
subparsers['protocols'].add_argument( '-manufacturer', '-m', help='Only list protocols for this manufacturer' )

if HAVE_ARGCOMPLETE:
    argcomplete.autocomplete( parser )

args = parser.parse_args()

if args.debug:
    print('Parsed args:', args)
    set_debug(True)

if args.command:
    if args.debug2 and not args.debug:
        print('Parsed args:', args)
        set_debug(True)
    color = not args.nocolor
    (bold, subbold, normal, dim, alert, alertdim, cyan, red, yellow) = termcolor(color)

def show_json(data):
    print(json.dumps(data, indent=4))

def show_error(msg):
    print('%s%s%s' % (alert, msg, normal))
    sys.exit(1)

if args.command == 'decode':
    try:
        timings = decode(args.code)
    except TuyaIRError as err:
        show_error(str(err))
    if args.pulses:
        print(print_pulses(timings))
    else:
        print(' '.join(str(t) for t in timings))
elif args.command == 'encode':
    try:
        print(encode(args.timings))
    except TuyaIRError as err:
        show_error(str(err))
elif args.command == 'info':
    show_json(code_info(args.code))
elif args.command == 'identify':
    try:
        timings = decode(args.code)
    except TuyaIRError as err:
        show_error(str(err))
    result = identify_protocol(timings, args.tolerance)
    if not result:
        show_error('Could not identify protocol from header [%s]' % ', '.join(str(t) for t in timings[:2]))
    print('%sProtocol:%s %s%s%s (confidence %s)' % (bold, normal, subbold, result['protocol'], normal, result['confidence']))
    print('    %sManufacturers: %s%s' % (dim, ', '.join(result['manufacturer']), normal))
    print('    %s%s%s' % (dim, result['notes'], normal))
elif args.command == 'generate':
    try:
        generator = HVACCodeGenerator(args.protocol)
        if args.all:
            show_json(generator.generate_all_commands())
        else:
            print(generator.generate_code(args.power, args.mode, args.temp, args.fan, args.swing))
    except TuyaIRError as err:
        show_error(str(err))
elif args.command == 'detect':
    if args.remote:
        result = DetectionClient(args.url).detect(args.code)
    else:
        result = LocalDetector().detect(args.code)
    show_json(result)
    if 'Error' in result:
        sys.exit(1)
elif args.command == 'protocols':
    if args.manufacturer:
        names = default_database.protocols_by_manufacturer(args.manufacturer)
    else:
        names = default_database.names()
    for name in names:
        sig = default_database.get(name)
        print('%s%-22s%s %s%s%s' % (bold, name, normal, cyan, ', '.join(sig.manufacturer), normal))
        print('    %sheader %d/%d  bit %d  one %d  zero %d  tolerance %d%s' % (
            dim, sig.header_mark, sig.header_space, sig.bit_mark, sig.one_space, sig.zero_space, sig.tolerance, normal))
else:
    # No command selected - show help
    parser.print_help()

# Entry_points/console_scripts endpoints require a function to be called
def dummy():
    pass

# End
