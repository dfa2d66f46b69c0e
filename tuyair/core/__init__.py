
# TuyaIR Module
# -*- coding: utf-8 -*-

from .struct_helper import *
from .fastlz import *
from .ir_helper import *
from .message_helper import *
from .exceptions import *
from .error_helper import *
from .const import *
from .command_types import *
from .Transport import *

from .core import *
from .core import __version__
from .core import __author__
