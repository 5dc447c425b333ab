#!/usr/bin/env python3
"""
Example custom presets for regexfuzz.

Each preset is a named regular expression, optionally with ``re`` flags.

To use these presets:
  python -m regexfuzz --presets custom_patterns.py --preset mac_address -n 5

Or reference them from a corpus configuration:
  "patterns": [
    {"name": "macs", "preset": "mac_address", "count": 100}
  ]
"""

import re


# register_pattern and PatternRegistry are injected by regexfuzz when loading

register_pattern(
    "mac_address",
    r"[0-9A-F]{2}(:[0-9A-F]{2}){5}",
    description="Colon separated MAC address",
)

register_pattern(
    "semver",
    r"(0|[1-9][0-9]{0,2})\.(0|[1-9][0-9]{0,2})\.(0|[1-9][0-9]{0,2})(-(alpha|beta|rc)\.[0-9]{1,2})?",
    description="Semantic version with optional pre-release tag",
)

register_pattern(
    "log_line",
    r"""
    ^\[(DEBUG|INFO|WARNING|ERROR)\]     # level
    \ [0-9]{2}:[0-9]{2}:[0-9]{2}        # time
    \ [a-z_]{3,12}:                     # logger
    \ [\w ]{0,60}$                      # message
    """,
    flags=re.VERBOSE | re.ASCII,
    description="Log line with level, time, logger and message",
)

PatternRegistry.register(
    "hex_bytes",
    rb"(\\x[0-9a-f]{2}){4,16}",
    description="Escaped byte string",
)
