"""Protocol definitions for tcp-pingpong.

Contains:
- Wire constants for the ping/pong exchange
- Timing and concurrency defaults
- Logging configuration
"""

import logging

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Single-shot receive bounds: return as soon as 1 byte is available, never more than 1024
MIN_RECEIVE_SIZE = 1
MAX_RECEIVE_SIZE = 1024

# Fixed payloads
PING_PAYLOAD = b"ping\n"
PONG_SUFFIX = b"pong!"
TEXT_ENCODING = "utf-8"

# Highest TCP port number
MAX_PORT = 0xFFFF

# Default timing constants
DEFAULT_RECEIVE_TIMEOUT_S = 30.0  # Per-connection wait for the single receive
DEFAULT_CONNECT_TIMEOUT_S = 10.0  # Client connection establishment
ACCEPT_PAUSE_S = 1.0  # Accept pause after fd/buffer exhaustion

# Concurrent handler cap (None = unbounded)
DEFAULT_MAX_HANDLERS = 1024
