"""Server package for tcp-pingpong.

Contains the listening side:
- listener: Listener (bind + accept stream)
- runner: serve, run_server
"""

from server.listener import Listener
from server.runner import run_server, serve

__all__ = [
    "Listener",
    "serve",
    "run_server",
]
