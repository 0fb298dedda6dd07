"""Client package for tcp-pingpong.

Contains the initiating side:
- connect: client_connect
- runner: ExitCode, run_client_session, run_client
"""

from client.connect import client_connect
from client.runner import ExitCode, run_client, run_client_session

__all__ = [
    "client_connect",
    "ExitCode",
    "run_client_session",
    "run_client",
]
