"""Server runner for tcp-pingpong.

Contains serve(), which hands every accepted connection to its own handler
task, and run_server(), which binds the port and serves until SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal

from common.connection import BindError, Connection
from common.protocol import DEFAULT_MAX_HANDLERS, DEFAULT_RECEIVE_TIMEOUT_S
from common.report import ListenReport
from server.listener import Listener
from session.exchange import server_exchange

logger = logging.getLogger(__name__)


async def _run_handler(
    conn: Connection,
    limit: asyncio.Semaphore | None,
    receive_timeout_s: float | None,
) -> None:
    """Run one handler, containing any failure to this connection."""
    peer = conn.peer
    try:
        if limit is None:
            state = await server_exchange(conn, receive_timeout_s=receive_timeout_s)
        else:
            async with limit:
                state = await server_exchange(conn, receive_timeout_s=receive_timeout_s)
        logger.debug(f"Handler {peer}: {state.value}")
    except Exception:
        logger.exception(f"Handler {peer}: unexpected error")
    finally:
        conn.close()


async def serve(
    listener: Listener,
    max_handlers: int | None = DEFAULT_MAX_HANDLERS,
    receive_timeout_s: float | None = DEFAULT_RECEIVE_TIMEOUT_S,
) -> None:
    """Accept connections forever, one independent handler task each.

    Accepting never waits on a handler. When more than max_handlers are
    running, new handlers wait for a slot (None disables the cap).
    Cancelling serve() cancels all in-flight handlers.
    """
    limit = asyncio.Semaphore(max_handlers) if max_handlers else None
    handlers: set[asyncio.Task[None]] = set()

    try:
        async for conn in listener.accept():
            logger.info(f"Accepted connection from {conn.peer}")
            task = asyncio.create_task(_run_handler(conn, limit, receive_timeout_s))
            handlers.add(task)
            task.add_done_callback(handlers.discard)
    finally:
        if handlers:
            logger.info(f"Cancelling {len(handlers)} in-flight handlers")
            for task in handlers:
                task.cancel()
            await asyncio.gather(*handlers, return_exceptions=True)


async def _serve_until_signal(
    listener: Listener,
    max_handlers: int | None,
    receive_timeout_s: float | None,
) -> None:
    """Serve until SIGINT/SIGTERM; without a signal this never returns."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"{sig.name} received - shutting down")
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handle_signal, sig)
        except NotImplementedError:
            # No loop signal support (Windows); Ctrl-C still ends asyncio.run()
            pass

    serve_task = asyncio.create_task(serve(listener, max_handlers, receive_timeout_s))
    stop_task = asyncio.create_task(stop.wait())
    await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

    serve_task.cancel()
    stop_task.cancel()
    outcome, _ = await asyncio.gather(serve_task, stop_task, return_exceptions=True)
    if isinstance(outcome, Exception):
        raise outcome


def run_server(
    port: int,
    host: str | None = None,
    max_handlers: int | None = DEFAULT_MAX_HANDLERS,
    receive_timeout_s: float | None = DEFAULT_RECEIVE_TIMEOUT_S,
) -> int:
    """Run the server until a signal stops it. Returns exit code.

    Returns 1 if the port cannot be bound or serving crashes, 0 after a
    signal-initiated shutdown.
    """
    try:
        listener = Listener.start(port, host)
    except BindError as e:
        logger.error(f"Failed to start listener: {e}")
        ListenReport(listening=False, error=e).print()
        return 1

    ListenReport(listening=True, port=listener.port).print()

    try:
        asyncio.run(_serve_until_signal(listener, max_handlers, receive_timeout_s))
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1
    finally:
        listener.close()

    logger.info("Server shutdown complete")
    return 0
