"""Command-line entry point running a demonstration line-queue server."""

from __future__ import annotations

import getopt
import itertools
import sys
import threading
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from .server import Server

PROG = "linequeue"
USAGE = f"Usage: {PROG} -p <port> [-t timeout_seconds]"
POLL_INTERVAL = 0.01


class UsageError(ValueError):
    """Raised when the command line cannot be understood."""


@dataclass(frozen=True)
class Options:
    port: int
    timeout: int = 0


def parse_args(argv: Sequence[str]) -> Options:
    """Parse ``-p <port> [-t timeout_seconds]``."""
    argv = list(argv)
    if len(argv) < 2:
        raise UsageError(USAGE)
    try:
        opts, _ = getopt.getopt(argv, "t:p:")
    except getopt.GetoptError as err:
        raise UsageError(USAGE) from err
    port: Optional[int] = None
    timeout = 0
    try:
        for flag, value in opts:
            if flag == "-p":
                port = int(value)
            else:
                timeout = int(value)
    except ValueError as err:
        raise UsageError(USAGE) from err
    if port is None or port == -1:
        raise UsageError(USAGE)
    return Options(port=port, timeout=timeout)


def _describe(message: bytes) -> str:
    return message.decode("utf-8", errors="replace")


def _on_message(message: bytes) -> None:
    if message:
        print(f"Callback with message: {_describe(message)}", flush=True)
    else:
        print("Callback with empty message.", flush=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server, printing received messages until the timeout expires."""
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as err:
        print(err, file=sys.stderr)
        return 1

    server = Server(options.port, _on_message)
    running = threading.Event()
    running.set()

    def poll() -> None:
        while running.is_set():
            message = server.pop_message()
            if message is None:
                time.sleep(POLL_INTERVAL)
            elif message:
                print(f"Pop message (polling): {_describe(message)}", flush=True)
            else:
                print("Pop empty message (polling).", flush=True)

    def block() -> None:
        while running.is_set():
            message = server.pop_message_blocking()
            if message is None:
                continue
            if message:
                print(f"Pop message (blocking): {_describe(message)}", flush=True)
            else:
                print("Pop empty message (blocking).", flush=True)

    listener = threading.Thread(target=server.start, daemon=True)
    poller = threading.Thread(target=poll, daemon=True)
    blocker = threading.Thread(target=block, daemon=True)
    for thread in (listener, poller, blocker):
        thread.start()

    ticks = itertools.count() if options.timeout == 0 else range(options.timeout)
    for _ in ticks:
        time.sleep(1)
        print(".", flush=True)

    print("Stop server!", flush=True)
    running.clear()
    server.stop()

    print("Joining listening thread...", flush=True)
    listener.join()
    print("Joining polling thread...", flush=True)
    poller.join()
    print("Joining blocking thread...", flush=True)
    blocker.join()
    return 0


if __name__ == "__main__":
    sys.exit(main())