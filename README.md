# linequeue

A small threaded TCP server. Clients connect and send bytes. Each line that
ends in `\n` counts as one message, and the `\n` is not part of it. For every
message the server does three things:

1. It sends `OK\n` back to the client.
2. It calls the callback you supplied, if there is one, and passes it the
   message as `bytes`.
3. It appends the message to an internal queue. You can read the queue by
   polling or by blocking.

Each connection is handled on its own thread. The server stops when asked, even
while it is waiting for a connection or for data.

## Installation

```
pip install .
```

## Library use

```python
import threading
from linequeue.server import Server

def on_message(message: bytes) -> None:
    print("received", message)

with Server(0, on_message) as server:
    listener = threading.Thread(target=server.start)
    listener.start()
    server.ready.wait()
    print("listening on port", server.port)

    message = server.pop_message_blocking()   # waits for a message
    other = server.pop_message()              # None if the queue is empty

    server.stop()
    listener.join()
```

- `Server(port, callback)` takes the TCP port and a callable that receives each
  message. The callback may be `None`. Port `0` lets the system pick a free
  port.
- `Server.start()` binds to the port on all interfaces and accepts connections.
  It blocks until `stop()` is called, so run it on its own thread. Once it is
  listening it sets `server.ready` (a `threading.Event`) and `server.port`
  holds the port actually bound. Calling `start()` while it is already running
  raises `RuntimeError`; calling it after `stop()` returns at once.
- `Server.stop()` tells the listener and all connection threads to finish,
  waits for them, and wakes any caller blocked in `pop_message_blocking()`.
  Calling it again does no harm. `server.stopped` tells whether it has been
  called.
- `Server.pop_message()` returns the oldest queued message, or `None` if the
  queue is empty or the server has stopped.
- `Server.pop_message_blocking()` waits until a message arrives and returns it.
  It returns `None` once the server has stopped.
- A `Server` used as a context manager calls `stop()` when the block ends.

Each connection buffers at most 1024 bytes of an unfinished line. A client that
sends more than that without a `\n` has its connection closed. A connection is
also closed when the client disconnects or the `OK\n` reply cannot be sent.

## Command line

```
linequeue -p 5000 -t 30
```

This runs a demonstration server on port 5000 for 30 seconds and prints a dot
every second. Every received message is printed by the callback
(`Callback with message: ...`) and once more by whichever of two readers takes
it from the queue, a polling reader (`Pop message (polling): ...`) or a
blocking reader (`Pop message (blocking): ...`). If you leave out `-t`, or pass
`-t 0`, the server runs until the process is interrupted.

Without `-p`, or with arguments that cannot be parsed, the command prints
`Usage: linequeue -p <port> [-t timeout_seconds]` to standard error and exits
with status 1.

## What it does not do

The server only acknowledges messages with `OK\n`; it sends clients nothing
else and offers no way to reply to them. Messages live in memory only and are
lost when the process ends. There is no encryption and no authentication.

## Testing

```
pip install .[test]
pytest
```