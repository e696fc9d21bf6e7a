# paquetes

A small TCP client and server pair that talk over a simple
length-prefixed binary protocol. The client sends one text message and
then a *package* of values typed line by line on the console; the
server logs everything it receives.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the server

```
paquetes-server [--port PORT] [--log FILE]
```

The server binds a listening socket on all IPv4 addresses (port 4444 by
default), accepts one client and logs every operation it receives, both
to the console and to the log file (`log.log` by default). Messages are
logged as text; the values of a package are logged one per line. Unknown
operation codes are logged as warnings and ignored. When the client
disconnects, the server logs the disconnection and exits with status 1.
If no address can be bound, or accepting the client fails, it logs the
error and exits with status 1.

## Running the client

The client reads its settings from a configuration file of `KEY=VALUE`
lines (`cliente.config` by default). Blank lines, lines starting with `#`
and lines without `=` are ignored; keys and values are stripped of
surrounding whitespace.

```
IP=127.0.0.1
PUERTO=4444
CLAVE=hello
```

Make sure the server is running first, then start:

```
paquetes-client [--config FILE] [--log FILE]
```

The client logs to the console and to the log file (`tp0.log` by
default). It then:

1. logs a greeting, then the value of `CLAVE` (or an error if it is
   missing);
2. reads lines at the `> ` prompt and logs each one, until an empty line
   or end of input;
3. connects to `IP`:`PUERTO` and, if `CLAVE` is set, sends it as a
   message;
4. reads more lines at the `> ` prompt, until an empty line or end of
   input, and sends them to the server as one package.

The client exits with status 1 if the configuration file cannot be read,
if `IP` or `PUERTO` is missing, or if the connection fails.

## Wire format

Every frame is an operation code followed by a payload size and the
payload itself; both integers are signed 32-bit little-endian:

| field     | size          |
|-----------|---------------|
| op code   | 4 bytes       |
| size      | 4 bytes       |
| payload   | `size` bytes  |

Operation codes are given by `paquetes.protocol.OpCode`: `MESSAGE` (0)
for a single message and `PACKAGE` (1) for a package. A message payload
is the UTF-8 text with a trailing NUL byte. A package payload is a run
of values, each a 4-byte length followed by that many bytes; text values
are stored UTF-8 encoded with a trailing NUL byte.

## Library use

The protocol can be used on its own:

```python
from paquetes.protocol import OpCode, Package, encode_frame, message_package, parse_values

package = Package()
package.add("first")
package.add(b"\x01\x02")   # raw bytes are stored as they are
frame = package.serialize()

greeting = message_package("hello").serialize()
values = parse_values(package.buffer)   # [b"first\x00", b"\x01\x02"]
```

`encode_frame(op_code, payload)` builds a frame from an operation code
and a raw payload. `parse_values` raises `ValueError` on a truncated or
malformed payload.

`paquetes.config` offers `parse_config(text)` and `load_config(path)`,
which return the settings as a dictionary.

`paquetes.client` provides `connect`, `send_message`, `send_package`,
`build_package`, `read_console` and `create_logger`; `paquetes.server`
provides `start_server`, `wait_client`, `receive_operation`,
`receive_buffer`, `receive_message`, `receive_package` and `serve`. They
work on ordinary sockets and can be combined in your own programs.
`receive_operation` returns `None` and closes the socket when the peer
has disconnected.

## Limitations

The server handles a single client and stops when it disconnects; it
does not accept further connections. Only IPv4 is used.