"""Wire format shared by the client and the server.

A frame is a little-endian 32-bit operation code, a 32-bit payload size and
the payload itself. A package payload is a sequence of values, each preceded
by its own 32-bit size.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")
_HEADER = struct.Struct("<ii")
INT_SIZE = _INT.size


class OpCode(IntEnum):
    """Operation carried by a frame."""

    MESSAGE = 0
    PACKAGE = 1


def _as_bytes(value: bytes | bytearray | str) -> bytes:
    """Text is sent NUL-terminated; raw bytes are sent as they are."""
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


def encode_frame(op_code: int, payload: bytes | bytearray) -> bytes:
    """Build a frame from an operation code and its payload."""
    return _HEADER.pack(int(op_code), len(payload)) + bytes(payload)


@dataclass
class Package:
    """A payload under construction together with its operation code."""

    op_code: OpCode = OpCode.PACKAGE
    buffer: bytearray = field(default_factory=bytearray)

    def add(self, value: bytes | bytearray | str) -> None:
        """Append one size-prefixed value to the payload."""
        data = _as_bytes(value)
        self.buffer += _INT.pack(len(data))
        self.buffer += data

    def serialize(self) -> bytes:
        """Return the complete frame ready to be sent."""
        return encode_frame(self.op_code, self.buffer)


def message_package(text: str) -> Package:
    """Build a message whose payload is the NUL-terminated text."""
    return Package(OpCode.MESSAGE, bytearray(_as_bytes(text)))


def parse_values(payload: bytes | bytearray) -> list[bytes]:
    """Split a package payload into its size-prefixed values."""
    values: list[bytes] = []
    offset = 0
    end = len(payload)
    while offset < end:
        if offset + INT_SIZE > end:
            raise ValueError(f"truncated value size at offset {offset}")
        (size,) = _INT.unpack_from(payload, offset)
        offset += INT_SIZE
        if size < 0 or offset + size > end:
            raise ValueError(f"invalid value size {size} at offset {offset - INT_SIZE}")
        values.append(bytes(payload[offset:offset + size]))
        offset += size
    return values