import struct
from dataclasses import dataclass
from enum import Enum, IntEnum

from raptor.errors import (
    InvalidBodyEncoding,
    InvalidPacketSize,
    InvalidPacketType,
    UnserializableCommand,
)
from raptor.transport import Transport

HEADER_SIZE = 12
TERMINATOR = b"\x00\x00"
# id + type + the two terminators of an empty body
MIN_SIZE = 10
MAX_BODY_SIZE = 4096
MAX_PACKET_SIZE = MIN_SIZE + MAX_BODY_SIZE

U32_MAX = 0xFFFFFFFF
AUTH_REJECTED_ID = U32_MAX

_U32 = struct.Struct("<I")


class PacketType(IntEnum):
    """Raw wire tag. The value 2 means different things in different phases."""

    RESPONSE_VALUE = 0
    COMMAND = 2
    AUTH = 3


class Phase(Enum):
    LOGIN = "login"
    COMMAND = "command"


class MessageKind(Enum):
    AUTH = "auth"
    AUTH_RESPONSE = "auth_response"
    EXEC_COMMAND = "exec_command"
    RESPONSE_VALUE = "response_value"


@dataclass(frozen=True)
class Packet:
    id: int
    type: PacketType
    body: str = ""

    @property
    def size(self) -> int:
        return 4 + 4 + len(self.body) + 1 + 1

    def encode(self) -> bytes:
        return encode(self.id, self.type, self.body)

    @classmethod
    def decode(cls, data: bytes) -> "Packet":
        return decode(data)


def classify(packet: Packet, phase: Phase) -> MessageKind:
    """Resolve a packet's wire tag into a message kind for the given phase.

    Tag 2 is an auth response while logging in and a command otherwise.
    """
    if packet.type is PacketType.AUTH:
        return MessageKind.AUTH
    if packet.type is PacketType.RESPONSE_VALUE:
        return MessageKind.RESPONSE_VALUE
    if phase is Phase.LOGIN:
        return MessageKind.AUTH_RESPONSE
    return MessageKind.EXEC_COMMAND


def encode(id: int, type: PacketType, body: str) -> bytes:
    if not 0 <= id <= U32_MAX:
        raise ValueError(f"Request id out of u32 range: {id}")

    if "\x00" in body:
        raise UnserializableCommand("Body contains an embedded NUL byte")
    try:
        body_bytes = body.encode("ascii")
    except UnicodeEncodeError as e:
        raise UnserializableCommand(f"Body is not ASCII: {e}") from e

    payload = _U32.pack(id) + _U32.pack(int(type)) + body_bytes + TERMINATOR
    return _U32.pack(len(payload)) + payload


def _read_u32(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 4 > len(data):
        raise InvalidPacketSize(
            f"Need 4 bytes at offset {offset}, buffer is {len(data)} bytes"
        )
    (value,) = _U32.unpack_from(data, offset)
    return value


def decode(data: bytes) -> Packet:
    if len(data) < HEADER_SIZE:
        raise InvalidPacketSize(
            f"Need at least {HEADER_SIZE} bytes; got {len(data)}"
        )

    size = _read_u32(data, 0)
    request_id = _read_u32(data, 4)
    raw_type = _read_u32(data, 8)

    try:
        packet_type = PacketType(raw_type)
    except ValueError:
        raise InvalidPacketType(f"Unknown packet type: {raw_type}") from None

    if size != len(data) - 4:
        raise InvalidPacketSize(
            f"Declared size {size} does not match {len(data) - 4} bytes received"
        )
    if len(data) < HEADER_SIZE + len(TERMINATOR):
        raise InvalidPacketSize("Packet is missing its terminators")
    if data[-2:] != TERMINATOR:
        raise InvalidPacketSize("Incorrect padding")

    try:
        body = data[HEADER_SIZE:-2].decode("ascii")
    except UnicodeDecodeError as e:
        raise InvalidBodyEncoding(f"Body is not ASCII: {e}") from e

    return Packet(request_id, packet_type, body)


def read_packet(transport: Transport) -> Packet:
    """Read one framed packet from a transport and decode it."""
    size_field = transport.read(4)
    size = _read_u32(size_field, 0)
    if not MIN_SIZE <= size <= MAX_PACKET_SIZE:
        raise InvalidPacketSize(f"Declared size {size} is out of range")
    return decode(size_field + transport.read(size))
