from raptor.errors import (
    ConnectionFailed,
    InvalidBodyEncoding,
    InvalidPacketSize,
    InvalidPacketType,
    InvalidResponse,
    PacketError,
    RconException,
    UnserializableCommand,
)
from raptor.packet import MessageKind, Packet, PacketType, Phase, decode, encode
from raptor.session import RconSession, execute

__version__ = "0.1.0"

__all__ = [
    "ConnectionFailed",
    "InvalidBodyEncoding",
    "InvalidPacketSize",
    "InvalidPacketType",
    "InvalidResponse",
    "MessageKind",
    "Packet",
    "PacketError",
    "PacketType",
    "Phase",
    "RconException",
    "RconSession",
    "UnserializableCommand",
    "decode",
    "encode",
    "execute",
]
