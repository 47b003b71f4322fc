class RconException(Exception):
    pass


class PacketError(RconException):
    """Raised when a buffer cannot be decoded into a packet."""


class InvalidPacketSize(PacketError):
    pass


class InvalidPacketType(PacketError):
    pass


class InvalidBodyEncoding(PacketError):
    pass


class UnserializableCommand(RconException):
    """The outgoing text cannot be represented on the wire (ASCII, no NUL)."""


class InvalidResponse(RconException):
    """The server sent something that breaks the request/response protocol."""


class ConnectionFailed(RconException):
    """Transport or authentication failure, including a rejected password."""
