import struct
import threading
import time

import pytest

from raptor.packet import AUTH_REJECTED_ID, Packet, PacketType, decode, encode


def split_frames(data: bytes) -> list[Packet]:
    packets = []
    while data:
        (size,) = struct.unpack_from("<I", data, 0)
        packets.append(decode(data[: size + 4]))
        data = data[size + 4 :]
    return packets


class FakeServer:
    """In-memory RCON server speaking through the transport interface.

    ``responses`` maps a command to its reply; a list reply is sent as one
    packet per item.
    """

    def __init__(
        self,
        password: str = "testpass",
        responses: dict | None = None,
        auth_echo: bool = False,
        auth_id: int | None = None,
        write_delay: float = 0,
    ):
        self.password = password
        self.responses = responses or {}
        self.auth_echo = auth_echo
        self.auth_id = auth_id
        self.write_delay = write_delay
        self.received: list[Packet] = []
        self.events: list[tuple[str, str]] = []
        self.outgoing = bytearray()
        self.closed = False
        self.fail_writes = False
        self.inject: list[bytes] = []

    def queue(self, request_id: int, packet_type: PacketType, body: str = "") -> None:
        self.outgoing += encode(request_id, packet_type, body)

    def write(self, data: bytes) -> None:
        if self.closed or self.fail_writes:
            raise OSError("broken pipe")
        self.events.append(("write", threading.current_thread().name))
        if self.write_delay:
            time.sleep(self.write_delay)
        for packet in split_frames(data):
            self.received.append(packet)
            self._handle(packet)

    def _handle(self, packet: Packet) -> None:
        if packet.type is PacketType.AUTH:
            if self.auth_echo:
                self.queue(packet.id, PacketType.RESPONSE_VALUE)
            if self.auth_id is not None:
                reply_id = self.auth_id
            elif packet.body == self.password:
                reply_id = packet.id
            else:
                reply_id = AUTH_REJECTED_ID
            self.queue(reply_id, PacketType.COMMAND)
            return

        while self.inject:
            self.outgoing += self.inject.pop(0)

        if packet.body == "":
            self.queue(packet.id, PacketType.RESPONSE_VALUE)
            return

        reply = self.responses.get(packet.body, f"Unknown command: {packet.body}")
        fragments = reply if isinstance(reply, list) else [reply]
        for fragment in fragments:
            self.queue(packet.id, PacketType.RESPONSE_VALUE, fragment)

    def read(self, length: int) -> bytes:
        if self.closed:
            raise OSError("closed")
        if len(self.outgoing) < length:
            raise EOFError("Connection closed by server")
        self.events.append(("read", threading.current_thread().name))
        data = bytes(self.outgoing[:length])
        del self.outgoing[:length]
        return data

    def close(self) -> None:
        self.closed = True


class ReplayTransport:
    """Transport that replays canned bytes and records what was written."""

    def __init__(self, incoming: bytes = b""):
        self.incoming = bytearray(incoming)
        self.written = b""
        self.closed = False

    def write(self, data: bytes) -> None:
        self.written += data

    def read(self, length: int) -> bytes:
        if len(self.incoming) < length:
            raise EOFError("Connection closed by server")
        data = bytes(self.incoming[:length])
        del self.incoming[:length]
        return data

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def server():
    return FakeServer(responses={"version": "Paper 1.20"})
