import socket
from typing import Protocol


class Transport(Protocol):
    def write(self, data: bytes) -> None: ...

    def read(self, length: int) -> bytes: ...

    def close(self) -> None: ...


class SocketTransport:
    """Blocking TCP stream with a per-operation timeout."""

    def __init__(self, sock: socket.socket):
        self.socket: socket.socket | None = sock

    @classmethod
    def connect(cls, host: str, port: int, timeout: float = 5) -> "SocketTransport":
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.settimeout(timeout)
        return cls(sock)

    def write(self, data: bytes) -> None:
        if self.socket is None:
            raise OSError("Socket is closed")
        self.socket.sendall(data)

    def read(self, length: int) -> bytes:
        if self.socket is None:
            raise OSError("Socket is closed")

        data = b""
        while len(data) < length:
            chunk = self.socket.recv(length - len(data))
            if not chunk:
                raise EOFError("Connection closed by server")
            data += chunk
        return data

    def close(self) -> None:
        if self.socket is not None:
            self.socket.close()
            self.socket = None
