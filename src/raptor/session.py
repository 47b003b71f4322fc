import threading

from raptor.auth import AuthHandshake
from raptor.errors import ConnectionFailed, InvalidResponse, PacketError
from raptor.packet import AUTH_REJECTED_ID, PacketType, encode, read_packet
from raptor.reassembler import FragmentReassembler
from raptor.transport import SocketTransport, Transport

DEFAULT_PORT = 25575


class RconSession:
    """An authenticated RCON connection.

    Commands are serialized: each ``send_command`` holds the session lock
    for its whole write-then-read cycle. When ``multi_packet`` is enabled an
    empty command with its own id follows every request, and its echo marks
    the end of a response split across several packets.

    Any transport or protocol failure closes the session for good.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        password: str = "",
        *,
        timeout: float = 5,
        multi_packet: bool = True,
        max_stray_packets: int = 16,
        transport: Transport | None = None,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.multi_packet = multi_packet
        self.max_stray_packets = max_stray_packets
        self._lock = threading.Lock()
        self._next_id = 1
        self._authenticated = False
        self._closed = False

        if transport is None:
            try:
                transport = SocketTransport.connect(host, port, timeout)
            except OSError as e:
                raise ConnectionFailed(f"Connection failed: {e}") from e
        self.transport = transport

        try:
            AuthHandshake(transport, password, self._allocate_id()).run()
        except Exception:
            self.close()
            raise
        self._authenticated = True

    def __enter__(self) -> "RconSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<RconSession {self.host}:{self.port} {state}>"

    @property
    def authenticated(self) -> bool:
        return self._authenticated and not self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True
        self.transport.close()

    def _allocate_id(self) -> int:
        request_id = self._next_id
        self._next_id += 1
        # never hand out the rejection sentinel
        if self._next_id >= AUTH_REJECTED_ID:
            self._next_id = 0
        return request_id

    def send_command(self, command: str) -> str:
        with self._lock:
            if not self.authenticated:
                raise ConnectionFailed("Session is closed or not authenticated")

            request_id = self._allocate_id()
            probe_id = self._allocate_id() if self.multi_packet else None

            # raises UnserializableCommand before anything touches the wire
            request = encode(request_id, PacketType.COMMAND, command)
            if probe_id is not None:
                request += encode(probe_id, PacketType.COMMAND, "")

            try:
                self.transport.write(request)
            except OSError as e:
                self.close()
                raise ConnectionFailed(f"Write failed: {e}") from e

            try:
                return self._read_response(request_id, probe_id)
            except InvalidResponse:
                self.close()
                raise

    def _read_response(self, request_id: int, probe_id: int | None) -> str:
        reassembler = FragmentReassembler(None if probe_id is not None else 1)
        reassembler.open(request_id, probe_id)

        while True:
            try:
                packet = read_packet(self.transport)
            except PacketError as e:
                raise InvalidResponse(f"Malformed response: {e}") from e
            except EOFError as e:
                raise InvalidResponse(f"Connection closed mid-response: {e}") from e
            except OSError as e:
                raise InvalidResponse(f"Read failed: {e}") from e

            body = reassembler.feed(packet)
            if body is not None:
                return body
            if len(reassembler.dropped) > self.max_stray_packets:
                raise InvalidResponse(
                    f"Gave up on request {request_id} after "
                    f"{len(reassembler.dropped)} unrelated packets"
                )


def execute(host: str, port: int, password: str, command: str, **kwargs) -> str:
    """Connect, run a single command and disconnect."""
    with RconSession(host, port, password, **kwargs) as session:
        return session.send_command(command)
