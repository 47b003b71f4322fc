from enum import Enum

from raptor.errors import ConnectionFailed, PacketError, UnserializableCommand
from raptor.packet import (
    AUTH_REJECTED_ID,
    MessageKind,
    PacketType,
    Phase,
    classify,
    encode,
    read_packet,
)
from raptor.transport import Transport


class AuthState(Enum):
    IDLE = "idle"
    AUTH_SENT = "auth_sent"
    AUTH_ACCEPTED = "auth_accepted"
    AUTH_REJECTED = "auth_rejected"


class AuthHandshake:
    """One-time login exchange over an already connected transport.

    Some servers answer the auth packet with an empty response value
    before the actual auth response; one such echo is skipped.
    """

    def __init__(self, transport: Transport, password: str, request_id: int):
        self.transport = transport
        self.password = password
        self.request_id = request_id
        self.state = AuthState.IDLE

    def run(self) -> AuthState:
        if self.state is not AuthState.IDLE:
            raise RuntimeError(f"Handshake already ran ({self.state.value})")

        try:
            request = encode(self.request_id, PacketType.AUTH, self.password)
        except UnserializableCommand as e:
            raise ConnectionFailed(f"Password cannot be sent: {e}") from e

        try:
            self.transport.write(request)
            self.state = AuthState.AUTH_SENT
            response = read_packet(self.transport)
            if classify(response, Phase.LOGIN) is MessageKind.RESPONSE_VALUE:
                if response.body:
                    raise ConnectionFailed(
                        f"Unexpected response during login: {response.body!r}"
                    )
                response = read_packet(self.transport)
        except (OSError, EOFError) as e:
            raise ConnectionFailed(f"Connection failed: {e}") from e
        except PacketError as e:
            raise ConnectionFailed(f"Malformed login response: {e}") from e

        if classify(response, Phase.LOGIN) is not MessageKind.AUTH_RESPONSE:
            raise ConnectionFailed(
                f"Expected an auth response, got {response.type.name}"
            )

        if response.id == self.request_id:
            self.state = AuthState.AUTH_ACCEPTED
            return self.state
        if response.id == AUTH_REJECTED_ID:
            self.state = AuthState.AUTH_REJECTED
            raise ConnectionFailed("Login failed: password rejected")
        raise ConnectionFailed(
            f"Auth response id {response.id} does not match request {self.request_id}"
        )
