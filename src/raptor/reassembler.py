from dataclasses import dataclass, field

from raptor.errors import InvalidResponse
from raptor.packet import Packet, PacketType
from raptor.utils import log_warning


@dataclass
class PendingRequest:
    id: int
    probe_id: int | None = None
    fragments: list[str] = field(default_factory=list)
    closed: bool = False

    @property
    def body(self) -> str:
        return "".join(self.fragments)


class FragmentReassembler:
    """Collects response fragments per request id until the response ends.

    A response ends when the echo of its probe packet arrives, or when
    ``max_fragments`` fragments have been collected.
    """

    def __init__(self, max_fragments: int | None = None):
        if max_fragments is not None and max_fragments < 1:
            raise ValueError("max_fragments must be at least 1")
        self.max_fragments = max_fragments
        self.pending: dict[int, PendingRequest] = {}
        self._probes: dict[int, int] = {}
        self.dropped: list[Packet] = []

    def open(self, request_id: int, probe_id: int | None = None) -> PendingRequest:
        if request_id in self.pending or request_id in self._probes:
            raise ValueError(f"Request id {request_id} is already pending")
        if probe_id is not None:
            if probe_id == request_id:
                raise ValueError("Probe id must differ from the request id")
            if probe_id in self.pending or probe_id in self._probes:
                raise ValueError(f"Probe id {probe_id} is already pending")
            self._probes[probe_id] = request_id

        request = PendingRequest(request_id, probe_id)
        self.pending[request_id] = request
        return request

    def discard(self, request_id: int) -> None:
        request = self.pending.pop(request_id, None)
        if request is not None and request.probe_id is not None:
            self._probes.pop(request.probe_id, None)

    def feed(self, packet: Packet) -> str | None:
        """Consume one packet; return the full body once its request is done."""
        if packet.id in self._probes:
            return self._complete(self.pending[self._probes[packet.id]])

        request = self.pending.get(packet.id)
        if request is None:
            self.dropped.append(packet)
            log_warning(
                "Fragment reassembly",
                f"dropped packet with unknown id {packet.id} ({len(packet.body)} bytes)",
            )
            return None

        if packet.type is not PacketType.RESPONSE_VALUE:
            raise InvalidResponse(
                f"Expected a response value for request {packet.id}, got {packet.type.name}"
            )

        request.fragments.append(packet.body)
        if self.max_fragments is not None and len(request.fragments) >= self.max_fragments:
            return self._complete(request)
        return None

    def _complete(self, request: PendingRequest) -> str:
        request.closed = True
        self.discard(request.id)
        return request.body
