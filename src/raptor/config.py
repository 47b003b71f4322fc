import os
from dataclasses import dataclass, replace

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class RconConfig:
    host: str = "localhost"
    port: int = 25575
    password: str = ""
    timeout: float = 5.0
    multi_packet: bool = True

    @classmethod
    def from_env(cls) -> "RconConfig":
        return cls(
            host=os.getenv("RCON_HOST", "localhost"),
            port=int(os.getenv("RCON_PORT", "25575")),
            password=os.getenv("RCON_PASSWORD", ""),
            timeout=float(os.getenv("RCON_TIMEOUT", "5")),
            multi_packet=os.getenv("RCON_MULTI_PACKET", "true").strip().lower()
            in _TRUE_VALUES,
        )

    def with_overrides(self, **values) -> "RconConfig":
        return replace(self, **{k: v for k, v in values.items() if v is not None})

    def validate(self) -> tuple[bool, str]:
        if not self.password:
            return False, "RCON_PASSWORD environment variable not set"

        if not 1 <= self.port <= 65535:
            return False, f"Invalid RCON port: {self.port}"

        if self.timeout <= 0:
            return False, f"Invalid RCON timeout: {self.timeout}"

        return True, "Configuration is valid"
