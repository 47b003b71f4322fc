import pytest

from raptor.config import RconConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RCON_HOST", "RCON_PORT", "RCON_PASSWORD", "RCON_TIMEOUT", "RCON_MULTI_PACKET"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = RconConfig.from_env()
    assert config == RconConfig("localhost", 25575, "", 5.0, True)
    assert config.validate() == (False, "RCON_PASSWORD environment variable not set")


def test_from_env(monkeypatch):
    monkeypatch.setenv("RCON_HOST", "mc.example.org")
    monkeypatch.setenv("RCON_PORT", "27015")
    monkeypatch.setenv("RCON_PASSWORD", "testpass")
    monkeypatch.setenv("RCON_TIMEOUT", "2.5")
    monkeypatch.setenv("RCON_MULTI_PACKET", "no")

    config = RconConfig.from_env()
    assert config.host == "mc.example.org"
    assert config.port == 27015
    assert config.timeout == 2.5
    assert config.multi_packet is False
    assert config.validate() == (True, "Configuration is valid")


def test_overrides_skip_none():
    config = RconConfig(password="a").with_overrides(host="other", port=None, password=None)
    assert config.host == "other"
    assert config.port == 25575
    assert config.password == "a"


@pytest.mark.parametrize("port", [0, 65536])
def test_invalid_port(port):
    ok, message = RconConfig(password="x", port=port).validate()
    assert not ok
    assert str(port) in message


def test_invalid_timeout():
    ok, _ = RconConfig(password="x", timeout=0).validate()
    assert not ok
