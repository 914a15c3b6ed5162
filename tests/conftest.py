"""Pytest configuration and fixtures for swaybar status block tests."""

import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from swaybar_blocks.config import Config, BlockConfig
from swaybar_blocks.scheduler import UpdateChannel


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def channel(clock):
    """Update channel driven by the fake clock."""
    return UpdateChannel(clock=clock)


@pytest.fixture
def sample_config():
    """Shared bar context with default theme and icons."""
    return Config()


@pytest.fixture
def default_block_config():
    return BlockConfig()


@pytest.fixture
def ufw_conf_enabled(tmp_path):
    """ufw.conf with the firewall enabled."""
    path = tmp_path / "ufw.conf"
    path.write_text(
        "# /etc/ufw/ufw.conf\n"
        "#\n"
        "# Set to yes to start on boot.\n"
        "ENABLED=yes\n"
        "LOGLEVEL=low\n"
    )
    return path


@pytest.fixture
def ufw_conf_disabled(tmp_path):
    """ufw.conf with the firewall disabled."""
    path = tmp_path / "ufw.conf"
    path.write_text("ENABLED=no\nLOGLEVEL=low\n")
    return path


@pytest.fixture
def ufw_defaults_drop(tmp_path):
    """/etc/default/ufw with outgoing traffic dropped (killswitch on)."""
    path = tmp_path / "ufw-drop"
    path.write_text(
        'IPV6=yes\n'
        'DEFAULT_INPUT_POLICY="DROP"\n'
        'DEFAULT_OUTPUT_POLICY="DROP"\n'
        'DEFAULT_FORWARD_POLICY="DROP"\n'
    )
    return path


@pytest.fixture
def ufw_defaults_accept(tmp_path):
    """/etc/default/ufw with outgoing traffic accepted (killswitch off)."""
    path = tmp_path / "ufw-accept"
    path.write_text(
        'IPV6=yes\n'
        'DEFAULT_INPUT_POLICY="DROP"\n'
        'DEFAULT_OUTPUT_POLICY="ACCEPT"\n'
    )
    return path


@pytest.fixture
def systemctl_active_output():
    """Output of `systemctl status ufw` for a running unit."""
    return (
        b"\xe2\x97\x8f ufw.service - Uncomplicated firewall\n"
        b"     Loaded: loaded (/lib/systemd/system/ufw.service; enabled; vendor preset: enabled)\n"
        b"     Active: active (exited) since Mon 2026-10-12 09:14:03 UTC; 6 days ago\n"
        b"       Docs: man:ufw(8)\n"
    )


@pytest.fixture
def systemctl_inactive_output():
    """Output of `systemctl status ufw` for a stopped unit."""
    return (
        b"\xe2\x97\x8b ufw.service - Uncomplicated firewall\n"
        b"     Loaded: loaded (/lib/systemd/system/ufw.service; disabled; vendor preset: enabled)\n"
        b"     Active: inactive (dead)\n"
    )
