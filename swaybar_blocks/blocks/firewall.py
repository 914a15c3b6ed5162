"""Firewall status block: ufw enabled and its service running."""

from pathlib import Path

from ..config import BlockConfig
from ..probes import UFW_CONF, is_ufw_active
from .base import ProbeBlock


class FirewallConfig(BlockConfig):
    """Configuration for the firewall block (only ``interval``)."""


class Firewall(ProbeBlock):
    """Shows a red "down" segment unless ufw is enabled and active."""

    name = "firewall"
    icon = "firewall"
    config_class = FirewallConfig

    conf_path: Path = UFW_CONF
    unit: str = "ufw"

    def probe(self) -> bool:
        return is_ufw_active(self.conf_path, self.unit)
