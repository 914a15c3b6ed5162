"""Killswitch status block: ufw drops outgoing traffic by default."""

from pathlib import Path

from ..config import BlockConfig
from ..probes import UFW_DEFAULTS, is_killswitch_active
from .base import ProbeBlock


class KillswitchConfig(BlockConfig):
    """Configuration for the killswitch block (only ``interval``)."""


class Killswitch(ProbeBlock):
    """Shows a red "down" segment unless the default output policy is DROP."""

    name = "killswitch"
    icon = "killswitch"
    config_class = KillswitchConfig

    defaults_path: Path = UFW_DEFAULTS

    def probe(self) -> bool:
        return is_killswitch_active(self.defaults_path)
