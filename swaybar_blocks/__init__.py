"""Swaybar status blocks.

Polling status blocks (firewall, killswitch) driven by a central scheduler
and rendered with the i3bar protocol.
"""

__version__ = "1.0.0"
