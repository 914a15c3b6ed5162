"""Core data models for display segments, i3bar status blocks and click events."""

from dataclasses import dataclass, asdict, field
from typing import Optional, Tuple
from enum import Enum


class State(Enum):
    """Severity of a block's current reading.

    Purely presentational: the renderer maps it to a theme color.
    """
    IDLE = "idle"
    INFO = "info"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class DisplaySegment:
    """One renderable unit produced by a widget.

    Only these three fields are visible to the renderer.
    """

    text: str
    icon: Optional[str] = None  # Icon key, resolved to a glyph by the renderer
    state: State = State.IDLE


@dataclass
class StatusBlock:
    """A single status block in the i3bar protocol format.

    See: https://i3wm.org/docs/i3bar-protocol.html
    """

    # Required fields
    full_text: str          # Full text to display (with markup)
    name: str               # Block identity, echoed back in click events

    # Optional fields
    short_text: Optional[str] = None      # Abbreviated text for small displays
    color: Optional[str] = None           # Hex color code (#RRGGBB)
    urgent: bool = False                  # Urgent flag (highlights block)
    separator: bool = True                # Show separator after block
    separator_block_width: int = 15       # Separator width
    markup: str = "pango"                 # Markup type (none, pango)
    instance: Optional[str] = None        # Segment index within the block

    def to_json(self) -> dict:
        """Convert to i3bar protocol JSON format.

        Omits None values to minimize JSON output.
        """
        return {k: v for k, v in asdict(self).items() if v is not None}


class MouseButton(Enum):
    """Mouse button codes from i3bar protocol."""
    UNKNOWN = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    SCROLL_UP = 4
    SCROLL_DOWN = 5
    SCROLL_LEFT = 6
    SCROLL_RIGHT = 7
    BACK = 8
    FORWARD = 9


@dataclass(frozen=True)
class ClickEvent:
    """A click event from swaybar (i3bar protocol).

    Sent from swaybar to the status generator via stdin when the user clicks a
    status block. ``name`` is the identity of the block that was clicked.
    """

    name: str                     # Block identity
    instance: Optional[str]       # Segment index within the block
    button: MouseButton           # Mouse button
    x: int = 0                    # Click X coordinate
    y: int = 0                    # Click Y coordinate
    modifiers: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, data: dict) -> 'ClickEvent':
        """Parse from i3bar protocol JSON.

        Unknown button codes map to MouseButton.UNKNOWN and missing
        coordinates default to zero, so odd events from newer bars are still
        delivered (and ignored by blocks that don't care).

        Args:
            data: Click event JSON dict from swaybar stdin

        Returns:
            ClickEvent instance

        Raises:
            ValueError: If the event is not an object or has no block name
        """
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError(f"Click event without block name: {data!r}")

        try:
            button = MouseButton(data.get("button"))
        except (TypeError, ValueError):
            button = MouseButton.UNKNOWN

        instance = data.get("instance")
        modifiers = data.get("modifiers") or ()

        return cls(
            name=str(data["name"]),
            instance=str(instance) if instance is not None else None,
            button=button,
            x=_as_int(data.get("x")),
            y=_as_int(data.get("y")),
            modifiers=tuple(str(m) for m in modifiers) if isinstance(modifiers, (list, tuple)) else (),
        )


def _as_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
