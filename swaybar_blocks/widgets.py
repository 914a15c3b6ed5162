"""Text widget: the mutable visual state a block renders from."""

from typing import Optional

from .config import Config
from .models import DisplaySegment, State


class TextWidget:
    """Holds the current text, icon key and severity of one segment.

    Owned by exactly one block and mutated only from that block's update()
    or click(). The renderer reads it through segment().
    """

    def __init__(self, config: Config):
        self.config = config
        self._text = ""
        self._icon: Optional[str] = None
        self._state = State.IDLE
        self._segment: Optional[DisplaySegment] = None

    def with_text(self, text: str) -> "TextWidget":
        self.set_text(text)
        return self

    def with_icon(self, icon: Optional[str]) -> "TextWidget":
        self.set_icon(icon)
        return self

    def with_state(self, state: State) -> "TextWidget":
        self.set_state(state)
        return self

    def set_text(self, text: str) -> None:
        if text != self._text:
            self._text = text
            self._segment = None

    def set_icon(self, icon: Optional[str]) -> None:
        if icon != self._icon:
            self._icon = icon
            self._segment = None

    def set_state(self, state: State) -> None:
        if state != self._state:
            self._state = state
            self._segment = None

    @property
    def text(self) -> str:
        return self._text

    @property
    def icon(self) -> Optional[str]:
        return self._icon

    @property
    def state(self) -> State:
        return self._state

    def segment(self) -> DisplaySegment:
        """Current renderable state; the same object until the widget changes."""
        if self._segment is None:
            self._segment = DisplaySegment(text=self._text, icon=self._icon, state=self._state)
        return self._segment
