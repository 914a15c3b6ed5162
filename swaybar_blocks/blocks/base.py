"""Block interface shared by every status block.

A block is anything that can be updated on a timer, viewed as display
segments, clicked, and addressed by a stable identity. The scheduler and the
renderer only ever use these four operations.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type

from ..config import BlockConfig, Config
from ..errors import ProbeError, ScheduleError
from ..models import ClickEvent, DisplaySegment, MouseButton, State
from ..scheduler import RescheduleAfter, SchedulerHandle, Update
from ..widgets import TextWidget

logger = logging.getLogger(__name__)


def pseudo_uuid() -> str:
    """Random identity for a block instance."""
    return uuid.uuid4().hex


class Block(ABC):
    """A polling unit producing a renderable status in the bar."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identity used for scheduling and click routing."""

    @abstractmethod
    def update(self) -> Optional[Update]:
        """
        Refresh widget state from the underlying system.

        Returns:
            When to run again; None or NO_FURTHER_UPDATES to stop polling

        Raises:
            BlockError: If the block cannot be evaluated at all
        """

    @abstractmethod
    def view(self) -> List[DisplaySegment]:
        """Current display segments. Must not mutate the block."""

    def click(self, event: Any) -> None:
        """Handle a click on one of this block's segments. No-op by default."""
        return None


class ConfigBlock(Block):
    """A block that can be built from a ``[[block]]`` configuration fragment."""

    name: str = ""
    config_class: Type[BlockConfig] = BlockConfig

    @classmethod
    @abstractmethod
    def new(cls, block_config: BlockConfig, config: Config, update_handle: SchedulerHandle) -> "ConfigBlock":
        """
        Build a block from its validated configuration.

        Must not probe the system; the first probe is the first update().

        Args:
            block_config: Validated instance of ``cls.config_class``
            config: Shared bar context
            update_handle: Channel for proactive update requests
        """


class ProbeBlock(ConfigBlock):
    """Block that shows nothing while its probe holds and "down" otherwise.

    Subclasses set ``name`` and ``icon`` and implement ``probe()``. A probe
    that cannot be evaluated counts as down.
    """

    icon: Optional[str] = None

    def __init__(self, block_config: BlockConfig, config: Config, update_handle: SchedulerHandle):
        self._id = pseudo_uuid()
        self.update_interval = block_config.interval
        self.config = config
        self.update_handle = update_handle
        self.text = TextWidget(config).with_text("").with_icon(self.icon)

    @classmethod
    def new(cls, block_config: BlockConfig, config: Config, update_handle: SchedulerHandle) -> "ProbeBlock":
        return cls(block_config, config, update_handle)

    @property
    def id(self) -> str:
        return self._id

    @abstractmethod
    def probe(self) -> bool:
        """
        Check the guarded condition.

        Raises:
            ProbeError: If the condition cannot be verified
        """

    def update(self) -> Update:
        try:
            active = self.probe()
        except ProbeError as e:
            logger.warning(f"{self.name} probe failed: {e}")
            active = False

        self.text.set_text("" if active else "down")
        self.text.set_state(State.GOOD if active else State.CRITICAL)

        return RescheduleAfter(self.update_interval)

    def view(self) -> List[DisplaySegment]:
        return [self.text.segment()]

    def click(self, event: Any) -> None:
        """Left click re-runs the probe immediately."""
        if not isinstance(event, ClickEvent) or event.button != MouseButton.LEFT:
            return

        try:
            self.update_handle.request_update(self.id)
        except ScheduleError as e:
            logger.error(f"{self.name} refresh request dropped: {e}")
