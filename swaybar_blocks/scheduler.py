"""Update scheduling for status blocks.

Blocks never touch the timer heap. After every update() they return an
``Update`` value, and when they want an out-of-band refresh they send a
``Task`` through their ``SchedulerHandle``. The ``Scheduler`` is the single
consumer: it owns absolute deadlines, merges requests per block identity and
routes click events to blocks on its own thread.
"""

import heapq
import itertools
import logging
import queue
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .errors import BlockError, ScheduleError

if TYPE_CHECKING:
    from .blocks.base import Block

logger = logging.getLogger(__name__)

DEFAULT_ERROR_RETRY = timedelta(seconds=5)

Clock = Callable[[], float]


@dataclass(frozen=True)
class RescheduleAfter:
    """Run update() again once ``interval`` has elapsed."""
    interval: timedelta


class NoFurtherUpdates:
    """Never run update() again."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NoFurtherUpdates"


NO_FURTHER_UPDATES = NoFurtherUpdates()

Update = Union[RescheduleAfter, NoFurtherUpdates]


@dataclass(frozen=True)
class Task:
    """Request to run a block's update() at a monotonic time."""
    block_id: str
    update_time: float


@dataclass(frozen=True)
class ClickTask:
    """Click event waiting to be delivered on the scheduler thread."""
    event: Any


Message = Union[Task, ClickTask]


class UpdateChannel:
    """Many-producer, single-consumer queue between blocks and the scheduler."""

    def __init__(self, clock: Clock = time.monotonic):
        self.clock = clock
        self._queue: "queue.Queue[Message]" = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def handle(self) -> "SchedulerHandle":
        """Create a send-only endpoint for a block."""
        return SchedulerHandle(self)

    def put(self, message: Message) -> None:
        if self.closed:
            raise ScheduleError("scheduler has stopped", context={"message": repr(message)})
        self._queue.put(message)

    def get(self, timeout: Optional[float] = None) -> Optional[Message]:
        """Wait for the next message; None on timeout."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[Message]:
        """Take every message currently queued without blocking."""
        messages = []
        while True:
            try:
                messages.append(self._queue.get_nowait())
            except queue.Empty:
                return messages

    def close(self) -> None:
        self._closed.set()


class SchedulerHandle:
    """Send-only endpoint a block keeps to request re-evaluation."""

    def __init__(self, channel: UpdateChannel):
        self._channel = channel

    def send(self, message: Message) -> None:
        """
        Enqueue a message for the scheduler.

        Raises:
            ScheduleError: If the scheduler has stopped consuming
        """
        self._channel.put(message)

    def request_update(self, block_id: str, delay: float = 0.0) -> None:
        """Ask for ``block_id`` to be updated after ``delay`` seconds."""
        self.send(Task(block_id=block_id, update_time=self._channel.clock() + delay))

    def deliver_click(self, event: Any) -> None:
        self.send(ClickTask(event=event))


class Scheduler:
    """Owns the timer heap and drives every block's update()."""

    def __init__(
        self,
        blocks: Iterable["Block"],
        channel: UpdateChannel,
        error_retry: timedelta = DEFAULT_ERROR_RETRY,
    ):
        """
        Initialize scheduler.

        Args:
            blocks: Blocks to drive, keyed internally by their identity
            channel: Channel the blocks' handles send into
            error_retry: Delay before retrying a block whose update() raised
        """
        self.blocks: Dict[str, "Block"] = {block.id: block for block in blocks}
        self.channel = channel
        self.clock = channel.clock
        self.error_retry = error_retry

        self._deadlines: Dict[str, float] = {}
        self._heap: List[Tuple[float, int, str]] = []
        self._counter = itertools.count()

    def schedule(self, block_id: str, update_time: float) -> None:
        """Schedule an update, keeping only the earliest deadline per block."""
        if block_id not in self.blocks:
            logger.warning(f"Ignoring update request for unknown block {block_id}")
            return

        current = self._deadlines.get(block_id)
        if current is not None and current <= update_time:
            return

        self._deadlines[block_id] = update_time
        heapq.heappush(self._heap, (update_time, next(self._counter), block_id))

    def schedule_all(self) -> None:
        """Make every block due now (its first probe)."""
        now = self.clock()
        for block_id in self.blocks:
            self.schedule(block_id, now)

    def deadline(self, block_id: str) -> Optional[float]:
        return self._deadlines.get(block_id)

    def _head(self) -> Optional[Tuple[float, int, str]]:
        # Drop heap entries superseded by an earlier request
        while self._heap:
            update_time, _, block_id = self._heap[0]
            if self._deadlines.get(block_id) == update_time:
                return self._heap[0]
            heapq.heappop(self._heap)
        return None

    def time_to_next_update(self) -> Optional[float]:
        """Seconds until the earliest deadline; None when nothing is scheduled."""
        head = self._head()
        if head is None:
            return None
        return max(0.0, head[0] - self.clock())

    def do_scheduled_updates(self) -> List[str]:
        """
        Run every block whose deadline has passed.

        Returns:
            Identities of the blocks that were updated, in deadline order
        """
        now = self.clock()
        due = []
        while True:
            head = self._head()
            if head is None or head[0] > now:
                break
            heapq.heappop(self._heap)
            block_id = head[2]
            del self._deadlines[block_id]
            due.append(block_id)

        for block_id in due:
            self._run_update(block_id)
        return due

    def _run_update(self, block_id: str) -> None:
        block = self.blocks[block_id]
        try:
            result = block.update()
        except BlockError as e:
            logger.error(f"Block {block_id} update failed: {e}")
            self._retry(block_id)
            return
        except Exception as e:
            logger.error(f"Unexpected error updating block {block_id}: {e}", exc_info=True)
            self._retry(block_id)
            return

        if result is None or isinstance(result, NoFurtherUpdates):
            logger.debug(f"Block {block_id} requested no further updates")
        elif isinstance(result, RescheduleAfter):
            self.schedule(block_id, self.clock() + result.interval.total_seconds())
        else:
            logger.error(f"Block {block_id} returned invalid update {result!r}")
            self._retry(block_id)

    def _retry(self, block_id: str) -> None:
        self.schedule(block_id, self.clock() + self.error_retry.total_seconds())

    def dispatch_click(self, event: Any) -> bool:
        """
        Deliver a click event to the block it targets.

        Returns:
            True if a block received the event
        """
        name = getattr(event, "name", None)
        block = self.blocks.get(name) if isinstance(name, str) else None
        if block is None:
            logger.warning(f"Click for unknown block: {name!r}")
            return False

        try:
            block.click(event)
        except Exception as e:
            logger.error(f"Block {name} click handler failed: {e}", exc_info=True)
        return True

    def process_message(self, message: Message) -> None:
        if isinstance(message, Task):
            self.schedule(message.block_id, message.update_time)
        elif isinstance(message, ClickTask):
            self.dispatch_click(message.event)
        else:
            logger.warning(f"Ignoring unknown scheduler message {message!r}")

    def wait_for_messages(self, timeout: Optional[float]) -> bool:
        """
        Block until a message arrives or ``timeout`` seconds pass.

        Every message queued at that point is processed.

        Returns:
            True if at least one message was processed
        """
        message = self.channel.get(timeout=timeout)
        if message is None:
            return False

        self.process_message(message)
        for message in self.channel.drain():
            self.process_message(message)
        return True
