"""Swaybar status generator driving blocks through the scheduler.

Writes i3bar protocol JSON to stdout and reads click events from stdin.

Protocol: https://i3wm.org/docs/i3bar-protocol.html
"""

import html
import json
import logging
import sys
import threading
from typing import List, Optional, Sequence, TextIO

from .blocks.base import Block
from .config import Config
from .errors import ScheduleError
from .models import ClickEvent, DisplaySegment, State, StatusBlock
from .scheduler import Scheduler, UpdateChannel

logger = logging.getLogger(__name__)


def render_segment(block_id: str, index: int, segment: DisplaySegment, config: Config) -> StatusBlock:
    """Convert one display segment to an i3bar status block."""
    glyph = config.icon(segment.icon)
    parts = []
    if glyph:
        font = html.escape(config.icon_font, quote=True)
        parts.append(f"<span font='{font}'>{html.escape(glyph)}</span>")
    if segment.text:
        parts.append(html.escape(segment.text))

    return StatusBlock(
        name=block_id,
        instance=str(index),
        full_text=" ".join(parts),
        short_text=html.escape(segment.text) if segment.text else None,
        color=config.theme.color_for(segment.state),
        urgent=segment.state == State.CRITICAL,
        markup="pango"
    )


class StatusGenerator:
    """Main status generator for swaybar."""

    def __init__(
        self,
        blocks: Sequence[Block],
        config: Config,
        channel: UpdateChannel,
        output: Optional[TextIO] = None,
    ):
        """Initialize status generator.

        Args:
            blocks: Blocks in display order
            config: Shared bar context (theme, icons)
            channel: Update channel the blocks' handles send into
            output: Stream receiving i3bar protocol JSON (default: stdout)
        """
        self.blocks = list(blocks)
        self.config = config
        self.channel = channel
        self.output = output if output is not None else sys.stdout
        self.scheduler = Scheduler(self.blocks, channel)
        self.running = False
        self.click_thread: Optional[threading.Thread] = None

        logger.info(f"Status generator initialized with {len(self.blocks)} block(s)")

    def header(self) -> None:
        """Print i3bar protocol header."""
        self.output.write(json.dumps({"version": 1, "click_events": True}) + "\n")
        self.output.write("[\n")  # Start infinite array
        self.output.flush()

    def get_status_blocks(self) -> List[StatusBlock]:
        """Collect every block's current view.

        Returns:
            List of status blocks in display order
        """
        status_blocks = []
        for block in self.blocks:
            try:
                segments = block.view()
            except Exception as e:
                logger.error(f"Failed to view block {block.id}: {e}", exc_info=True)
                continue
            status_blocks.extend(
                render_segment(block.id, index, segment, self.config)
                for index, segment in enumerate(segments)
            )
        return status_blocks

    def render_line(self) -> str:
        """Render one status line (JSON array of blocks)."""
        return json.dumps([block.to_json() for block in self.get_status_blocks()])

    def emit(self) -> None:
        self.output.write(self.render_line() + ",\n")
        self.output.flush()

    def start_click_listener(self, input_stream: Optional[TextIO] = None) -> threading.Thread:
        """Read click events from ``input_stream`` (default: stdin) in a daemon thread."""
        self.click_thread = threading.Thread(
            target=self._click_event_listener,
            args=(input_stream if input_stream is not None else sys.stdin,),
            daemon=True
        )
        self.click_thread.start()
        return self.click_thread

    def _click_event_listener(self, input_stream: TextIO) -> None:
        """Forward click events to the scheduler thread."""
        logger.info("Click event listener started")
        handle = self.channel.handle()
        for line in input_stream:
            # Skip array start/end markers
            line = line.strip().lstrip(",").rstrip(",")
            if line in ("", "[", "]"):
                continue

            try:
                event = ClickEvent.from_json(json.loads(line))
            except (json.JSONDecodeError, ValueError) as e:
                logger.error(f"Failed to parse click event: {e}")
                continue
            except Exception as e:
                logger.error(f"Error handling click event: {e}", exc_info=True)
                continue

            try:
                handle.deliver_click(event)
            except ScheduleError:
                break
        logger.info("Click event listener stopped")

    def run_once(self) -> None:
        """Update every block once and print a single status line."""
        self.scheduler.schedule_all()
        self.scheduler.do_scheduled_updates()
        self.output.write(self.render_line() + "\n")
        self.output.flush()

    def run(self) -> None:
        """Main event loop: update due blocks, print, wait for the next deadline."""
        self.running = True
        self.header()
        self.scheduler.schedule_all()
        if not self.blocks:
            logger.warning("No blocks configured")

        try:
            while self.running:
                self.scheduler.do_scheduled_updates()
                self.emit()

                self.scheduler.wait_for_messages(self.scheduler.time_to_next_update())

        except KeyboardInterrupt:
            logger.info("Shutting down status generator")
        except Exception as e:
            logger.error(f"Fatal error in main loop: {e}", exc_info=True)
        finally:
            self.stop()
            self.output.write("]\n")  # End infinite array
            self.output.flush()

    def stop(self) -> None:
        self.running = False
        self.channel.close()
