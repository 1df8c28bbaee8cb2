"""
Message Window Manager - Buffers chat messages into time windows.

Messages are bucketed per chat into fixed-duration windows. A recurring
sweep marks windows ready and hands each one to a single registered
processor.

Readiness:
1. Time is up (now >= end_time) AND the window holds min_messages, OR
2. The window holds max_messages, regardless of elapsed time.

A window that never meets either condition stays collecting until the
cleanup pass drops it as stale.

CONCURRENCY: all window mutations happen on the event loop that runs the
sweep. The manager is not safe to share across threads.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.clock import ClockFactory, ClockProtocol

from .config import WindowConfig
from .models import MessageEntry, MessageInput, MessageWindow, WindowStatus


logger = logging.getLogger(__name__)


WindowProcessor = Callable[[MessageWindow], Awaitable[None]]

OVERFLOW_SUFFIX = "_overflow"


class MessageWindowManager:
    """
    Collects messages into per-chat windows and dispatches ready ones.

    Usage:
        manager = MessageWindowManager()
        await manager.start_processing(handle_window)
        manager.add_message(MessageInput(text="gm", user_id="u1", chat_id="c1"))
        ...
        await manager.stop_processing()
    """

    def __init__(
        self,
        config: Optional[WindowConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self._config = config or WindowConfig()
        self._clock = clock or ClockFactory.get_clock()
        self._windows: dict[str, MessageWindow] = {}

        self._processor: Optional[WindowProcessor] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None

        self._stats = {
            "messages_added": 0,
            "windows_created": 0,
            "overflow_windows": 0,
            "windows_processed": 0,
            "processing_errors": 0,
            "windows_cleaned": 0,
        }

    @property
    def config(self) -> WindowConfig:
        return self._config

    @property
    def is_processing(self) -> bool:
        return self._running

    @property
    def active_window_count(self) -> int:
        return len(self._windows)

    # ─────────────────────────────────────────────────────────────
    # Window bookkeeping
    # ─────────────────────────────────────────────────────────────

    def window_id(self, chat_id: str, timestamp_ms: int) -> str:
        """Deterministic bucket id: chat id plus the bucket start boundary."""
        size = self._config.window_size_ms
        bucket_start = timestamp_ms - (timestamp_ms % size)
        return f"{chat_id}_{bucket_start}"

    def get_window(self, window_id: str) -> Optional[MessageWindow]:
        return self._windows.get(window_id)

    def add_message(self, message: MessageInput) -> MessageWindow:
        """
        Append a message to the collecting window for (chat, now).

        If the bucket's window is already processing or completed, the
        message goes to an overflow window instead so it is never dropped.
        """
        now = self._clock.now_ms()
        entry = MessageEntry(
            text=message.text,
            user_id=message.user_id,
            timestamp=message.timestamp if message.timestamp is not None else now,
            platform_metadata=message.platform_metadata,
        )
        self._stats["messages_added"] += 1

        window_id = self.window_id(message.chat_id, now)
        window = self._windows.get(window_id)

        if window is None:
            window = self._create_window(window_id, message.chat_id, now)
            logger.debug(f"Created new message window {window_id}")
        elif not window.is_collecting:
            # Walk the overflow chain until a collecting (or free) slot is found
            overflow_id = window_id
            while window is not None and not window.is_collecting:
                overflow_id = f"{overflow_id}{OVERFLOW_SUFFIX}"
                window = self._windows.get(overflow_id)
            if window is None:
                window = self._create_window(overflow_id, message.chat_id, now)
                self._stats["overflow_windows"] += 1
                logger.debug(f"Created overflow window {overflow_id}")

        window.messages.append(entry)
        logger.debug(
            f"Added message to window {window.window_id} "
            f"(count={window.message_count})"
        )
        return window

    def _create_window(self, window_id: str, chat_id: str, now: int) -> MessageWindow:
        window = MessageWindow(
            window_id=window_id,
            chat_id=chat_id,
            start_time=now,
            end_time=now + self._config.window_size_ms,
        )
        self._windows[window_id] = window
        self._stats["windows_created"] += 1
        return window

    def get_ready_windows(self) -> list[MessageWindow]:
        """
        Mark every ready collecting window as processing and return them.

        Each window is returned at most once over its lifetime.
        """
        now = self._clock.now_ms()
        ready: list[MessageWindow] = []

        for window in self._windows.values():
            if window.status != WindowStatus.COLLECTING:
                continue

            is_time_up = now >= window.end_time
            has_min = window.message_count >= self._config.min_messages
            has_max = window.message_count >= self._config.max_messages

            if (is_time_up and has_min) or has_max:
                window.status = WindowStatus.PROCESSING
                ready.append(window)
                logger.debug(
                    f"Window {window.window_id} ready: count={window.message_count} "
                    f"time_up={is_time_up} max_reached={has_max}"
                )

        return ready

    def mark_window_complete(self, window_id: str) -> None:
        """Transition a processing window to completed."""
        window = self._windows.get(window_id)
        if window is None:
            return
        if window.status != WindowStatus.PROCESSING:
            logger.warning(
                f"Ignoring completion of window {window_id} in state {window.status.value}"
            )
            return
        window.status = WindowStatus.COMPLETED
        logger.debug(f"Window {window_id} marked as completed")

    def cleanup(self) -> int:
        """
        Drop completed windows and windows older than twice the window size.

        Returns:
            Number of windows removed
        """
        now = self._clock.now_ms()
        max_age = self._config.window_size_ms * 2

        stale = [
            window_id
            for window_id, window in self._windows.items()
            if window.status == WindowStatus.COMPLETED or now - window.start_time > max_age
        ]
        for window_id in stale:
            del self._windows[window_id]
            logger.debug(f"Cleaned up message window {window_id}")

        self._stats["windows_cleaned"] += len(stale)
        return len(stale)

    # ─────────────────────────────────────────────────────────────
    # Processing loop
    # ─────────────────────────────────────────────────────────────

    async def start_processing(self, processor: WindowProcessor) -> None:
        """
        Register the window processor and start the sweep loop.

        Only one processor may be active; a second call is ignored.
        """
        if self._running:
            logger.warning("Processing loop already started")
            return

        self._processor = processor
        self._running = True
        self._task = asyncio.create_task(self._processing_loop())
        logger.info(
            f"Started message window processing loop "
            f"(interval={self._config.processing_interval_ms}ms)"
        )

    async def stop_processing(self) -> None:
        """Stop the sweep loop and unregister the processor."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._processor = None
        logger.info("Stopped message window processing loop")

    async def _processing_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._config.processing_interval_seconds)
            try:
                await self.process_ready_windows()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Window sweep error: {e}")

    async def process_ready_windows(self) -> int:
        """
        Run one sweep: dispatch ready windows in order, then clean up.

        A failing processor is logged and the window stays processing;
        other windows in the sweep are still dispatched.

        Returns:
            Number of windows processed successfully
        """
        if self._processor is None:
            return 0

        processed = 0
        for window in self.get_ready_windows():
            try:
                await self._processor(window)
            except Exception as e:
                self._stats["processing_errors"] += 1
                logger.error(f"Error processing window {window.window_id}: {e}")
                continue
            self.mark_window_complete(window.window_id)
            self._stats["windows_processed"] += 1
            processed += 1

        self.cleanup()
        return processed

    def get_stats(self) -> dict[str, int]:
        return {**self._stats, "active_windows": len(self._windows)}
