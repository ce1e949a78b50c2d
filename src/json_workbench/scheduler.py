"""Debounced auto-run of the transform while the script is being edited."""

import asyncio
import logging
from typing import Optional
from .history_store import HistoryStore
from .types import WorkbenchError, ErrorType

AUTO_RUN_DELAY = 0.5  # seconds of quiet before an auto-run fires


class AutoRunScheduler:
    """
    Debounces transform runs on script edits.

    Each script change while auto-run is enabled cancels the pending run and
    schedules a new one ``delay`` seconds later on the event loop. At most
    one run is pending at a time. JSON input edits never schedule a run.
    """

    def __init__(self, store: HistoryStore, delay: float = AUTO_RUN_DELAY,
                 loop: Optional[asyncio.AbstractEventLoop] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the scheduler.

        Args:
            store: HistoryStore whose transform is re-run
            delay: Quiet interval in seconds
            loop: Event loop to schedule on (defaults to the running loop)
            logger: Optional logger instance
        """
        self.store = store
        self.delay = delay
        self.loop = loop
        self.logger = logger or logging.getLogger(__name__)
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        """Whether a run is scheduled and has not fired yet."""
        return self._handle is not None

    def script_changed(self, text: str) -> None:
        """Record a script edit and, if auto-run is on, restart the countdown."""
        self.store.set_transform_script(text)
        if self.store.state.auto_run_enabled:
            self.schedule()

    def set_auto_run(self, enabled: bool) -> None:
        """Toggle auto-run; disabling drops any pending run."""
        self.store.set_auto_run(enabled)
        if not enabled:
            self.cancel()

    def schedule(self) -> None:
        """
        Cancel any pending run and schedule a fresh one.

        Needs an event loop: the one passed to the constructor, or else the
        loop running the caller.

        Raises:
            WorkbenchError: If no loop was given and none is running
        """
        self.cancel()
        loop = self.loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise WorkbenchError(
                    "Auto-run needs a running event loop or an explicit loop",
                    ErrorType.NO_EVENT_LOOP
                ) from None
        self._handle = loop.call_later(self.delay, self._fire)
        self.logger.debug(f"Auto-run scheduled in {self.delay}s")

    def cancel(self) -> bool:
        """
        Cancel the pending run.

        Returns:
            True if a run was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self.logger.debug("Pending auto-run cancelled")
        return True

    def _fire(self) -> None:
        self._handle = None
        if not self.store.state.auto_run_enabled:
            return
        self.logger.debug("Auto-run firing")
        self.store.execute_transform()
