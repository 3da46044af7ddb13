"""The control thread: controller events are handled one at a time, in order."""

import logging
import threading
from queue import Queue
from typing import Optional

from padplayer.devices.protocols import ControllerEvent
from padplayer.exceptions import FilterDesignError

from .control import ControlStateMachine

logger = logging.getLogger(__name__)

_STOP = object()


class ControlDispatcher:
    """
    Serialize controller events onto a single worker thread.

    ``submit`` is safe to call from any thread (typically mido's I/O
    thread). Events are never dropped, reordered or coalesced.
    """

    def __init__(self, machine: ControlStateMachine):
        self._machine = machine
        self._events: Queue = Queue()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self.error: Optional[BaseException] = None

    def submit(self, event: ControllerEvent) -> None:
        """Queue an event for the control thread."""
        self._events.put(event)

    def start(self) -> None:
        if self._running:
            logger.warning("ControlDispatcher is already running")
            return

        self._running = True
        self.error = None
        self._thread = threading.Thread(target=self._run, name="control", daemon=True)
        self._thread.start()
        logger.debug("ControlDispatcher started")

    def stop(self, timeout: float = 1.0) -> None:
        """Stop after the events already queued have been handled."""
        if not self._running:
            return

        self._events.put(_STOP)
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._running = False
        logger.debug("ControlDispatcher stopped")

    def _run(self) -> None:
        while True:
            event = self._events.get()
            if event is _STOP:
                return
            try:
                self.dispatch(event)
            except FilterDesignError as e:
                self.error = e
                self._running = False
                return

    def dispatch(self, event: ControllerEvent) -> None:
        """
        Handle one event on the calling thread.

        Raises:
            FilterDesignError: Filter invariant violated; the control loop must stop
        """
        try:
            self._machine.handle(event)
        except FilterDesignError as e:
            logger.critical(f"Filter invariant violated, stopping control loop: {e.technical_message}")
            raise
        except Exception:
            logger.exception(f"Error handling {event}")

    @property
    def is_running(self) -> bool:
        return self._running
