"""
Top-level Padplayer application.

Wires the controller, the control thread and the player together::

    ApcController ──► ControlDispatcher ──► ControlStateMachine ──► Player
         ▲                                          │
         └──────────────── LED commands ────────────┘
"""

import logging
from typing import Callable, Optional

from padplayer.core import ControlDispatcher, ControlStateMachine, Player, SessionState
from padplayer.devices import ApcController
from padplayer.models import AppConfig

logger = logging.getLogger(__name__)


class PadPlayerApp:
    """
    Owns every long-lived component of a session.

    ``start`` brings up audio first, then the control thread, then the
    controller, so no event can reach a half-initialized player.
    """

    def __init__(
        self,
        config: AppConfig,
        player: Optional[Player] = None,
        controller: Optional[ApcController] = None,
    ):
        """
        Initialize the application.

        Args:
            config: Application configuration
            player: Audio player (created from config if None)
            controller: MIDI controller (created from config if None)
        """
        self.config = config
        self.player = player or Player(config)
        self.controller = controller or ApcController(
            port_filter=config.midi_port_filter,
            poll_interval=config.midi_poll_interval,
        )

        self.session = SessionState(music_folder=config.music_folder)
        self.machine = ControlStateMachine(
            session=self.session,
            music=self.player.music,
            effects=self.player.effects,
            filter_engine=self.player.filter,
            leds=self.controller,
            volume_step=config.volume_step,
            filter_step=config.filter_step,
        )
        self.dispatcher = ControlDispatcher(self.machine)
        self.controller.on_event(self.dispatcher.submit)

        self._started = False

    def start(self) -> None:
        """
        Start audio output, the control thread and controller monitoring.

        Raises:
            AudioDeviceError: If the audio output cannot be opened
        """
        if self._started:
            return

        if not self.config.music_folder.is_dir():
            logger.warning(f"Music folder does not exist: {self.config.music_folder}")

        self.player.start()
        self.dispatcher.start()
        self.controller.start()
        self._started = True
        logger.info(f"Padplayer started (music folder: {self.config.music_folder})")

    def stop(self) -> None:
        """Stop everything, controller first so no new events arrive."""
        if not self._started:
            return

        logger.info("Shutting down Padplayer")
        self.controller.stop()
        self.dispatcher.stop()
        self.player.stop()
        self._started = False

    def run(self, wait: Callable[[str], object] = input) -> None:
        """
        Run until ``wait`` returns (by default, until Enter is pressed).

        Raises:
            FilterDesignError: If the control loop died on a filter invariant violation
        """
        self.start()
        try:
            wait("Press Enter to quit\n")
        finally:
            self.stop()

        if self.dispatcher.error is not None:
            raise self.dispatcher.error

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
