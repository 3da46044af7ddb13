"""Ordered track queue for one playback lane."""

import logging
import threading
from collections import deque
from pathlib import Path
from queue import Empty, Queue
from typing import Optional

import numpy as np
import numpy.typing as npt

from padplayer.audio import TrackLoader, TrackSource
from padplayer.exceptions import TrackLoadError

logger = logging.getLogger(__name__)

_REPLACE = "replace"
_APPEND = "append"
_SKIP = "skip"


def clamp_volume(volume: float) -> float:
    """Clamp a volume to [0.0, 1.0]."""
    return max(0.0, min(1.0, volume))


class PlaybackQueue:
    """
    Queue of tracks with the currently playing track at the head.

    Control-thread API: ``replace_and_play``, ``enqueue``, ``skip`` and
    ``volume``. Queued tracks wait as paths; at most one of them is decoded
    ahead of the track that is playing, so memory holds the current track
    plus the next one whatever the folder size. Decoded tracks are handed to
    the render thread through a command queue that is drained at the start
    of every pull, the same way pad triggers reach the audio callback.

    When the render thread moves on to the decoded track, it posts a refill
    request and the lane's loader thread (``start``/``stop``) decodes the
    following path. The render thread never does I/O and never waits on the
    other threads.

    Render-thread API: the queue is itself an endless sample source
    (``read``/``next_sample``), producing silence when nothing is playing.
    """

    def __init__(
        self,
        loader: TrackLoader,
        num_channels: int = 2,
        sample_rate: int = 44100,
        name: str = "music",
    ):
        """
        Initialize playback queue.

        Args:
            loader: Loader that decodes tracks to the output format
            num_channels: Output channel count
            sample_rate: Output sample rate in Hz
            name: Lane name for logging
        """
        self.name = name
        self._loader = loader
        self._num_channels = num_channels
        self._sample_rate = sample_rate
        self._volume = 1.0

        self._commands: Queue[tuple[str, int, Optional[TrackSource]]] = Queue()
        self._refills: Queue[Optional[int]] = Queue()
        self._thread: Optional[threading.Thread] = None

        # Control and loader state, guarded by _lock. A replace bumps the
        # generation so decodes started for the old playlist are dropped.
        self._lock = threading.Lock()
        self._playlist: deque[Path] = deque()
        self._generation = 0
        self._buffered = False  # a decoded track is on its way to the render thread

        # Render-thread state
        self._render_generation = 0
        self._current: Optional[TrackSource] = None
        self._next: Optional[TrackSource] = None

    # =================================================================
    # Loader thread
    # =================================================================

    def start(self) -> None:
        """Start the loader thread that decodes queued tracks ahead of need."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run_loader, name=f"{self.name}-loader", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loader thread; a decode in progress is allowed to finish."""
        if self._thread is None:
            return
        self._refills.put(None)
        self._thread.join(timeout)
        self._thread = None

    def _run_loader(self) -> None:
        while True:
            generation = self._refills.get()
            if generation is None:
                return
            try:
                self._handle_refill(generation)
            except Exception as e:
                logger.exception(f"[{self.name}] Loader error: {e}")

    def _handle_refill(self, generation: int) -> None:
        """The render thread started the buffered track; decode the one after it."""
        with self._lock:
            if generation != self._generation:
                return
            self._buffered = False
        self.prefetch()

    def prefetch(self) -> bool:
        """
        Decode the first waiting track unless one is already buffered.

        Unreadable tracks are logged and skipped in favour of the next path.

        Returns:
            True if a decoded track was handed to the render thread
        """
        while True:
            with self._lock:
                if self._buffered or not self._playlist:
                    return False
                track = self._playlist.popleft()
                generation = self._generation
                self._buffered = True

            try:
                source = TrackSource(self._loader.load(track))
            except TrackLoadError as e:
                logger.error(f"[{self.name}] Skipping track: {e.technical_message}")
                with self._lock:
                    if generation == self._generation:
                        self._buffered = False
                continue

            with self._lock:
                if generation != self._generation:
                    return False
                self._commands.put_nowait((_APPEND, generation, source))
            logger.debug(f"[{self.name}] Buffered {source.name}")
            return True

    # =================================================================
    # Control thread
    # =================================================================

    def replace_and_play(self, track: Path) -> None:
        """
        Drop everything queued or playing and start ``track``.

        Raises:
            TrackLoadError: If the track cannot be decoded
        """
        source = TrackSource(self._loader.load(track))
        with self._lock:
            self._generation += 1
            self._playlist.clear()
            self._buffered = False
            self._commands.put_nowait((_REPLACE, self._generation, source))
        logger.info(f"[{self.name}] Playing {source.name}")

    def enqueue(self, track: Path) -> None:
        """
        Append ``track`` without interrupting current playback.

        Only the first track waiting behind the current one is decoded here;
        later ones are decoded by the loader thread as playback reaches them.
        """
        with self._lock:
            self._playlist.append(track)
        logger.debug(f"[{self.name}] Queued {track.name}")
        self.prefetch()

    def skip(self) -> None:
        """Advance to the next queued track; no-op if nothing is playing."""
        self._commands.put_nowait((_SKIP, 0, None))
        logger.debug(f"[{self.name}] Skip requested")

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = clamp_volume(value)

    def change_volume(self, delta: float) -> float:
        """Add ``delta`` to the volume (clamped) and return the new value."""
        self.volume = self._volume + delta
        return self._volume

    @property
    def now_playing(self) -> Optional[str]:
        """Name of the track at the head of the queue, if any."""
        current = self._current
        return current.name if current else None

    @property
    def queued(self) -> list[str]:
        """Names of tracks waiting behind the current one."""
        upcoming = self._next
        with self._lock:
            waiting = [track.name for track in self._playlist]
        return ([upcoming.name] if upcoming else []) + waiting

    # =================================================================
    # Render thread
    # =================================================================

    def _drain_commands(self) -> None:
        while True:
            try:
                action, generation, source = self._commands.get_nowait()
            except Empty:
                return

            if action == _REPLACE:
                self._render_generation = generation
                self._current = source
                self._next = None
            elif action == _APPEND:
                if generation != self._render_generation:
                    continue
                if self._current is None:
                    self._current = source
                    self._refills.put_nowait(generation)
                else:
                    self._next = source
            elif action == _SKIP:
                if self._current is not None:
                    self._advance()

    def _advance(self) -> None:
        self._current = self._next
        self._next = None
        if self._current is not None:
            self._refills.put_nowait(self._render_generation)

    @property
    def channels(self) -> int:
        return self._num_channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def total_duration(self) -> Optional[float]:
        return None

    @property
    def current_span_len(self) -> Optional[int]:
        current = self._current
        return current.current_span_len if current else None

    def next_sample(self) -> float:
        """Next interleaved sample at the current volume (silence when idle)."""
        self._drain_commands()
        while self._current is not None:
            sample = self._current.next_sample()
            if sample is not None:
                return sample * self._volume
            self._advance()
        return 0.0

    def read(self, frames: int) -> npt.NDArray[np.float32]:
        """
        Render exactly ``frames`` frames, moving on to the next track when
        the current one ends.

        Returns:
            Block of shape (frames, channels) at the current volume
        """
        self._drain_commands()

        output = np.zeros((frames, self._num_channels), dtype=np.float32)
        filled = 0
        while filled < frames and self._current is not None:
            block = self._current.read(frames - filled)
            if block is None:
                self._advance()
                continue
            output[filled:filled + len(block)] = block
            filled += len(block)

        volume = self._volume
        if volume != 1.0:
            output *= volume
        return output
