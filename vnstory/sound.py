"""Background music and sound effect playback with fades."""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable, Mapping
from typing import Any

log = logging.getLogger(__name__)


class AudioChannel:
    """One playing sound spawned by an :class:`AudioBackend`."""

    def __init__(self, sound: Any, backend: AudioBackend) -> None:
        self.sound = sound
        self.volume = 1.0
        self.fade_duration = 0.0
        self._playing = True
        self._backend = backend

    @property
    def is_playing(self) -> bool:
        return self._playing

    def stop(self) -> None:
        self._playing = False

    def fade_in(self, duration: float, volume: float) -> None:
        """Raise the channel to ``volume`` over ``duration`` seconds."""
        self.fade_duration = duration
        self.volume = volume

    def fade_out(self, duration: float, volume: float) -> None:
        """Lower the channel to ``volume``; at zero it stops once the fade ends."""
        self.fade_duration = duration
        self.volume = volume
        if volume <= 0:
            self._backend.set_timer(duration, self.stop)


class AudioBackend:
    """A headless audio backend with a manual clock.

    ``assets`` maps sound references to loaded sounds; without it every
    reference loads as itself. Timers fire when :meth:`advance` moves the
    clock past their due time.
    """

    def __init__(self, assets: Mapping[Any, Any] | None = None) -> None:
        self.assets = assets
        self.channels: list[AudioChannel] = []
        self.time = 0.0
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._cancelled: set[int] = set()
        self._ids = itertools.count(1)

    def load(self, sound: Any, callback: Callable[[Any], None]) -> None:
        """Resolve ``sound`` and hand the result (None if unknown) to ``callback``."""
        loaded = sound if self.assets is None else self.assets.get(sound)
        callback(loaded)

    def spawn(self, sound: Any) -> AudioChannel:
        channel = AudioChannel(sound, self)
        self.channels.append(channel)
        return channel

    def set_timer(self, delay: float, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        heapq.heappush(self._timers, (self.time + delay, handle, callback))
        return handle

    def clear_timer(self, handle: int) -> None:
        self._cancelled.add(handle)

    def advance(self, seconds: float) -> None:
        """Move the clock forward and run every timer that has come due."""
        self.time += seconds
        while self._timers and self._timers[0][0] <= self.time:
            _, handle, callback = heapq.heappop(self._timers)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()


class SoundManager:
    """Plays one sound effect and one cross-faded music track at a time."""

    def __init__(
        self,
        backend: AudioBackend | None = None,
        fade_in_time: float = 1.5,
        fade_out_time: float = 1.5,
    ) -> None:
        self.backend = backend if backend is not None else AudioBackend()
        self.fade_in_time = fade_in_time
        self.fade_out_time = fade_out_time
        self.bgm_channel: AudioChannel | None = None
        self.sfx_channel: AudioChannel | None = None
        self._bgm_timer: int | None = None

    def play_sfx(self, sound: Any) -> None:
        """Play a sound effect, cutting off the one still playing."""
        if not sound:
            log.warning("Sound effect asset is empty")
            return

        def on_loaded(loaded: Any) -> None:
            if loaded is None:
                log.error("Failed to play sound effect: asset %r did not load", sound)
                return
            if self.sfx_channel is not None and self.sfx_channel.is_playing:
                self.sfx_channel.stop()
                self.sfx_channel = None
            self.sfx_channel = self.backend.spawn(loaded)

        self.backend.load(sound, on_loaded)

    def play_bgm(self, sound: Any) -> None:
        """Fade out the current music and fade ``sound`` in once that is done."""
        if not sound:
            log.warning("Background music asset is empty")
            return
        self.stop_bgm()

        def on_loaded(loaded: Any) -> None:
            if loaded is None:
                log.error("Failed to play background music: asset %r did not load", sound)
                return
            if self._bgm_timer is not None:
                self.backend.clear_timer(self._bgm_timer)

            def start() -> None:
                self._bgm_timer = None
                self.bgm_channel = self.backend.spawn(loaded)
                self.bgm_channel.fade_in(self.fade_in_time, 1.0)

            self._bgm_timer = self.backend.set_timer(self.fade_out_time, start)

        self.backend.load(sound, on_loaded)

    def stop_bgm(self) -> None:
        self._fade_out(self.bgm_channel)

    def stop_sfx(self) -> None:
        self._fade_out(self.sfx_channel)

    def _fade_out(self, channel: AudioChannel | None) -> None:
        if channel is not None and channel.is_playing:
            channel.fade_out(self.fade_out_time, 0.0)