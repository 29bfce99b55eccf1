"""
Audio engine for the roulette click.

Owns the pygame mixer and the pre-rendered click Sound. Playback is
fire-and-forget on a pool of mixer channels, so rapid clicks overlap
instead of cutting each other off. If the audio device cannot be opened
the engine stays silent for the rest of the session.
"""

import logging
import random
from typing import Callable, Optional

import pygame

from squad_roulette.audio.synth import synthesize_click, to_pcm16
from squad_roulette.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
MIXER_CHANNELS = 16


class AudioEngine:
    """Plays the row click."""

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        click_duration_ms: int = 20,
        rng: Optional[random.Random] = None,
    ):
        self._sample_rate = sample_rate
        self._click_duration_ms = click_duration_ms
        self._rng = rng
        self._initialized = False
        self._failed = False
        self._click: Optional[pygame.mixer.Sound] = None
        self._muted = False
        self._unsubscribe: Optional[Callable[[], None]] = None

        # Rendered up front so the first click costs nothing
        self.click_samples = synthesize_click(sample_rate, click_duration_ms, rng)

    @property
    def is_available(self) -> bool:
        """Check if clicks will actually be heard."""
        return self._initialized and self._click is not None

    def init(self) -> bool:
        """Open the audio device and load the click.

        Returns:
            True if audio is available. A failure is logged once and the
            engine stays silent; later calls do not retry.
        """
        if self._initialized:
            return True
        if self._failed:
            return False

        try:
            pygame.mixer.pre_init(self._sample_rate, -16, 2, 512)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(MIXER_CHANNELS)

            frequency, _, channels = pygame.mixer.get_init()
            if frequency != self._sample_rate:
                # Mixer was opened elsewhere first; render the click at its rate
                logger.warning(f"Mixer runs at {frequency} Hz, not {self._sample_rate} Hz")
                self._sample_rate = frequency
                self.click_samples = synthesize_click(frequency, self._click_duration_ms, self._rng)

            pcm = to_pcm16(self.click_samples, channels)
            self._click = pygame.mixer.Sound(buffer=pcm.tobytes())

            self._initialized = True
            logger.info(f"Audio engine initialized ({frequency} Hz, {channels} channels)")
            return True
        except pygame.error as e:
            self._failed = True
            logger.error(f"Failed to initialize audio, clicks disabled: {e}")
            return False

    def attach(self, event_bus: EventBus) -> None:
        """Play a click for every ROW_CLICK event on the bus."""
        self.detach()
        self._unsubscribe = event_bus.subscribe(EventType.ROW_CLICK, self._on_row_click)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_row_click(self, event: Event) -> None:
        self.play_click()

    def play_click(self) -> Optional[pygame.mixer.Channel]:
        """Play the click on a free channel. No-op when silent or muted."""
        if not self.is_available or self._muted:
            return None
        # Returns None when every channel is busy; the click is simply dropped
        return self._click.play()

    def toggle_mute(self) -> bool:
        """Toggle mute state. Returns the new state."""
        self._muted = not self._muted
        logger.info(f"Audio {'muted' if self._muted else 'unmuted'}")
        return self._muted

    def cleanup(self) -> None:
        """Release the mixer."""
        self.detach()
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
            self._click = None
            logger.info("Audio engine cleaned up")
