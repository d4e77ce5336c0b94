"""
Audio
=====

Synthesized sound effects and background music, driven by game events.

Sounds are generated with numpy oscillators (no asset files) and played
through pygame.mixer. If the mixer cannot be opened the board disables
itself and the game carries on silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, TYPE_CHECKING

import numpy as np

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_game.flappy_core.config_loader import GameConfig, get_config
from flappy_game.flappy_core.events import GameEvent, GameEventType

if TYPE_CHECKING:
    from flappy_game.flappy_core.game import CoreGame

logger = logging.getLogger(__name__)

WAVEFORMS = ("sine", "square", "sawtooth", "triangle")

# Gain ramps exponentially down to this level over a tone's duration
RAMP_FLOOR = 0.01


@dataclass(frozen=True)
class ToneSpec:
    """One oscillator note inside an effect."""
    frequency: float
    duration: float
    waveform: str = "sine"
    volume: float = 0.1
    offset: float = 0.0           # Start time within the effect (seconds)


EFFECTS: Dict[str, Sequence[ToneSpec]] = {
    "jump": (
        ToneSpec(400, 0.1, "sine", 0.3),
    ),
    "score": (
        ToneSpec(600, 0.15, "square", 0.2, 0.0),
        ToneSpec(800, 0.15, "square", 0.2, 0.1),
    ),
    "game_over": (
        ToneSpec(150, 0.3, "sawtooth", 0.4, 0.0),
        ToneSpec(100, 0.5, "sawtooth", 0.35, 0.2),
        ToneSpec(75, 0.3, "triangle", 0.3, 0.6),
    ),
}


def _oscillate(phase: np.ndarray, waveform: str) -> np.ndarray:
    """Evaluate a unit-amplitude waveform at the given cycle phase."""
    if waveform == "sine":
        return np.sin(2 * np.pi * phase)
    if waveform == "square":
        return np.where(np.sin(2 * np.pi * phase) >= 0, 1.0, -1.0)
    saw = 2.0 * (phase - np.floor(phase + 0.5))
    if waveform == "sawtooth":
        return saw
    if waveform == "triangle":
        return 2.0 * np.abs(saw) - 1.0
    raise ValueError(f"Unknown waveform '{waveform}', expected one of {WAVEFORMS}")


def synthesize_tone(
    frequency: float,
    duration: float,
    waveform: str = "sine",
    volume: float = 0.1,
    sample_rate: int = 44100
) -> np.ndarray:
    """
    Render one oscillator note with an exponential decay envelope.

    Args:
        frequency: Pitch in Hz.
        duration: Length in seconds.
        waveform: One of "sine", "square", "sawtooth", "triangle".
        volume: Starting gain.
        sample_rate: Samples per second.

    Returns:
        (N,) float32 array in [-1, 1].
    """
    n = max(0, int(round(duration * sample_rate)))
    if n == 0 or volume <= 0:
        return np.zeros(n, dtype=np.float32)

    t = np.arange(n, dtype=np.float64) / sample_rate
    wave = _oscillate(frequency * t, waveform)

    floor = min(RAMP_FLOOR, volume)
    gain = volume * (floor / volume) ** (t / duration)

    return np.clip(wave * gain, -1.0, 1.0).astype(np.float32)


def compose(tones: Sequence[ToneSpec], sample_rate: int = 44100, gain: float = 1.0) -> np.ndarray:
    """
    Mix several tones, each starting at its own offset.

    Returns:
        (N,) float32 array in [-1, 1].
    """
    if not tones:
        return np.zeros(0, dtype=np.float32)

    total = max(int(round((t.offset + t.duration) * sample_rate)) for t in tones)
    mix = np.zeros(total, dtype=np.float32)
    for tone in tones:
        samples = synthesize_tone(
            tone.frequency, tone.duration, tone.waveform, tone.volume * gain, sample_rate
        )
        start = int(round(tone.offset * sample_rate))
        end = min(total, start + len(samples))
        mix[start:end] += samples[:end - start]

    return np.clip(mix, -1.0, 1.0)


def synthesize_music_loop(sample_rate: int = 44100, tempo: int = 120) -> np.ndarray:
    """
    Build a short looping chord progression (C, Am, Dm, G) with a melody.

    Returns:
        (N,) float32 array in [-1, 1].
    """
    seconds_per_subbeat = 60.0 / tempo / 2
    samples_per_subbeat = max(1, int(sample_rate * seconds_per_subbeat))

    chords = [
        ([60, 64, 67], 8),  # C major
        ([57, 60, 64], 8),  # A minor
        ([62, 65, 69], 8),  # D minor
        ([55, 59, 62], 8),  # G major
    ]
    melody = [60, 62, 64, 65, 67, 69, 71, 72]

    def midi_to_freq(note: int) -> float:
        return 440.0 * 2 ** ((note - 69) / 12)

    blocks = []
    step = 0
    for chord_notes, subbeats in chords:
        for _ in range(subbeats):
            start = step * samples_per_subbeat
            t = (start + np.arange(samples_per_subbeat)) / sample_rate
            chord = sum(np.sin(2 * np.pi * midi_to_freq(n) * t) for n in chord_notes)
            lead = np.sin(2 * np.pi * midi_to_freq(melody[step % len(melody)]) * t)
            blocks.append(0.18 * chord + 0.12 * lead)
            step += 1

    return np.clip(np.concatenate(blocks), -1.0, 1.0).astype(np.float32)


def to_pcm16(samples: np.ndarray, channels: int = 2) -> np.ndarray:
    """Convert float samples to contiguous int16 PCM with the given channel count."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    if channels > 1:
        pcm = np.repeat(pcm[:, None], channels, axis=1)
    return np.ascontiguousarray(pcm)


class SoundBoard:
    """
    Plays effects and background music in response to game events.

    - START: start music (unless muted by the player)
    - JUMP / SCORE / GAME_OVER: play the matching effect
    - GAME_OVER / RESET: stop music
    """

    def __init__(self, config: Optional[GameConfig] = None, enabled: Optional[bool] = None):
        """
        Initialize sound board. The mixer is opened lazily on first use.

        Args:
            config: Game configuration. Uses default if None.
            enabled: Override config.audio.enabled.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._enabled = config.audio.enabled if enabled is None else enabled
        self._sample_rate = config.audio.sample_rate
        self._effects_volume = config.audio.effects_volume
        self._music_volume = config.audio.music_volume

        self._ready = False
        self._failed = False
        self._sounds: Dict[str, "pygame.mixer.Sound"] = {}
        self._music: Optional["pygame.mixer.Sound"] = None
        self._music_channel: Optional["pygame.mixer.Channel"] = None
        self._music_wanted = True
        self._game: Optional["CoreGame"] = None

    @property
    def available(self) -> bool:
        """True once the mixer is open and sounds are loaded."""
        return self._ready

    @property
    def music_enabled(self) -> bool:
        """True unless the player muted the music."""
        return self._music_wanted

    @property
    def music_playing(self) -> bool:
        return self._music_channel is not None and self._music_channel.get_busy()

    def _disable(self, error: Exception) -> None:
        logger.warning("Audio unavailable, continuing without sound: %s", error)
        self._failed = True
        self._ready = False
        self._sounds.clear()
        self._music = None
        self._music_channel = None

    def _ensure_ready(self) -> bool:
        """Open the mixer and build sounds on first use."""
        if self._ready:
            return True
        if not self._enabled or self._failed:
            return False
        if not PYGAME_AVAILABLE:
            self._disable(ImportError("pygame is not installed"))
            return False

        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=self._sample_rate, size=-16, channels=2)
            frequency, _, channels = pygame.mixer.get_init()

            for name, tones in EFFECTS.items():
                samples = compose(tones, frequency, gain=self._effects_volume)
                self._sounds[name] = pygame.sndarray.make_sound(to_pcm16(samples, channels))

            music = synthesize_music_loop(frequency)
            self._music = pygame.sndarray.make_sound(to_pcm16(music, channels))
            self._music.set_volume(self._music_volume)
        except (pygame.error, TypeError, ValueError) as e:
            self._disable(e)
            return False

        self._ready = True
        logger.debug("Audio ready: %d effects at %d Hz", len(self._sounds), frequency)
        return True

    def play(self, name: str) -> bool:
        """
        Play a named effect.

        Returns:
            True if the sound was started.
        """
        if not self._ensure_ready():
            return False
        sound = self._sounds.get(name)
        if sound is None:
            logger.debug("No effect named %r", name)
            return False
        try:
            sound.play()
        except pygame.error as e:
            self._disable(e)
            return False
        return True

    def start_music(self) -> bool:
        """Loop the background track if the player has not muted it."""
        if not self._music_wanted or not self._ensure_ready():
            return False
        if self.music_playing:
            return True
        try:
            self._music_channel = self._music.play(loops=-1)
        except pygame.error as e:
            self._disable(e)
            return False
        return self._music_channel is not None

    def stop_music(self) -> None:
        if self._music is not None:
            self._music.stop()
        self._music_channel = None

    def toggle_music(self) -> bool:
        """
        Mute or unmute the background track.

        Returns:
            The new music_enabled state.
        """
        self._music_wanted = not self._music_wanted
        if not self._music_wanted:
            self.stop_music()
        elif self._game is not None and self._game.is_running:
            self.start_music()
        return self._music_wanted

    def handle_event(self, event: GameEvent) -> None:
        """Event listener entry point."""
        if event.type is GameEventType.START:
            self.start_music()
        elif event.type is GameEventType.JUMP:
            self.play("jump")
        elif event.type is GameEventType.SCORE:
            self.play("score")
        elif event.type is GameEventType.GAME_OVER:
            self.stop_music()
            self.play("game_over")
        elif event.type is GameEventType.RESET:
            self.stop_music()

    def attach(self, game: "CoreGame") -> None:
        """Subscribe to a game's events."""
        self.detach()
        self._game = game
        game.subscribe(self.handle_event)

    def detach(self) -> None:
        if self._game is not None:
            self._game.unsubscribe(self.handle_event)
            self._game = None

    def close(self) -> None:
        """Stop all sound and release the mixer."""
        self.detach()
        self.stop_music()
        self._sounds.clear()
        self._music = None
        if self._ready and PYGAME_AVAILABLE and pygame.mixer.get_init():
            pygame.mixer.quit()
        self._ready = False
