"""
Tests for sound synthesis and the event-driven sound board.
"""

import logging

import numpy as np
import pytest

from flappy_game.flappy_core import audio
from flappy_game.flappy_core.audio import (
    EFFECTS,
    SoundBoard,
    ToneSpec,
    compose,
    synthesize_music_loop,
    synthesize_tone,
    to_pcm16,
)
from flappy_game.flappy_core.config_loader import load_config
from flappy_game.flappy_core.events import GameEvent, GameEventType
from flappy_game.flappy_core.game import CoreGame


@pytest.fixture
def config():
    return load_config()


class TestSynthesis:
    """Test the numpy oscillators."""

    @pytest.mark.parametrize("waveform", ["sine", "square", "sawtooth", "triangle"])
    def test_tone_length_and_range(self, waveform):
        samples = synthesize_tone(400, 0.1, waveform, volume=0.3, sample_rate=44100)
        assert samples.shape == (4410,)
        assert samples.dtype == np.float32
        assert np.max(np.abs(samples)) <= 0.3 + 1e-6
        assert np.any(samples != 0)

    def test_tone_decays(self):
        """Gain ramps down over the tone."""
        samples = synthesize_tone(400, 0.2, "square", volume=0.5, sample_rate=8000)
        head = np.max(np.abs(samples[:200]))
        tail = np.max(np.abs(samples[-200:]))
        assert tail < head / 10

    def test_silent_tone(self):
        samples = synthesize_tone(400, 0.1, volume=0.0, sample_rate=1000)
        assert samples.shape == (100,)
        assert not samples.any()

    def test_unknown_waveform(self):
        with pytest.raises(ValueError):
            synthesize_tone(400, 0.1, "noise")

    def test_compose_uses_offsets(self):
        """Mix length covers the latest-ending tone."""
        mix = compose(EFFECTS["score"], sample_rate=1000)
        assert mix.shape == (250,)
        assert np.max(np.abs(mix)) <= 1.0

    def test_compose_gain(self):
        tones = [ToneSpec(400, 0.1, "sine", 0.3)]
        loud = compose(tones, sample_rate=8000)
        quiet = compose(tones, sample_rate=8000, gain=0.5)
        assert np.max(np.abs(quiet)) < np.max(np.abs(loud))

    def test_compose_empty(self):
        assert compose([], sample_rate=1000).shape == (0,)

    def test_effects_defined(self):
        assert set(EFFECTS) == {"jump", "score", "game_over"}

    def test_music_loop(self):
        music = synthesize_music_loop(sample_rate=8000, tempo=120)
        # 32 half-beats of 0.25 s
        assert music.shape == (32 * 2000,)
        assert np.max(np.abs(music)) <= 1.0

    def test_pcm16(self):
        pcm = to_pcm16(np.array([0.0, 1.0, -1.0, 2.0], dtype=np.float32), channels=2)
        assert pcm.shape == (4, 2)
        assert pcm.dtype == np.int16
        assert pcm.flags["C_CONTIGUOUS"]
        assert pcm[1, 0] == 32767
        assert pcm[3, 1] == 32767
        assert pcm[2, 0] == -32767

    def test_pcm16_mono(self):
        pcm = to_pcm16(np.zeros(10, dtype=np.float32), channels=1)
        assert pcm.shape == (10,)


class TestSoundBoard:
    """Test the sound board's event handling and degradation."""

    def test_disabled_board_is_silent(self, config):
        board = SoundBoard(config, enabled=False)
        assert not board.play("jump")
        assert not board.start_music()
        assert not board.available

    def test_mixer_failure_degrades_to_silence(self, config, monkeypatch, caplog):
        """If the mixer cannot open, the game carries on without sound."""
        pygame = pytest.importorskip("pygame")
        calls = []

        def broken_init(*args, **kwargs):
            calls.append(1)
            raise pygame.error("no audio device")

        monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
        monkeypatch.setattr(pygame.mixer, "init", broken_init)

        board = SoundBoard(config, enabled=True)
        game = CoreGame(config=config, seed=1)
        board.attach(game)

        with caplog.at_level(logging.WARNING, logger="flappy_game"):
            game.start()
            game.apply_impulse()
            assert not board.play("score")

        assert not board.available
        assert len(calls) == 1
        assert any("Audio unavailable" in r.getMessage() for r in caplog.records)
        assert game.is_running

    def test_missing_pygame_degrades(self, config, monkeypatch):
        monkeypatch.setattr(audio, "PYGAME_AVAILABLE", False)
        board = SoundBoard(config, enabled=True)
        assert not board.play("jump")
        assert not board.available

    def test_toggle_music(self, config):
        board = SoundBoard(config, enabled=False)
        assert board.music_enabled
        assert not board.toggle_music()
        assert not board.start_music()
        assert board.toggle_music()

    def test_event_routing(self, config, monkeypatch):
        """Each event type triggers the matching sound action."""
        board = SoundBoard(config, enabled=False)
        played = []
        music = []
        monkeypatch.setattr(board, "play", lambda name: played.append(name) or True)
        monkeypatch.setattr(board, "start_music", lambda: music.append("start") or True)
        monkeypatch.setattr(board, "stop_music", lambda: music.append("stop"))

        for event_type in GameEventType:
            board.handle_event(GameEvent(event_type, tick=0, score=0))

        assert played == ["jump", "score", "game_over"]
        assert music == ["start", "stop", "stop"]

    def test_attach_and_detach(self, config):
        board = SoundBoard(config, enabled=False)
        game = CoreGame(config=config, seed=1)

        board.attach(game)
        assert game.events.listener_count == 1
        board.attach(game)
        assert game.events.listener_count == 1

        board.detach()
        assert game.events.listener_count == 0
        board.close()
