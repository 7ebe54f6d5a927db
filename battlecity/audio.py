"""Background music and sound effects."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

DEFAULT_SOUND_DIR = Path(__file__).with_name("sounds")

MAIN_TRACK = "main.mp3"
EXPLOSION_SOUND = "explosion.wav"
SHOOT_SOUND = "shoot.wav"


class Audio:
    """Plays the looping main track and the short effects.

    Missing sound files or an unavailable audio device make playback a
    silent no-op; the play methods report whether anything was played.
    """

    _instance: Audio | None = None

    def __init__(self, sound_dir: str | Path | None = None) -> None:
        self.sound_dir = Path(sound_dir) if sound_dir is not None else DEFAULT_SOUND_DIR
        self.main_playing = False
        self._sounds: dict[str, Any] = {}
        self._mixer_ready: bool | None = None

    @classmethod
    def instance(cls) -> Audio:
        """The shared audio player."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _ensure_mixer(self) -> bool:
        if self._mixer_ready is None:
            try:
                if not pygame.mixer.get_init():
                    pygame.mixer.init()
                self._mixer_ready = True
            except pygame.error:
                self._mixer_ready = False
        return self._mixer_ready

    def _sound(self, name: str) -> Any:
        if name not in self._sounds:
            path = self.sound_dir / name
            sound = None
            if path.is_file() and self._ensure_mixer():
                try:
                    sound = pygame.mixer.Sound(str(path))
                except pygame.error:
                    sound = None
            self._sounds[name] = sound
        return self._sounds[name]

    def _play_effect(self, name: str) -> bool:
        sound = self._sound(name)
        if sound is None:
            return False
        sound.play()
        return True

    def play_main(self) -> bool:
        """Start the main track, looping forever."""
        path = self.sound_dir / MAIN_TRACK
        if not path.is_file() or not self._ensure_mixer():
            return False
        try:
            pygame.mixer.music.load(str(path))
            pygame.mixer.music.play(loops=-1)
        except pygame.error:
            return False
        self.main_playing = True
        return True

    def stop_main(self) -> None:
        """Stop the main track."""
        if self.main_playing:
            pygame.mixer.music.stop()
        self.main_playing = False

    def play_explosion(self) -> bool:
        """Play the explosion effect."""
        return self._play_effect(EXPLOSION_SOUND)

    def play_shoot(self) -> bool:
        """Play the shot effect."""
        return self._play_effect(SHOOT_SOUND)