"""Tank battle arcade game with level files, bonuses and a keyboard-driven menu."""

__version__ = "0.1.0"