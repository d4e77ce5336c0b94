"""
Shared test setup.

Pygame-backed renderers and audio run headless under test.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
