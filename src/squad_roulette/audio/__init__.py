"""
Squad EU Roulette audio - the row click.
"""

from .engine import AudioEngine
from .synth import synthesize_click

__all__ = ["AudioEngine", "synthesize_click"]
