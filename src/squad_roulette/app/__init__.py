"""Roulette application logic and presentation adapter."""

from .controller import RouletteController
from .view import RouletteView, RowView, repetitions, visible_rows

__all__ = ["RouletteController", "RouletteView", "RowView", "repetitions", "visible_rows"]
