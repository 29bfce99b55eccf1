"""pygame front end."""

from .window import RouletteWindow, WindowConfig, copy_to_clipboard

__all__ = ["RouletteWindow", "WindowConfig", "copy_to_clipboard"]
