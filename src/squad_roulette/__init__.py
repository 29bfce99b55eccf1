"""Squad EU Roulette - picks a random live Squad server with a slot-machine reveal."""

__version__ = "0.1.0"
