"""Route group exports."""

from . import cleaning, health, optimizer

__all__ = ["cleaning", "health", "optimizer"]
