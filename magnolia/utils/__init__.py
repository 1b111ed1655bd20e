"""Portal utilities."""

from .seed_loader import load_seed, get_available_seeds
from .clock import Clock, now_iso, today_iso

__all__ = [
    "load_seed",
    "get_available_seeds",
    "Clock",
    "now_iso",
    "today_iso",
]
