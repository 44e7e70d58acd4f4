"""
Handpicked - Always-On Curated Video Channels

Every channel loops a fixed, ordered list of videos anchored to a wall-clock
start time, so every viewer who tunes in sees the same video at the same
offset:
- Timeline scheduling engine (which video plays now, and where)
- Next-item resolution for pre-loading
- Dense, swappable ranking of highlighted channels
"""

__version__ = "1.0.0"
__author__ = "Handpicked Contributors"
__license__ = "MIT"

from handpicked.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
