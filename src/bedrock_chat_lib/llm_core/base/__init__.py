"""Re-export base provider interfaces and streaming primitives used by all providers."""

from .base import ChatProvider, ModelInfo
from .progress import Progress, CancellationToken, CollectingProgress, SafeProgress

__all__ = [
    "ChatProvider",
    "ModelInfo",
    "Progress",
    "CancellationToken",
    "CollectingProgress",
    "SafeProgress",
]
