"""Data collectors for external sources."""

from .base import BaseCollector
from .external_signals import ExternalSignalFetcher, SignalCache

__all__ = [
    "BaseCollector",
    "ExternalSignalFetcher",
    "SignalCache",
]
