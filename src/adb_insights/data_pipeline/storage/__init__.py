"""Storage utilities for persisted dashboard state."""

from .local_storage import LocalStorage

__all__ = ["LocalStorage"]
