"""Configuration constants, snapshot schemas and runtime config models."""

from .models import DashboardConfig

__all__ = ["DashboardConfig"]
