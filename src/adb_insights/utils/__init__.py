"""Shared helpers: logging, time, text formatting and file IO."""
