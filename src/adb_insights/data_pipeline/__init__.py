"""Snapshot generation, external signal collection, scheduling and storage."""
