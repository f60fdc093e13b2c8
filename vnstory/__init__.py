"""Dialogue graph, choices, affection, sound and save slots for visual novels."""

__version__ = "0.1.0"