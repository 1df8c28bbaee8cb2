"""
Core Module Package.

Shared infrastructure used by the windowing and sentiment
packages.

Components:
- clock: Unified, mockable time source
"""

from .clock import (
    ClockFactory,
    ClockProtocol,
    MockClock,
    SystemClock,
    ms_to_datetime,
    now_ms,
    now_utc,
)


__all__ = [
    "ClockFactory",
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "ms_to_datetime",
    "now_ms",
    "now_utc",
]
