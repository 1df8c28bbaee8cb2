"""
Message Window - Configuration.

============================================================
CONFIGURABLE WINDOWING
============================================================

All windowing parameters are configurable:
- Window duration (bucket size)
- Readiness thresholds (min / max messages)
- Sweep interval of the processing loop

Configuration can be loaded from:
- Default values
- Environment variables
- YAML config file (``window`` section)

============================================================
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """
    Windowing parameters.

    The sweep interval is independent of (and normally shorter than)
    the window size so that ready windows wait at most one interval.
    """
    window_size_ms: int = 30_000          # 30s buckets
    min_messages: int = 2                 # needed once time is up
    max_messages: int = 5                 # ready immediately at this count
    processing_interval_ms: int = 10_000  # sweep cadence

    def __post_init__(self) -> None:
        if self.window_size_ms <= 0:
            raise ValueError("window_size_ms must be positive")
        if self.processing_interval_ms <= 0:
            raise ValueError("processing_interval_ms must be positive")
        if self.min_messages < 1:
            raise ValueError("min_messages must be at least 1")
        if self.max_messages < self.min_messages:
            raise ValueError("max_messages must be >= min_messages")
        if self.processing_interval_ms > self.window_size_ms:
            logger.warning(
                f"Sweep interval {self.processing_interval_ms}ms exceeds window size "
                f"{self.window_size_ms}ms; ready windows may wait more than one window"
            )

    @property
    def processing_interval_seconds(self) -> float:
        return self.processing_interval_ms / 1000

    @classmethod
    def from_env(cls) -> "WindowConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - WINDOW_SIZE_MS
        - WINDOW_MIN_MESSAGES
        - WINDOW_MAX_MESSAGES
        - WINDOW_PROCESSING_INTERVAL_MS
        """
        defaults = cls()
        return cls(
            window_size_ms=int(os.getenv("WINDOW_SIZE_MS", defaults.window_size_ms)),
            min_messages=int(os.getenv("WINDOW_MIN_MESSAGES", defaults.min_messages)),
            max_messages=int(os.getenv("WINDOW_MAX_MESSAGES", defaults.max_messages)),
            processing_interval_ms=int(
                os.getenv("WINDOW_PROCESSING_INTERVAL_MS", defaults.processing_interval_ms)
            ),
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WindowConfig":
        defaults = cls()
        data = data or {}
        return cls(
            window_size_ms=int(data.get("window_size_ms", defaults.window_size_ms)),
            min_messages=int(data.get("min_messages", defaults.min_messages)),
            max_messages=int(data.get("max_messages", defaults.max_messages)),
            processing_interval_ms=int(
                data.get("processing_interval_ms", defaults.processing_interval_ms)
            ),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "WindowConfig":
        """Load the ``window`` section of a YAML config file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data.get("window"))

    def to_dict(self) -> Dict[str, int]:
        return {
            "window_size_ms": self.window_size_ms,
            "min_messages": self.min_messages,
            "max_messages": self.max_messages,
            "processing_interval_ms": self.processing_interval_ms,
        }
