"""
Tests for WindowConfig.
"""

import pytest

from message_window import WindowConfig


class TestWindowConfig:
    """Validation and loading."""

    def test_defaults(self):
        config = WindowConfig()
        assert config.window_size_ms == 30_000
        assert config.min_messages == 2
        assert config.max_messages == 5
        assert config.processing_interval_ms == 10_000
        assert config.processing_interval_seconds == 10.0

    @pytest.mark.parametrize("kwargs", [
        {"window_size_ms": 0},
        {"processing_interval_ms": -1},
        {"min_messages": 0},
        {"min_messages": 4, "max_messages": 3},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            WindowConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WINDOW_SIZE_MS", "60000")
        monkeypatch.setenv("WINDOW_MAX_MESSAGES", "8")
        config = WindowConfig.from_env()
        assert config.window_size_ms == 60_000
        assert config.max_messages == 8
        assert config.min_messages == 2

    def test_from_yaml_reads_window_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("window:\n  window_size_ms: 5000\n  processing_interval_ms: 1000\n")
        config = WindowConfig.from_yaml(path)
        assert config.window_size_ms == 5_000
        assert config.processing_interval_ms == 1_000

    def test_to_dict_round_trips_through_from_dict(self):
        config = WindowConfig(window_size_ms=10_000, min_messages=3, max_messages=6)
        assert WindowConfig.from_dict(config.to_dict()) == config
