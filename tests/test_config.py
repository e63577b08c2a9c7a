"""
Tests for settings and logging configuration.
"""

from pathlib import Path

import pytest


class TestSettings:
    """Tests for the Settings class."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        from graph_memory.config import Settings

        monkeypatch.delenv("GRAPH_MEMORY_VAULT_PATH", raising=False)
        config = Settings()

        assert config.damping_factor == 0.85
        assert config.max_iterations == 100
        assert config.tolerance == 1e-6
        assert config.max_hops == 5
        assert config.top_k == 10
        assert config.top_entities == 20
        assert config.vault_path is None
        assert config.memory_path.name == "memory"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Test GRAPH_MEMORY_ variables override defaults."""
        from graph_memory.config import Settings

        monkeypatch.setenv("GRAPH_MEMORY_MAX_HOPS", "3")
        monkeypatch.setenv("GRAPH_MEMORY_VAULT_PATH", str(tmp_path))

        config = Settings()

        assert config.max_hops == 3
        assert config.vault_path == Path(tmp_path)

    def test_damping_factor_range(self):
        """Test damping factors outside [0, 1] are rejected."""
        from pydantic import ValidationError

        from graph_memory.config import Settings

        with pytest.raises(ValidationError):
            Settings(damping_factor=1.5)

