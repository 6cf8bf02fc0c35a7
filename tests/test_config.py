"""
Tests for configuration defaults and YAML settings loading.
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from boothdocs.config import (
    CHUNK_THRESHOLD_CHARS,
    MAX_CHUNK_CHARS,
    SETTINGS_FILE,
    AnalysisSettings,
    load_settings,
)


class TestDefaults:
    """Module constants."""

    def test_threshold_and_bound(self):
        assert CHUNK_THRESHOLD_CHARS == 40000
        assert MAX_CHUNK_CHARS == 30000
        assert MAX_CHUNK_CHARS < CHUNK_THRESHOLD_CHARS

    def test_shipped_file_matches_defaults(self):
        with open(project_root / "config" / "analysis.yaml") as f:
            shipped = yaml.safe_load(f)["analysis"]

        assert shipped["chunk_threshold_chars"] == CHUNK_THRESHOLD_CHARS
        assert shipped["max_chunk_chars"] == MAX_CHUNK_CHARS


class TestLoadSettings:
    """YAML overrides."""

    def test_default_file(self):
        settings = load_settings()

        assert SETTINGS_FILE.exists()
        assert settings.chunk_threshold_chars == 40000
        assert settings.max_attempts == 3

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.yaml") == AnalysisSettings()

    def test_overrides_applied_unknown_ignored(self, tmp_path):
        path = tmp_path / "analysis.yaml"
        path.write_text("analysis:\n  max_chunk_chars: 12000\n  max_attempts: 5\n  colour: blue\n")

        settings = load_settings(path)

        assert settings.max_chunk_chars == 12000
        assert settings.max_attempts == 5
        assert settings.chunk_threshold_chars == 40000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "analysis.yaml"
        path.write_text("")

        assert load_settings(path) == AnalysisSettings()

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "analysis.yaml"
        path.write_text("analysis:\n  max_attempts: 0\n")

        with pytest.raises(ValueError):
            load_settings(path)
