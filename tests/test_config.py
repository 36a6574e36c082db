"""
Test cases for layered configuration loading.
"""
import json

import pytest

from taskopts.config import Config, ConfigError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop TASKOPTS_* variables from the host environment."""
    import os

    for key in list(os.environ):
        if key.startswith("TASKOPTS_"):
            monkeypatch.delenv(key)


class TestConfig:
    """Test the Config class."""

    def test_defaults(self, tmp_path):
        """Test built-in defaults without any files."""
        config = Config(tmp_path).load()

        assert config.get("output.format") == "text"
        assert config.get("tasks.discovery_paths") == ["taskopts.tasks"]
        assert config["logging.level"] == "WARNING"
        assert config.get("missing.key", "fallback") == "fallback"

    def test_yaml_file_overrides_defaults(self, tmp_path):
        """Test that config.yaml overrides defaults and keeps siblings."""
        (tmp_path / "config.yaml").write_text(
            "logging:\n  level: DEBUG\noutput:\n  format: json\n"
        )
        config = Config(tmp_path).load()

        assert config.get("logging.level") == "DEBUG"
        assert config.get("output.format") == "json"
        assert config.get("logging.format") == "%(levelname)s %(name)s: %(message)s"

    def test_priority_between_files(self, tmp_path):
        """Test that local and dot files win over config.json."""
        (tmp_path / "config.json").write_text(json.dumps({"output": {"format": "json"}}))
        (tmp_path / ".taskopts.yml").write_text("output:\n  format: csv\n")

        assert Config(tmp_path).load().get("output.format") == "csv"

    def test_environment_specific_file(self, tmp_path, monkeypatch):
        """Test config.<env>.yaml selected by TASKOPTS_ENV."""
        monkeypatch.setenv("TASKOPTS_ENV", "ci")
        (tmp_path / "config.ci.yaml").write_text("output:\n  format: csv\n")

        config = Config(tmp_path).load()
        assert config.get("output.format") == "csv"
        assert "env" not in config.to_dict()

    def test_environment_variables(self, tmp_path, monkeypatch):
        """Test TASKOPTS_ variables with nested keys and JSON values."""
        (tmp_path / "config.yaml").write_text("output:\n  format: csv\n")
        monkeypatch.setenv("TASKOPTS_OUTPUT__FORMAT", "json")
        monkeypatch.setenv("TASKOPTS_TASKS__DISCOVERY_PATHS", '["a.tasks", "b.tasks"]')

        config = Config(tmp_path).load()
        assert config.get("output.format") == "json"
        assert config.get("tasks.discovery_paths") == ["a.tasks", "b.tasks"]

    def test_runtime_set(self, tmp_path):
        """Test values set at runtime survive a reload."""
        config = Config(tmp_path).load()
        config.set("output.format", "csv")
        assert config.get("output.format") == "csv"

        config.load(reload=True)
        assert config.get("output.format") == "csv"
        assert "output.format" in config

    def test_defaults_not_mutated(self, tmp_path):
        """Test that merging does not leak into the defaults source."""
        (tmp_path / "config.yaml").write_text("output:\n  format: json\n")
        config = Config(tmp_path).load()

        defaults = next(s for s in config.sources if s.name == "defaults")
        assert defaults.data["output"]["format"] == "text"

    def test_broken_file(self, tmp_path):
        """Test that an unreadable file raises ConfigError."""
        (tmp_path / "config.json").write_text("{not json")

        with pytest.raises(ConfigError, match="config.json"):
            Config(tmp_path).load()

    def test_non_mapping_file(self, tmp_path):
        """Test that a top-level list is rejected."""
        (tmp_path / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            Config(tmp_path).load()
