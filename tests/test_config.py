"""Tests for configuration loading."""

import json

import pytest

from stt_correct.config import (
    CONFIG_ENV_VAR,
    AnalyzerConfig,
    CorrectorConfig,
    load_config,
    load_entities,
    resolve_config,
    save_config,
)
from stt_correct.errors import ConfigurationError, ResourceError


class TestDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        """Test documented defaults."""
        config = CorrectorConfig()

        assert config.analyzer.min_similarity == 0.65
        assert config.analyzer.min_word_length == 3
        assert config.diff.context_window == 3
        assert config.diff.split.min_split_part_length == 3
        assert config.diff.split.split_similarity_threshold == 0.8
        assert config.entities_file is None

    def test_bounds(self):
        """Test out-of-range thresholds are rejected."""
        with pytest.raises(ValueError):
            AnalyzerConfig(min_similarity=1.5)


class TestLoadSave:
    """Tests for load_config and save_config."""

    def test_round_trip(self, tmp_path):
        """Test saved config loads back equal."""
        config = CorrectorConfig(analyzer=AnalyzerConfig(min_similarity=0.8))
        path = save_config(config, tmp_path / "sub" / "config.json")

        assert path.exists()
        assert not path.with_suffix(".json.tmp").exists()
        assert load_config(path) == config

    def test_partial_file(self, tmp_path):
        """Test missing sections fall back to defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"analyzer": {"min_similarity": 0.8}}))

        config = load_config(path)

        assert config.analyzer.min_similarity == 0.8
        assert config.diff.context_window == 3

    def test_missing_file(self, tmp_path):
        """Test missing file raises ResourceError."""
        with pytest.raises(ResourceError) as exc_info:
            load_config(tmp_path / "nope.json")

        assert "nope.json" in exc_info.value.context["path"]

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises ConfigurationError."""
        path = tmp_path / "config.json"
        path.write_text("not json")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        """Test out-of-range values raise ConfigurationError."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"analyzer": {"min_similarity": 2.0}}))

        with pytest.raises(ConfigurationError):
            load_config(path)


class TestResolveConfig:
    """Tests for resolve_config."""

    def test_defaults_without_path(self, monkeypatch):
        """Test defaults when nothing is configured."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert resolve_config() == CorrectorConfig()

    def test_from_environment(self, tmp_path, monkeypatch):
        """Test the environment variable names a config file."""
        path = save_config(CorrectorConfig(entities_file="entities.json"), tmp_path / "config.json")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert resolve_config().entities_file == "entities.json"

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        """Test an explicit path takes priority over the environment."""
        env_path = save_config(CorrectorConfig(entities_file="env.json"), tmp_path / "env.json")
        cli_path = save_config(CorrectorConfig(entities_file="cli.json"), tmp_path / "cli.json")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))

        assert resolve_config(cli_path).entities_file == "cli.json"


class TestLoadEntities:
    """Tests for load_entities."""

    def test_object_format(self, tmp_path):
        """Test an object with an entities key."""
        path = tmp_path / "entities.json"
        path.write_text(json.dumps({"entities": [{"name": "John", "aliases": ["Johnny"]}]}))

        entities = load_entities(path)

        assert [e.name for e in entities] == ["John"]
        assert entities[0].aliases == ["Johnny"]
        assert entities[0].type == "concept"

    def test_list_format(self, tmp_path):
        """Test a bare list keeps file order."""
        path = tmp_path / "entities.json"
        path.write_text(json.dumps([{"name": "Jane"}, {"name": "John"}]))

        assert [e.name for e in load_entities(path)] == ["Jane", "John"]

    def test_missing_file(self, tmp_path):
        """Test missing file raises ResourceError."""
        with pytest.raises(ResourceError):
            load_entities(tmp_path / "nope.json")
