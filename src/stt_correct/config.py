"""Configuration loading and management for stt-correct.

Handles the tunable thresholds of the matcher and the diff engine, loaded
from and saved to JSON files, and reading entity catalog files.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from stt_correct.errors import ConfigurationError, ResourceError
from stt_correct.models import EntityRecord

# Environment variable naming a config file for the CLI
CONFIG_ENV_VAR = "STT_CORRECT_CONFIG"


class AnalyzerConfig(BaseModel):
    """Settings for entity matching over a text buffer."""

    # Minimum similarity (0.0-1.0) for a name or alias to be proposed
    min_similarity: float = Field(default=0.65, ge=0.0, le=1.0)
    # Single words shorter than this are never matched
    min_word_length: int = Field(default=3, ge=1)


class SplitDetectionConfig(BaseModel):
    """Thresholds for recognizing one word that the user split into several.

    Speech-to-text often runs a spoken name together ("Charantandi" for
    "Charan Tandi"); these decide when a diff is read that way.
    """

    # Shortest substituted word that counts when contained in the original
    min_split_part_length: int = Field(default=3, ge=1)
    # Original vs joined-replacement similarity must exceed this
    split_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class DiffConfig(BaseModel):
    """Settings for deriving learnable changes from an edit."""

    # Words of context captured on each side of a change
    context_window: int = Field(default=3, ge=0)
    split: SplitDetectionConfig = Field(default_factory=SplitDetectionConfig)


class CorrectorConfig(BaseModel):
    """Top-level configuration."""

    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    # Path to an entity catalog JSON file
    entities_file: str | None = None


def load_config(path: Path | str) -> CorrectorConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        CorrectorConfig with the file's settings

    Raises:
        ResourceError: If the file doesn't exist
        ConfigurationError: If the file is not valid JSON or has bad values
    """
    path = Path(path)
    if not path.exists():
        raise ResourceError("Config file not found", context={"path": str(path)})

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return CorrectorConfig(**data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Config file is not valid JSON: {e}", context={"path": str(path)}
        ) from e
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid config values: {e}", context={"path": str(path)}
        ) from e


def save_config(config: CorrectorConfig, path: Path | str) -> Path:
    """Save configuration to a JSON file with atomic write.

    Args:
        config: Configuration to save
        path: Destination path

    Returns:
        Path to the saved config file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")

    # Atomic write: write to temp file, then rename
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)

    temp_path.replace(path)
    return path


def resolve_config(path: Path | str | None = None) -> CorrectorConfig:
    """Load config from an explicit path, the environment, or defaults.

    Args:
        path: Explicit config path; takes priority over the environment

    Returns:
        CorrectorConfig
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return CorrectorConfig()
    return load_config(path)


def load_entities(path: Path | str) -> list[EntityRecord]:
    """Load entity records from a JSON file.

    Accepts either a list of entities or an object with an "entities" key.

    Args:
        path: Path to the entities file

    Returns:
        Entities in file order

    Raises:
        ResourceError: If the file doesn't exist
        ConfigurationError: If the file is not valid JSON or has bad entries
    """
    path = Path(path)
    if not path.exists():
        raise ResourceError("Entity catalog not found", context={"path": str(path)})

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("entities", [])
        return [EntityRecord(**item) for item in data]
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Entity catalog is not valid JSON: {e}", context={"path": str(path)}
        ) from e
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid entity entry: {e}", context={"path": str(path)}
        ) from e
