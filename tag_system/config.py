"""
Configuration loader for the tag system.
Loads settings from a JSON file with fallback defaults.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from tag_system.utils.logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_FILENAME = "tag_config.json"


@dataclass
class StorageConfig:
    """DuckDB storage configuration. Use ":memory:" for a throwaway store."""
    db_path: str = "data/tags.duckdb"


@dataclass
class HierarchyConfig:
    """
    Tag hierarchy policy.

    Attributes:
        enforce_acyclic: Reject add_child calls that would create a cycle
        prune_previous_parent: On re-parenting, drop the child from the
            old parent's child list
    """
    enforce_acyclic: bool = True
    prune_previous_parent: bool = True


@dataclass
class NamingConfig:
    """Naming of tags created without an explicit name."""
    new_tag_prefix: str = "NewTag"


@dataclass
class LoggingConfig:
    """Logging configuration (see utils.logging_config.setup_logging)."""
    level: str = "INFO"
    log_dir: str = "logs"
    console: bool = True
    file: bool = False


@dataclass
class TagSystemConfig:
    """Main configuration class."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    hierarchy: HierarchyConfig = field(default_factory=HierarchyConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "TagSystemConfig":
        """Create config from dictionary. Missing sections use defaults."""
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        return cls(
            storage=StorageConfig(**data.get("storage", {})),
            hierarchy=HierarchyConfig(**data.get("hierarchy", {})),
            naming=NamingConfig(**data.get("naming", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return asdict(self)


# Global config instance
_config: Optional[TagSystemConfig] = None


def load_config(config_path: Optional[str] = None) -> TagSystemConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to the JSON file. If None, looks for
            tag_config.json in the current directory.

    Returns:
        TagSystemConfig instance with loaded or default values.
    """
    global _config

    resolved_path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILENAME)

    if resolved_path.exists():
        try:
            with open(resolved_path, 'r', encoding="utf-8") as f:
                data = json.load(f)
            _config = TagSystemConfig.from_dict(data)
            logger.info(f"Loaded configuration from {resolved_path}")
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading {resolved_path}: {e}. Using defaults.")
            _config = TagSystemConfig()
    else:
        logger.info(f"{resolved_path} not found. Using defaults.")
        _config = TagSystemConfig()

    return _config


def get_config() -> TagSystemConfig:
    """
    Get the current configuration. Loads from file if not already loaded.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[TagSystemConfig]) -> None:
    """
    Set a custom configuration. Passing None forces a reload on next access.
    """
    global _config
    _config = config


def save_config(config: TagSystemConfig, config_path: Optional[str] = None) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Config instance to save.
        config_path: Path to save to. If None, saves to tag_config.json.
    """
    resolved_path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILENAME)

    with open(resolved_path, 'w', encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=4)

    logger.info(f"Saved configuration to {resolved_path}")
