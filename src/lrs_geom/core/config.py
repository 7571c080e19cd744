"""Configuration loader and dataclasses for linear referencing settings."""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Optional
import yaml


CONFIG_ENV_VAR = "LRS_GEOM_CONFIG"


@dataclass
class MeasureConfig:
    """Measure comparison configuration."""
    # None means the precision is derived from the float representation.
    precision: Optional[float] = None


@dataclass
class LocateConfig:
    """Point snapping configuration for measure lookups."""
    snap_tolerance: float = 1e-6


@dataclass
class LoggingConfig:
    """Logging configuration used by the CLI."""
    level: str = "WARNING"


@dataclass
class LrsConfig:
    """Complete linear referencing configuration."""
    measures: MeasureConfig = field(default_factory=MeasureConfig)
    locate: LocateConfig = field(default_factory=LocateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "LrsConfig":
        """Load configuration from a YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls(
            measures=MeasureConfig(**(data.get('measures') or {})),
            locate=LocateConfig(**(data.get('locate') or {})),
            logging=LoggingConfig(**(data.get('logging') or {})),
        )


# Global config instance - lazily loaded
_config: Optional[LrsConfig] = None


def _default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    # configs/lrs_defaults.yaml relative to the project root
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / "configs" / "lrs_defaults.yaml"


def get_config(config_path: Optional[Path] = None) -> LrsConfig:
    """Return the process-wide settings for measure comparison and snapping.

    The first call reads ``config_path``, else the file named by
    ``$LRS_GEOM_CONFIG``, else ``configs/lrs_defaults.yaml``. A missing file
    yields the built-in defaults. Passing ``config_path`` later replaces the
    cached settings, which is how the CLI applies ``--config``.
    """
    global _config

    if config_path is not None:
        _config = _load(config_path)
    elif _config is None:
        _config = _load(_default_config_path())
    return _config


def reload_config(config_path: Optional[Path] = None) -> LrsConfig:
    """Drop the cached settings and read them again (used by tests)."""
    global _config
    _config = None
    return get_config(config_path)


def _load(path: Path) -> LrsConfig:
    return LrsConfig.from_yaml(path) if path.exists() else LrsConfig()
