"""
Configuration Loader - YAML Loading with Validation.

Loads configuration from YAML files and validates using Pydantic models.

Profiles:
    A profile is a partial YAML file deep-merged over the base config.
    ``<name>.yaml`` is looked up, in order, in:
        1. ``profiles/`` next to the config file
        2. ``config/profiles/`` under the loader's base path
    Several profiles are applied in the order given; later ones win.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from metricbuddy.config.models import MetricsConfig

logger = logging.getLogger(__name__)

Profiles = Union[str, Sequence[str], None]


class ConfigLoader:
    """Loads and validates configuration from YAML files."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths and shared profiles
        """
        self._base_path = Path(base_path) if base_path is not None else Path(".")

    def load(self, config_path: Union[str, Path], profile: Profiles = None) -> MetricsConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file, relative to the base path
            profile: Profile name, or names applied in order

        Returns:
            Validated MetricsConfig object

        Raises:
            FileNotFoundError: If config or profile file doesn't exist
            ValueError: If a file does not hold a mapping
            ValidationError: If config is invalid
        """
        path = Path(config_path)
        if not path.is_absolute():
            path = self._base_path / path

        config_dict = _read_mapping(path)
        applied: List[Path] = []
        for name in _profile_names(profile):
            profile_path = self.find_profile(name, path.parent)
            config_dict = _deep_merge(config_dict, _read_mapping(profile_path))
            applied.append(profile_path)

        config = MetricsConfig.model_validate(config_dict)
        logger.debug(
            f"Loaded config from {path}"
            + (f" with profiles {[str(p) for p in applied]}" if applied else "")
        )
        return config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> MetricsConfig:
        """Load configuration from dictionary."""
        return MetricsConfig.model_validate(config_dict)

    def profile_dirs(self, config_dir: Path) -> List[Path]:
        """Directories searched for profiles of a config file in config_dir."""
        return [config_dir / "profiles", self._base_path / "config" / "profiles"]

    def find_profile(self, name: str, config_dir: Path) -> Path:
        """
        Locate a profile file.

        Raises:
            FileNotFoundError: If no searched directory holds ``<name>.yaml``
        """
        candidates = [d / f"{name}.yaml" for d in self.profile_dirs(config_dir)]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise FileNotFoundError(
            f"Profile not found: {name} (searched {', '.join(str(c) for c in candidates)})"
        )


def _profile_names(profile: Profiles) -> List[str]:
    if not profile:
        return []
    if isinstance(profile, str):
        return [profile]
    return list(profile)


def _read_mapping(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: Union[str, Path],
    profile: Profiles = None,
    base_path: Optional[Path] = None,
) -> MetricsConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Profile name, or names applied in order
        base_path: Base path for relative paths and shared profiles

    Returns:
        Validated MetricsConfig object
    """
    return ConfigLoader(base_path=base_path).load(config_path, profile)
