"""YAML configuration for jointcad (``jointcad.yaml``).

Example::

    joinery:
      thickness_mm: 4
      finger_count: 8
      align: left
      type: dovetail
    logging:
      level: DEBUG
      file: jointcad.log
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = "jointcad.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Malformed configuration file."""
    pass


@dataclass
class JoineryDefaults:
    """Values applied when a joint is assigned to an edge without explicit settings."""
    thickness_mm: float = 3.0
    finger_count: int = 6
    align: str = "left"
    type: str = "finger_joint"

    def __post_init__(self):
        # local import: manufacturing.store imports this module
        from .manufacturing.joinery import ALIGN_VALUES, JointType

        if self.align not in ALIGN_VALUES:
            raise ConfigError(f"joinery.align must be one of {', '.join(ALIGN_VALUES)}, got {self.align!r}")
        valid_types = [t.value for t in JointType]
        if self.type not in valid_types:
            raise ConfigError(f"joinery.type must be one of {', '.join(valid_types)}, got {self.type!r}")
        if isinstance(self.thickness_mm, bool) or not isinstance(self.thickness_mm, (int, float)):
            raise ConfigError(f"joinery.thickness_mm must be a number, got {self.thickness_mm!r}")
        if isinstance(self.finger_count, bool) or not isinstance(self.finger_count, int):
            raise ConfigError(f"joinery.finger_count must be an integer, got {self.finger_count!r}")


@dataclass
class LoggingSettings:
    level: str = "INFO"
    file: Optional[str] = None

    def __post_init__(self):
        self.level = str(self.level).upper()
        if self.level not in LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {self.level!r}")


@dataclass
class JointcadConfig:
    joinery: JoineryDefaults = field(default_factory=JoineryDefaults)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_SECTIONS = {
    "joinery": JoineryDefaults,
    "logging": LoggingSettings,
}


def _build_section(name: str, data: Any):
    section_cls = _SECTIONS[name]
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ConfigError(f"section '{name}' must be a mapping")
    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown key(s) in section '{name}': {', '.join(unknown)}")
    return section_cls(**data)


def config_from_dict(data: Optional[Dict[str, Any]]) -> JointcadConfig:
    if data is None:
        return JointcadConfig()
    if not isinstance(data, dict):
        raise ConfigError("configuration document must be a mapping")
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"unknown configuration section(s): {', '.join(unknown)}")
    return JointcadConfig(**{name: _build_section(name, data.get(name)) for name in _SECTIONS})


def load_config(path: Optional[Path | str] = None) -> JointcadConfig:
    """Load configuration; defaults when ``path`` is None or does not exist."""
    if path is None:
        return JointcadConfig()
    config_path = Path(path)
    if not config_path.exists():
        return JointcadConfig()
    with config_path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc
    return config_from_dict(data)


def save_config(config: JointcadConfig, path: Path | str) -> None:
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config.to_dict(), fp, sort_keys=False)
