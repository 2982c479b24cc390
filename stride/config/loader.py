"""
YAML config tables for the game.

Tables live under a config directory, one file per table:

    configs/<category>/<name>.yaml

String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``. Tables map onto dataclasses; unknown keys are logged
and skipped so older config files keep loading.
"""

import logging
import os
import re
import yaml
from pathlib import Path
from typing import Any, Optional, TypeVar, Type
from dataclasses import fields, is_dataclass
from enum import Enum

T = TypeVar('T')

logger = logging.getLogger(__name__)

ENV_VAR = "STRIDE_CONFIG_DIR"

_ENV_PATTERN = re.compile(r'\$\{([^}:]+)(?::-([^}]*))?\}')

_config_dir: Optional[Path] = None


def set_config_dir(path: Optional[str | Path]):
    """Pin the config directory. None goes back to STRIDE_CONFIG_DIR or configs/."""
    global _config_dir
    _config_dir = Path(path) if path is not None else None


def get_config_dir() -> Path:
    global _config_dir
    if _config_dir is None:
        env_path = os.environ.get(ENV_VAR)
        # configs/ next to the stride package
        _config_dir = Path(env_path) if env_path else Path(__file__).parent.parent.parent / "configs"
    return _config_dir


def get_config_path(category: str, name: str, ext: str = ".yaml",
                    config_dir: Optional[Path] = None) -> Path:
    base = Path(config_dir) if config_dir is not None else get_config_dir()
    return base / category / f"{name}{ext}"


def _env_value(match: re.Match) -> str:
    name, default = match.group(1), match.group(2)
    value = os.environ.get(name)
    if value is not None:
        return value
    if default is not None:
        return default
    # Unset with no default: leave the reference visible
    return match.group(0)


def expand_env_vars(value: Any) -> Any:
    """Expand ``${VAR}`` references in every string of a loaded table."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(_env_value, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [expand_env_vars(v) for v in value]
    return value


def load_yaml(path: Path | str) -> dict:
    """
    Read one table.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the top level is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")
    return expand_env_vars(data)


def dict_to_dataclass(data: dict, cls: Type[T]) -> T:
    """Build a tuning dataclass from a table, skipping unknown keys."""
    if not is_dataclass(cls):
        raise TypeError(f"{cls} is not a dataclass")

    known = {f.name: f.type for f in fields(cls)}
    kwargs = {}
    for key, value in data.items():
        field_type = known.get(key)
        if field_type is None:
            logger.debug(f"Ignoring unknown key '{key}' in {cls.__name__} table")
            continue
        if isinstance(field_type, type) and issubclass(field_type, Enum) and isinstance(value, str):
            value = field_type(value)
        elif is_dataclass(field_type) and isinstance(value, dict):
            value = dict_to_dataclass(value, field_type)
        kwargs[key] = value

    return cls(**kwargs)


def load_config(category: str, name: str, cls: Optional[Type[T]] = None,
                config_dir: Optional[Path] = None, required: bool = True) -> Optional[T | dict]:
    """
    Load ``<category>/<name>.yaml``, optionally as a dataclass.

    With ``required=False`` a missing file logs a warning and returns None
    so the caller can keep its built-in table.
    """
    path = get_config_path(category, name, config_dir=config_dir)
    if not required and not path.exists():
        logger.warning(f"No {category}/{name} config at {path}, using built-in defaults")
        return None

    data = load_yaml(path)
    if cls is not None:
        return dict_to_dataclass(data, cls)
    return data
