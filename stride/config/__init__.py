"""Configuration loading and validation."""

from stride.config.loader import (
    load_config,
    load_yaml,
    get_config_path,
    get_config_dir,
    set_config_dir,
    dict_to_dataclass,
    expand_env_vars,
)

__all__ = [
    "load_config",
    "load_yaml",
    "get_config_path",
    "get_config_dir",
    "set_config_dir",
    "dict_to_dataclass",
    "expand_env_vars",
]
