"""
Configuration lookup for sockwire.

Values are resolved from an instance configuration dict first, then from
``SOCKWIRE_<KEY>`` environment variables, then from a caller supplied default.
"""

import os
from typing import Any, Callable, Dict, Optional, TypeVar

from sockwire.errors import ConfigurationError

T = TypeVar("T")

ENV_PREFIX = "SOCKWIRE_"


def get_env_config(key: str) -> Optional[str]:
    """Get a configuration value from the environment.

    Args:
        key: The configuration key, e.g. ``timeout_ms``.

    Returns:
        The raw string value of ``SOCKWIRE_<KEY>``, or None if unset.
    """
    return os.environ.get(f"{ENV_PREFIX}{key.upper()}")


def merge_configs(*configs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge configuration dicts, later ones taking precedence."""
    merged: Dict[str, Any] = {}
    for config in configs:
        if config:
            merged.update(config)
    return merged


def resolve_config(
    config: Optional[Dict[str, Any]],
    key: str,
    default: T,
    convert: Callable[[Any], T],
) -> T:
    """Resolve a key through the instance config, environment, default chain.

    Args:
        config: Instance configuration, may be None.
        key: The configuration key.
        default: Value used when neither source defines the key.
        convert: Callable applied to values coming from config or environment.

    Returns:
        The converted value.

    Raises:
        ConfigurationError: If the value cannot be converted.
    """
    if config and key in config:
        value = config[key]
    else:
        value = get_env_config(key)
        if value is None:
            return default

    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {key!r}: {value!r}") from e
