# reverberance/config/loaders.py

"""
Builds the reverberance configuration from layered sources.

Each source contributes a (possibly empty) nested dict. Layers are merged in
order of increasing precedence and the result is validated once:

    explicit --config files < ./reverberance.toml
        < ~/.config/reverberance/reverberance.toml < REVERBERANCE_* variables
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import toml
from pydantic import ValidationError

from reverberance.errors import InvalidParameterError
from .models import ReverberanceConfig, ReverbParameters

logger = logging.getLogger(__name__)

ENV_PREFIX = "REVERBERANCE_"
USER_CONFIG_FILE = Path("~/.config/reverberance/reverberance.toml").expanduser()
PROJECT_CONFIG_FILE = Path("./reverberance.toml").resolve()

ConfigLayer = Tuple[str, Dict[str, Any]]


def _read_toml(path: Path) -> Dict[str, Any]:
    """Returns the parsed TOML table at `path`, or {} if it is missing or unreadable."""
    if not path.is_file():
        return {}
    try:
        return toml.load(path)
    except toml.TomlDecodeError as e:
        logger.warning(f"Ignoring malformed config file '{path}': {e}")
    except OSError as e:
        logger.warning(f"Ignoring unreadable config file '{path}': {e}")
    return {}


def _merge(lower: Dict[str, Any], higher: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a new dict where tables are merged key by key and `higher` wins on conflicts."""
    result = dict(lower)
    for key, value in higher.items():
        current = result.get(key)
        result[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return result


def _coerce_env_value(raw: str) -> Any:
    """Interprets an environment string as bool, int or float where possible."""
    lowered = raw.strip().lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def _env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Collects REVERBERANCE_<SECTION>_<FIELD> variables into a nested dict.

    Only the first underscore after the prefix separates the section, since
    field names contain underscores: REVERBERANCE_REVERB_ROOM_SIZE=0.4 sets
    reverb.room_size.
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, field = name[len(ENV_PREFIX):].lower().partition('_')
        if not field:
            logger.debug(f"Environment variable {name} names no field; ignored.")
            continue
        overrides.setdefault(section, {})[field] = _coerce_env_value(raw)
    return overrides


def _config_layers(
    config_files: Iterable[Path],
    use_project_config: bool,
    use_user_config: bool,
) -> List[ConfigLayer]:
    """Lists the configuration sources from lowest to highest precedence."""
    layers: List[ConfigLayer] = []
    # The first explicit file wins among explicit files
    for path in reversed(list(config_files)):
        layers.append((str(path), _read_toml(Path(path))))
    if use_project_config:
        layers.append((f"project config {PROJECT_CONFIG_FILE}", _read_toml(PROJECT_CONFIG_FILE)))
    if use_user_config:
        layers.append((f"user config {USER_CONFIG_FILE}", _read_toml(USER_CONFIG_FILE)))
    layers.append(("environment", _env_overrides()))
    return layers


def load_configuration(
    config_files: Optional[List[Path]] = None,
    disable_project_config: bool = False,
    disable_user_config: bool = False,
) -> ReverberanceConfig:
    """
    Loads the reverberance configuration.

    Precedence (highest first): REVERBERANCE_* environment variables, the
    user config file, ./reverberance.toml, explicitly passed files, and
    finally the model defaults.

    Args:
        config_files: Additional TOML files (lowest file precedence).
        disable_project_config: Skip ./reverberance.toml.
        disable_user_config: Skip ~/.config/reverberance/reverberance.toml.

    Returns:
        A validated ReverberanceConfig. If a non-reverb section does not
        validate, the error is logged and that part falls back to defaults.

    Raises:
        InvalidParameterError: If the merged [reverb] section holds an unknown
                               key or an out-of-domain value.
    """
    merged: Dict[str, Any] = {}
    for label, values in _config_layers(config_files or [], not disable_project_config, not disable_user_config):
        if values:
            logger.debug(f"Merging configuration from {label}: {values}")
            merged = _merge(merged, values)

    reverb_values = merged.pop("reverb", {})
    if not isinstance(reverb_values, dict):
        raise InvalidParameterError(f"[reverb] must be a table of parameters, got {reverb_values!r}.")
    reverb = ReverbParameters.from_mapping(reverb_values)

    try:
        config = ReverberanceConfig(reverb=reverb, **merged)
    except ValidationError as e:
        logger.error(f"Invalid reverberance configuration:\n{e}")
        logger.warning("Using the default settings for everything except [reverb].")
        return ReverberanceConfig(reverb=reverb)
    logger.debug("Configuration validated.")
    return config
