"""Where calcchat's settings come from.

Each layer replaces, key by key within a section, what the layers
before it set:

    1. model defaults in :mod:`calcchat.config.schema`
    2. ``$XDG_CONFIG_HOME/calcchat/config.toml`` (``~/.config`` if unset)
    3. ``calcchat.toml`` in the working directory
    4. the file given by ``--config``, or else by ``$CALCCHAT_CONFIG``
    5. command-line flags

The API key is ``[provider] api_key`` when set, otherwise the value of
the env var named by ``api_key_env`` (``ANTHROPIC_API_KEY``).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from calcchat.core.errors import ConfigError

from .schema import CalcChatConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

Sections = dict[str, dict[str, Any]]

MISSING_API_KEY_MESSAGE = (
    "Anthropic API key is required. Please:\n"
    "1. Set ANTHROPIC_API_KEY environment variable, or\n"
    "2. Add api_key under [provider] in calcchat.toml, or\n"
    "3. Pass --api-key your_key_here"
)


def _config_files(path: str | Path | None) -> list[Path]:
    """Config files to layer, lowest priority first."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    found = [
        p
        for p in (Path(config_home) / "calcchat" / "config.toml", Path("calcchat.toml"))
        if p.is_file()
    ]

    named = path or os.environ.get("CALCCHAT_CONFIG")
    if named:
        if not Path(named).is_file():
            raise ConfigError(f"Config file not found: {named}")
        found.append(Path(named))
    return found


def _read_sections(path: Path) -> Sections:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _layer(settings: Sections, layer: Mapping[str, Any], source: str) -> None:
    for section, values in layer.items():
        if not isinstance(values, dict):
            raise ConfigError(f"{source}: '{section}' must be a [table]")
        settings.setdefault(section, {}).update(values)


def load_config(
    path: str | Path | None = None,
    flags: Mapping[str, Mapping[str, Any]] | None = None,
) -> CalcChatConfig:
    """Build the validated configuration.

    Args:
        path: The ``--config`` file; takes the place of ``$CALCCHAT_CONFIG``.
        flags: Command-line settings by section, applied last.

    Raises:
        ConfigError: A named file is missing, a file is not valid TOML,
            or the merged settings fail validation.
    """
    settings: Sections = {}
    for config_file in _config_files(path):
        _layer(settings, _read_sections(config_file), str(config_file))
    if flags:
        _layer(settings, flags, "command line")

    try:
        config = CalcChatConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e

    provider = config.provider
    if provider.api_key is None and provider.api_key_env:
        provider.api_key = os.environ.get(provider.api_key_env) or None
    return config


def require_api_key(config: CalcChatConfig) -> str:
    """Return the configured API key or fail with instructions."""
    if not config.provider.api_key:
        raise ConfigError(MISSING_API_KEY_MESSAGE)
    return config.provider.api_key
