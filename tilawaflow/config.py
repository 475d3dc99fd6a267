"""
Application settings for TilawaFlow.

Defaults ship with the package in ``config_default_settings.json``.  A
user file with the same layout may override any subset of them; its
location is passed to :func:`load_config` or named by the
``TILAWAFLOW_CONFIG`` environment variable.

Sections:

``connector``
    content provider type and its ``base_url``, ``text_edition``, ``timeout``
``playback``
    initial ``edition``, ``translation``, ``translation_language``,
    ``continuous`` and ``volume``
``display``
    Arabic and translation font sizes with their bounds and step
``logging``
    root ``level`` plus the ``audio_log`` switch and ``audio_log_path``
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .utils.paths import find_data_file

DEFAULT_CONFIG_NAME = "config_default_settings.json"
CONFIG_ENV_VAR = "TILAWAFLOW_CONFIG"


def _overlay(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _overlay(current, value)
        else:
            merged[key] = value
    return merged


def _read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@dataclass
class AppConfig:
    """Merged settings.

    Unknown keys from a user file are kept in ``data`` untouched.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, *keys: str, default: Optional[Any] = None) -> Any:
        """Walk *keys* into the nested settings.

        ``config.get("playback", "volume", default=1.0)`` returns the
        volume, or ``1.0`` when any step of the path is missing.
        """
        node: Any = self.data
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of a top-level section, or an empty dict."""
        value = self.data.get(name)
        return dict(value) if isinstance(value, dict) else {}

    def merge(self, other: Dict[str, Any]) -> None:
        """Overlay *other*; its values win and nested sections merge key by key."""
        self.data = _overlay(self.data, other)


def load_config(user_config_path: Optional[os.PathLike] = None) -> AppConfig:
    """Read the packaged defaults and overlay *user_config_path* if it exists."""
    config = AppConfig(_read_json(find_data_file(DEFAULT_CONFIG_NAME)))
    if user_config_path:
        user_path = Path(user_config_path)
        if user_path.is_file():
            config.merge(_read_json(user_path))
    return config


def get_app_config() -> AppConfig:
    """Load the configuration, honouring ``TILAWAFLOW_CONFIG``."""
    return load_config(os.environ.get(CONFIG_ENV_VAR))
