"""Connector registry for TilawaFlow.

Connectors are pluggable content sources.  The ``get_default_connector``
factory reads the ``connector`` section of the application config and
returns an appropriate :class:`BaseConnector` instance.

Currently supported connector types:
    * ``"alquran"`` – calls the AlQuran Cloud public API (requires internet)

Configuration example (config_default_settings.json)::

    {
        "connector": {
            "type": "alquran",
            "base_url": "https://api.alquran.cloud/v1",
            "text_edition": "quran-uthmani",
            "timeout": 30
        }
    }
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .alquran import AlQuranConnector
from .base import BaseConnector, ContentError

logger = logging.getLogger(__name__)

__all__ = [
    "AlQuranConnector",
    "BaseConnector",
    "ContentError",
    "get_default_connector",
]


def get_default_connector(config: Dict[str, Any] | None = None) -> BaseConnector:
    """Return a connector instance based on *config*.

    :param config: The ``connector`` section of the application config.
        Recognised keys:
        * ``type`` – "alquran" (default)
        * ``base_url``, ``text_edition``, ``timeout`` – forwarded to
          :class:`AlQuranConnector`.
    :return: A ready-to-use :class:`BaseConnector`.
    """
    if config is None:
        config = {}

    connector_type = str(config.get("type", "alquran")).lower()

    kwargs: Dict[str, Any] = {
        key: config[key] for key in ("base_url", "text_edition", "timeout") if key in config
    }

    if connector_type == "alquran":
        logger.info("Using AlQuranConnector with kwargs=%s", kwargs)
        return AlQuranConnector(**kwargs)

    logger.warning(
        "Unknown connector type %r, falling back to AlQuranConnector",
        connector_type,
    )
    return AlQuranConnector(**kwargs)
