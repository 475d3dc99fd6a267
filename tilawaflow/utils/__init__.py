"""Small helpers shared across TilawaFlow subpackages."""

from .paths import find_data_file  # noqa: F401
from .timefmt import format_clock  # noqa: F401

__all__ = ["find_data_file", "format_clock"]
