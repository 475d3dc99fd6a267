"""Locate files shipped next to the code.

The bundled defaults (``config_default_settings.json``) are looked up
by name in a short list of directories, so the same lookup works from
a source checkout (``python -m tilawaflow.main``), from an installed
wheel, and when a user drops an edited copy into the working
directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

_PACKAGE_DIR = Path(__file__).resolve().parents[1]
_REPO_ROOT = _PACKAGE_DIR.parent


def search_dirs() -> List[Path]:
    """Directories searched by :func:`find_data_file`, highest priority first.

    The working directory wins over the repository root, which wins over
    the installed package directory.
    """
    return [Path.cwd(), _REPO_ROOT, _PACKAGE_DIR]


def find_data_file(filename: str) -> Path:
    """Return the first existing *filename* in :func:`search_dirs`.

    :raises FileNotFoundError: If no directory contains the file.
    """
    tried = [directory / filename for directory in search_dirs()]
    for path in tried:
        if path.is_file():
            return path
    raise FileNotFoundError(
        f"{filename!r} not found; looked in " + ", ".join(str(path.parent) for path in tried)
    )
