"""Scoped event listeners for one audio source.

A :class:`ListenerScope` is opened when a source becomes current and
closed before the next source is installed, so callbacks bound to a
superseded ayah can never fire.  ``close`` keeps removing the
remaining listeners even if one removal fails.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .resource import AudioResource

logger = logging.getLogger(__name__)


class ListenerScope:
    """Listeners installed on *resource* for the lifetime of *source*."""

    def __init__(self, resource: AudioResource, source: str) -> None:
        self.resource = resource
        self.source = source
        self._tokens: List[int] = []
        self.closed = False

    def install(self, bindings: Dict[str, Callable[..., None]]) -> "ListenerScope":
        try:
            for event, callback in bindings.items():
                self._tokens.append(self.resource.subscribe(event, callback))
        except Exception:
            self.close()
            raise
        return self

    def close(self) -> None:
        tokens, self._tokens = self._tokens, []
        self.closed = True
        first_error: Optional[Exception] = None
        for token in tokens:
            try:
                self.resource.unsubscribe(token)
            except Exception as exc:
                logger.warning("Failed to remove audio listener %s for %s: %s", token, self.source, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "ListenerScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._tokens)
