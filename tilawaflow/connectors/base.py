"""Abstract base classes for content connectors.

Connectors are responsible for fetching the surah list, the available
reciter and translator editions, and the combined audio/text/
translation content of one surah.  To ensure a consistent interface
across backends, all connectors should inherit from
:class:`BaseConnector` and implement the abstract methods defined
therein.
"""

from __future__ import annotations

import abc
from typing import List

from ..core.models import ChapterRef, ContentBundle, EditionRef


class ContentError(Exception):
    """Content could not be retrieved or the response was incomplete.

    The message is meant for display: it carries the server-provided
    message when one is available, or names the missing component.
    """


class BaseConnector(abc.ABC):
    """Abstract base class defining the minimal connector interface."""

    @abc.abstractmethod
    def list_chapters(self) -> List[ChapterRef]:
        """Return all surahs in order.

        :raises ContentError: If the response is malformed or the call fails.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def list_editions(self) -> List[EditionRef]:
        """Return the audio-capable Arabic recitation editions."""
        raise NotImplementedError

    @abc.abstractmethod
    def list_translations(self, language: str = "en") -> List[EditionRef]:
        """Return the text translation editions for *language*."""
        raise NotImplementedError

    @abc.abstractmethod
    def get_content(self, chapter: int, edition: str, translation: str) -> ContentBundle:
        """Return the ayahs of *chapter* recited by *edition*.

        :param chapter: Surah number (1-based).
        :param edition: Identifier of the audio edition, e.g. ``"ar.alafasy"``.
        :param translation: Identifier of the translation, e.g. ``"en.sahih"``.
        :raises ContentError: If any of the audio, original text or
            translation editions is missing, or the call fails.
        """
        raise NotImplementedError
