"""Connector for the AlQuran Cloud API.

This connector wraps the public REST API at ``api.alquran.cloud``.
Every response is a JSON envelope of the form
``{"code": 200, "status": "OK", "data": ...}``; on failure ``data``
usually carries a human readable message which is passed on in the
raised :class:`ContentError`.

Endpoints used:

* ``surah``                                   – list of all surahs
* ``edition?format=audio&language=ar``        – reciter editions
* ``edition?language=xx&type=translation&format=text`` – translations
* ``surah/{n}/editions/{audio},{text},{translation}``  – the content of
  one surah in three editions with a single call

Should these endpoints change, adjust the URL construction accordingly.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..core.models import Ayah, ChapterRef, ContentBundle, EditionRef
from .base import BaseConnector, ContentError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.alquran.cloud/v1"
DEFAULT_TEXT_EDITION = "quran-uthmani"

# Placeholders for positions missing from the text or translation edition.
BASMALAH_TEXT = "بِسْمِ ٱللَّهِ ٱلرَّحْمَٰنِ ٱلرَّحِيمِ"
BASMALAH_TRANSLATION = "In the name of Allah, the Entirely Merciful, the Especially Merciful."


class AlQuranConnector(BaseConnector):
    """Fetch surahs, editions and recitation content from AlQuran Cloud.

    :param base_url: The base URL for the API.
    :param text_edition: Edition supplying the original Arabic text.
    :param timeout: Request timeout in seconds.
    :param session: Optional pre-configured ``requests.Session``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        text_edition: str = DEFAULT_TEXT_EDITION,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.text_edition = text_edition
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------ #
    # Low‑level request helper
    # ------------------------------------------------------------------ #
    def _request(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        """Send a GET request and return the envelope's ``data`` payload.

        :raises ContentError: On transport failure, a non‑200 status, or
            an envelope whose ``code`` is not 200.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.get(
                url,
                params=params or {},
                headers={"User-Agent": "TilawaFlow/0.1"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ContentError(f"Request to {url} failed: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code != 200 or not isinstance(payload, dict) or payload.get("code") != 200:
            message = payload.get("data") if isinstance(payload, dict) else None
            if not isinstance(message, str) or not message:
                message = f"AlQuran API responded with status {resp.status_code} for {url}"
            raise ContentError(message)
        return payload.get("data")

    # ------------------------------------------------------------------ #
    # Catalogue
    # ------------------------------------------------------------------ #
    def list_chapters(self) -> List[ChapterRef]:
        data = self._request("surah")
        if not isinstance(data, list):
            raise ContentError("Invalid data structure received for surahs.")
        try:
            return [ChapterRef.from_api(item) for item in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise ContentError(f"Invalid surah entry: {exc}") from exc

    def list_editions(self) -> List[EditionRef]:
        data = self._request("edition", params={"format": "audio", "language": "ar"})
        if not isinstance(data, list):
            raise ContentError("Invalid data structure received for editions.")
        # Only keep editions that really are Arabic audio recitations.
        return [
            EditionRef.from_api(item)
            for item in data
            if isinstance(item, dict)
            and str(item.get("identifier", "")).startswith("ar.")
            and item.get("format") == "audio"
        ]

    def list_translations(self, language: str = "en") -> List[EditionRef]:
        data = self._request(
            "edition",
            params={"language": language, "type": "translation", "format": "text"},
        )
        if not isinstance(data, list):
            raise ContentError("Invalid data structure received for translations.")
        return [EditionRef.from_api(item) for item in data if isinstance(item, dict) and item.get("identifier")]

    # ------------------------------------------------------------------ #
    # Content
    # ------------------------------------------------------------------ #
    def get_content(self, chapter: int, edition: str, translation: str) -> ContentBundle:
        """Fetch audio, original text and translation of *chapter* in one call.

        Editions are matched on their nested ``edition.identifier``.
        Ayahs are aligned by position; a missing text or translation
        falls back to the Basmalah rather than failing the whole
        surah, while a missing audio locator is an error.
        """
        editions = f"{edition},{self.text_edition},{translation}"
        data = self._request(f"surah/{chapter}/editions/{editions}")
        if not isinstance(data, list):
            raise ContentError(f"Invalid data structure received for surah {chapter}.")

        by_identifier: Dict[str, Dict[str, Any]] = {}
        for item in data:
            if isinstance(item, dict):
                identifier = (item.get("edition") or {}).get("identifier")
                if identifier:
                    by_identifier.setdefault(identifier, item)

        wanted = (("audio", edition), ("text", self.text_edition), ("translation", translation))
        missing = [f"{label} ({key})" for label, key in wanted if key not in by_identifier]
        if missing:
            raise ContentError(
                f"Missing {', '.join(missing)} edition for surah {chapter}."
            )

        audio_data = by_identifier[edition]
        text_ayahs = by_identifier[self.text_edition].get("ayahs") or []
        translation_ayahs = by_identifier[translation].get("ayahs") or []

        ayahs: List[Ayah] = []
        for i, item in enumerate(audio_data.get("ayahs") or []):
            locator = item.get("audio") or next(iter(item.get("audioSecondary") or []), "")
            if not locator:
                raise ContentError(
                    f"No audio for ayah {item.get('numberInSurah', i + 1)} of surah {chapter}."
                )
            ayahs.append(
                Ayah(
                    number=int(item.get("number", 0)),
                    number_in_surah=int(item.get("numberInSurah", i + 1)),
                    audio=locator,
                    text=_text_at(text_ayahs, i) or BASMALAH_TEXT,
                    translation=_text_at(translation_ayahs, i) or BASMALAH_TRANSLATION,
                )
            )
        if not ayahs:
            raise ContentError(f"Surah {chapter} returned no ayahs.")

        try:
            chapter_ref = ChapterRef.from_api(audio_data)
        except (KeyError, TypeError, ValueError) as exc:
            raise ContentError(f"Invalid surah header for surah {chapter}: {exc}") from exc
        logger.info("Loaded surah %s (%d ayahs) with %s", chapter, len(ayahs), edition)
        return ContentBundle(chapter=chapter_ref, edition=edition, translation=translation, ayahs=tuple(ayahs))


def _text_at(ayahs: List[Dict[str, Any]], index: int) -> str:
    if index < len(ayahs) and isinstance(ayahs[index], dict):
        return str(ayahs[index].get("text") or "")
    return ""
