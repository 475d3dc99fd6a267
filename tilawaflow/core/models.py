"""Immutable data records shared by the connector and the player core.

All records are frozen dataclasses: a content bundle is replaced
wholesale when the chapter or edition changes, never mutated in
place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

#: Number of surahs in the corpus; chapter numbers run 1..TOTAL_SURAHS.
TOTAL_SURAHS = 114


@dataclass(frozen=True)
class ChapterRef:
    """A surah as listed by the content provider."""

    number: int
    name: str
    english_name: str = ""
    english_name_translation: str = ""
    ayah_count: int = 0
    revelation_type: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChapterRef":
        return cls(
            number=int(data["number"]),
            name=str(data.get("name", "")),
            english_name=str(data.get("englishName", "")),
            english_name_translation=str(data.get("englishNameTranslation", "")),
            ayah_count=int(data.get("numberOfAyahs", 0)),
            revelation_type=str(data.get("revelationType", "")),
        )

    @property
    def label(self) -> str:
        return f"{self.number}. {self.english_name} ({self.name})"


@dataclass(frozen=True)
class EditionRef:
    """A reciter (audio) or translator (text) edition."""

    identifier: str
    name: str
    english_name: str = ""
    language: str = ""
    format: str = ""
    type: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "EditionRef":
        return cls(
            identifier=str(data["identifier"]),
            name=str(data.get("name", "")),
            english_name=str(data.get("englishName", "")),
            language=str(data.get("language", "")),
            format=str(data.get("format", "")),
            type=str(data.get("type", "")),
        )

    @property
    def label(self) -> str:
        return f"{self.english_name or self.identifier} ({self.name})"


@dataclass(frozen=True)
class Ayah:
    """One recitation unit: audio locator plus original and translated text."""

    number: int
    number_in_surah: int
    audio: str
    text: str
    translation: str


@dataclass(frozen=True)
class ContentBundle:
    """Everything needed to play one chapter with one reciter.

    :param chapter: The chapter the ayahs belong to.
    :param edition: Identifier of the audio edition.
    :param translation: Identifier of the translation edition.
    :param ayahs: Ordered, non-empty tuple of units.
    """

    chapter: ChapterRef
    edition: str
    translation: str
    ayahs: Tuple[Ayah, ...]

    def __post_init__(self) -> None:
        if not self.ayahs:
            raise ValueError(f"Content for surah {self.chapter.number} has no ayahs")

    def __len__(self) -> int:
        return len(self.ayahs)

    @property
    def last_index(self) -> int:
        return len(self.ayahs) - 1

    def ayah_at(self, index: int) -> Optional[Ayah]:
        if 0 <= index < len(self.ayahs):
            return self.ayahs[index]
        return None
