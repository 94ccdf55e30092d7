"""Chapter list shown beside the quiz; decorative only."""

from __future__ import annotations

from dataclasses import dataclass, replace
from urllib.parse import unquote


@dataclass(slots=True, frozen=True)
class Chapter:
    name: str
    emoji: str
    active: bool = False


DEFAULT_CHAPTERS: tuple[Chapter, ...] = (
    Chapter("Thermodynamics", "🌡️", active=True),
    Chapter("Solid-state chemistry", "🔷"),
    Chapter("Solutions", "🧪"),
    Chapter("Electrochemistry", "⚡"),
    Chapter("Chemical kinetics", "⏱️"),
    Chapter("Surface chemistry", "🌊"),
    Chapter("The p block elements", "⚛️"),
    Chapter("D and f-block elements", "🔬"),
    Chapter("Coordination complex", "🧬"),
    Chapter("Haloalkanes and Haloarenes", "💧"),
    Chapter("Alcohols phenols and ethers", "🍷"),
    Chapter("Aldehydes, ketones and carboxylic acids", "🧫"),
    Chapter("Amines", "🌿"),
    Chapter("Biomolecules", "🧬"),
    Chapter("Polymer", "🔗"),
    Chapter("Chemistry in everyday life", "❤️"),
)


class ChapterCatalog:
    """Sidebar chapters with one active entry and a name filter."""

    def __init__(self, chapters: tuple[Chapter, ...] = DEFAULT_CHAPTERS) -> None:
        self._chapters = list(chapters)

    def select(self, chapter_name: str | None) -> None:
        """Mark the chapter named by the (URL-encoded) parameter as active.

        A missing parameter leaves the current selection alone; an unknown
        name leaves every chapter inactive.
        """
        if not chapter_name:
            return
        decoded = unquote(chapter_name)
        self._chapters = [replace(ch, active=ch.name == decoded) for ch in self._chapters]

    @property
    def active(self) -> Chapter | None:
        return next((ch for ch in self._chapters if ch.active), None)

    def filter(self, search: str | None = None) -> list[Chapter]:
        if not search:
            return list(self._chapters)
        needle = search.lower()
        return [ch for ch in self._chapters if needle in ch.name.lower()]
