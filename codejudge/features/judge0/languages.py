from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from .errors import UnsupportedLanguage
from .schemas import LanguageInfo

# Judge0 CE language ids, see https://ce.judge0.com/languages/all
LANGUAGE_IDS: Dict[str, int] = {
    "JAVASCRIPT": 63,  # Node.js 12.14.0
    "PYTHON": 71,  # Python 3.8.1
    "JAVA": 62,  # OpenJDK 13.0.1
    "CPP": 54,  # C++ (GCC 9.2.0)
    "C": 50,  # C (GCC 9.2.0)
}


class LanguageRegistry:
    """Maps symbolic language names onto Judge0 numeric language ids."""

    def __init__(self, table: Optional[Mapping[str, int]] = None) -> None:
        self._table: Dict[str, int] = dict(LANGUAGE_IDS if table is None else table)

    def resolve(self, language: str) -> int:
        language_id = self._table.get(language)
        if language_id is None:
            raise UnsupportedLanguage(language)
        return language_id

    def supported(self) -> List[LanguageInfo]:
        return [LanguageInfo(id=lid, name=name) for name, lid in self._table.items()]

    def __contains__(self, language: object) -> bool:
        return language in self._table


default_registry = LanguageRegistry()


def resolve(language: str) -> int:
    return default_registry.resolve(language)


def supported_languages() -> List[LanguageInfo]:
    return default_registry.supported()
