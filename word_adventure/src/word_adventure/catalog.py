"""
Word Catalog

Read-only vocabulary catalog consumed by the word session generator.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Union

WordId = Union[int, str]

DIFFICULTIES = ("easy", "medium", "hard")


@dataclass(frozen=True)
class Word:
    """A single vocabulary item."""
    id: WordId
    word: str
    category: str
    difficulty: str  # "easy", "medium", "hard"
    definition: str = ""
    example: str = ""
    emoji: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "word": self.word,
            "category": self.category,
            "difficulty": self.difficulty,
            "definition": self.definition,
            "example": self.example,
            "emoji": self.emoji,
        }


class WordCatalog:
    """
    Immutable collection of words, indexed by id, difficulty and category.

    Catalog order is preserved so selection is reproducible under a seeded RNG.
    """

    def __init__(self, words: Iterable[Word]):
        self._words: List[Word] = list(words)
        self._by_id: Dict[WordId, Word] = {}
        for word in self._words:
            if word.difficulty not in DIFFICULTIES:
                raise ValueError(f"Unknown difficulty {word.difficulty!r} for word {word.id!r}")
            if word.id in self._by_id:
                raise ValueError(f"Duplicate word id {word.id!r} in catalog")
            self._by_id[word.id] = word

    @classmethod
    def from_dicts(cls, rows: Iterable[Dict[str, object]]) -> "WordCatalog":
        return cls(Word(**row) for row in rows)

    def __iter__(self) -> Iterator[Word]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word_id: object) -> bool:
        return word_id in self._by_id

    def get(self, word_id: WordId) -> Optional[Word]:
        return self._by_id.get(word_id)

    def by_difficulty(self, difficulty: str) -> List[Word]:
        return [w for w in self._words if w.difficulty == difficulty]

    def by_category(self, category: str) -> List[Word]:
        if category == "all":
            return list(self._words)
        return [w for w in self._words if w.category == category]

    def categories(self) -> List[str]:
        """Sorted distinct categories."""
        return sorted({w.category for w in self._words})


def load_default_catalog() -> WordCatalog:
    """Catalog built from the bundled sample vocabulary."""
    from word_adventure.sample_words import SAMPLE_WORDS
    return WordCatalog.from_dicts(SAMPLE_WORDS)
