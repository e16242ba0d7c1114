"""Word list entry records."""

from dataclasses import dataclass
from typing import Dict, Union

# Numeric fields fall back to float('nan') when the corpus value is unparseable.
Number = Union[int, float]


@dataclass(frozen=True)
class WordEntry:
    """A corpus row projected to the fields the word list keeps."""

    word: str
    pos: str
    freq: Number
    disp: Number
    ra: Number

    def to_dict(self) -> Dict:
        return {
            "word": self.word,
            "pos": self.pos,
            "freq": self.freq,
            "disp": self.disp,
            "ra": self.ra,
        }


@dataclass(frozen=True)
class EnrichedWordEntry(WordEntry):
    """A word entry with its (trimmed, non-empty) dictionary definition."""

    definition: str = ""

    @classmethod
    def from_entry(cls, entry: WordEntry, definition: str) -> "EnrichedWordEntry":
        return cls(
            word=entry.word,
            pos=entry.pos,
            freq=entry.freq,
            disp=entry.disp,
            ra=entry.ra,
            definition=definition,
        )

    def to_dict(self) -> Dict:
        data = super().to_dict()
        data["definition"] = self.definition
        return data
