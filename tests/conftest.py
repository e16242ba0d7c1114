"""Pytest configuration and shared fixtures."""
import pytest
import tempfile
import threading
import time
from pathlib import Path

from freqlex.pos_tags import load_pos_tables
from freqlex.wordnet_define import DefinitionCandidate


class FakeLexicon:
    """In-memory lexical database keyed by (class, word).

    Optional per-word delays let tests finish lookups out of order.
    """

    def __init__(self, definitions, delays=None, fail_on=None):
        self.definitions = definitions
        self.delays = delays or {}
        self.fail_on = set(fail_on or ())
        self.calls = []
        self._lock = threading.Lock()

    def _lookup(self, grammatical_class, word):
        with self._lock:
            self.calls.append((grammatical_class, word))
        if word in self.fail_on:
            raise RuntimeError("database unavailable")
        time.sleep(self.delays.get(word, 0))
        found = self.definitions.get((grammatical_class, word))
        if found is None:
            return []
        if isinstance(found, str):
            found = [found]
        return [DefinitionCandidate(definition=text) for text in found]

    def lookup_noun(self, word):
        return self._lookup("noun", word)

    def lookup_verb(self, word):
        return self._lookup("verb", word)

    def lookup_adjective(self, word):
        return self._lookup("adjective", word)

    def lookup_adverb(self, word):
        return self._lookup("adverb", word)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def pos_tables():
    """The packaged BNC part-of-speech tables."""
    return load_pos_tables()


@pytest.fixture
def sample_rows():
    """Corpus rows in the 1_1_all_fullalpha column layout.

    Columns: (blank), word, POS, (blank), freq, range, dispersion.
    """
    return [
        ["", "desk", "NoC", "x", "120", "45", "3.2"],
        ["", "desks", "NoC", "@", "40", "30", "0.88"],
        ["", "run", "Verb", "%", "300", "99", "0.95"],
        ["", "quickly", "Adv", "%", "120", "40", "0.91"],
        ["", "happy", "Adj", "%", "120", "45", "0.80"],
        ["", "five", "Num", "%", "50", "10", "0.99"],
        ["", "Paris", "NoP", "%", "80", "70", "0.70"],
        ["", "can", "VMod", "%", "900", "100", "0.97"],
        ["", "zzyzx", "NoC", "%", "1", "1", "0.10"],
    ]


@pytest.fixture
def sample_lexicon():
    """Definitions for the sample rows (zzyzx is deliberately missing)."""
    return FakeLexicon({
        ("noun", "desk"): "  a piece of furniture  ",
        ("verb", "run"): "move fast by using one's feet",
        ("adverb", "quickly"): "with rapid movements",
        ("adjective", "happy"): "enjoying or showing joy",
        ("adverb", "can"): "be able to",
    })


@pytest.fixture
def write_corpus(temp_dir):
    """Write rows as a tab-delimited corpus file and return its path."""
    def _write(rows, name="corpus.csv"):
        path = temp_dir / name
        text = "".join("\t".join(row) + "\n" for row in rows)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
