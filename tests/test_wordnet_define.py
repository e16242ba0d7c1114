"""
Tests for WordNet definition lookup and concurrent enrichment.

Most tests use an in-memory lexicon (see conftest.FakeLexicon). TestRealWordNet
runs against NLTK's WordNet and is skipped when the corpus is not installed.
"""

import pytest

from freqlex import wordnet_define
from freqlex.entries import EnrichedWordEntry, WordEntry
from freqlex.errors import DefinitionLookupError
from freqlex.pos_tags import GrammaticalClass
from freqlex.wordnet_define import (
    DefinitionCandidate,
    WordNetDatabase,
    enrich_entries,
    ensure_wordnet_data,
    get_definition,
    lookup_table,
    normalize_for_lookup,
    strip_accents,
)

from conftest import FakeLexicon


def entry(word, pos, freq=1):
    return WordEntry(word=word, pos=pos, freq=freq, disp=0.5, ra=1)


def _wordnet_available():
    try:
        from nltk.corpus import wordnet as wn
        wn.synsets("test")
        return True
    except LookupError:
        return False


class TestNormalization:
    """Lookup normalization (NFKC, lowercase, underscores, accent fallback)."""

    def test_normalize_basic(self):
        assert normalize_for_lookup("Hello") == "hello"
        assert normalize_for_lookup("WORLD") == "world"

    def test_normalize_keeps_accents(self):
        assert normalize_for_lookup("CAFÉ") == "café"

    def test_normalize_joins_spaces(self):
        assert normalize_for_lookup("ice cream") == "ice_cream"
        assert normalize_for_lookup("  a  priori ") == "a_priori"

    def test_normalize_preserves_hyphens_and_apostrophes(self):
        assert normalize_for_lookup("well-known") == "well-known"
        assert normalize_for_lookup("don't") == "don't"

    def test_strip_accents(self):
        assert strip_accents("café") == "cafe"
        assert strip_accents("naïve") == "naive"
        assert strip_accents("résumé") == "resume"
        assert strip_accents("hello") == "hello"


class TestGetDefinition:
    """Dispatch by grammatical class and definition selection."""

    def test_lookup_table_covers_all_classes(self, sample_lexicon):
        table = lookup_table(sample_lexicon)
        assert set(table) == set(GrammaticalClass)

    def test_definition_trimmed(self, sample_lexicon):
        table = lookup_table(sample_lexicon)
        assert get_definition(table, "desk", "noun") == "a piece of furniture"

    def test_dispatch_uses_class(self, sample_lexicon):
        table = lookup_table(sample_lexicon)
        get_definition(table, "run", "verb")
        assert sample_lexicon.calls == [("verb", "run")]

    def test_wrong_class_finds_nothing(self, sample_lexicon):
        table = lookup_table(sample_lexicon)
        assert get_definition(table, "desk", "verb") is None

    def test_first_candidate_wins(self):
        lexicon = FakeLexicon({("noun", "bank"): ["sloping land", "a financial institution"]})
        assert get_definition(lookup_table(lexicon), "bank", "noun") == "sloping land"

    def test_blank_definition_is_none(self):
        lexicon = FakeLexicon({("noun", "blank"): ["   "]})
        assert get_definition(lookup_table(lexicon), "blank", "noun") is None

    def test_no_candidates_is_none(self, sample_lexicon):
        assert get_definition(lookup_table(sample_lexicon), "zzyzx", "noun") is None

    def test_unknown_class_is_none(self, sample_lexicon):
        table = lookup_table(sample_lexicon)
        assert get_definition(table, "desk", "NoC") is None
        assert sample_lexicon.calls == []


class TestEnrichEntries:
    """Concurrent enrichment."""

    def test_desk_noun_definition(self, sample_lexicon):
        enriched = enrich_entries([WordEntry("desk", "noun", 120, 3.2, 45)], sample_lexicon)

        assert enriched == [
            EnrichedWordEntry(
                word="desk", pos="noun", freq=120, disp=3.2, ra=45,
                definition="a piece of furniture",
            )
        ]

    def test_undefined_words_dropped(self, sample_lexicon):
        entries = [entry("zzyzx", "noun"), entry("desk", "noun")]

        enriched = enrich_entries(entries, sample_lexicon)

        assert [e.word for e in enriched] == ["desk"]

    def test_order_preserved_when_lookups_finish_out_of_order(self):
        words = [f"w{i}" for i in range(12)]
        # Earlier words take longer, so completion order is reversed
        delays = {word: 0.02 * (len(words) - i) for i, word in enumerate(words)}
        lexicon = FakeLexicon({("noun", w): f"def of {w}" for w in words}, delays=delays)
        entries = [entry(w, "noun", freq=i) for i, w in enumerate(words)]

        enriched = enrich_entries(entries, lexicon, max_workers=12)

        assert [e.word for e in enriched] == words
        assert [e.definition for e in enriched] == [f"def of {w}" for w in words]

    def test_order_preserved_with_gaps(self):
        lexicon = FakeLexicon(
            {("noun", "a"): "first", ("noun", "c"): "third"},
            delays={"a": 0.05},
        )
        entries = [entry("a", "noun"), entry("b", "noun"), entry("c", "noun")]

        enriched = enrich_entries(entries, lexicon, max_workers=3)

        assert [(e.word, e.definition) for e in enriched] == [("a", "first"), ("c", "third")]

    def test_every_word_looked_up_once(self, sample_lexicon):
        entries = [entry("desk", "noun"), entry("run", "verb"), entry("happy", "adjective")]
        enrich_entries(entries, sample_lexicon, max_workers=2)
        assert sorted(sample_lexicon.calls) == [
            ("adjective", "happy"), ("noun", "desk"), ("verb", "run"),
        ]

    def test_lookup_failure_is_fatal(self):
        lexicon = FakeLexicon({("noun", "desk"): "furniture"}, fail_on={"broken"})
        entries = [entry("desk", "noun"), entry("broken", "noun")]

        with pytest.raises(DefinitionLookupError, match="broken"):
            enrich_entries(entries, lexicon)

    def test_timeout_is_fatal(self):
        lexicon = FakeLexicon({("noun", "slow"): "eventually"}, delays={"slow": 1.0})

        with pytest.raises(DefinitionLookupError, match="did not finish"):
            enrich_entries([entry("slow", "noun")], lexicon, timeout=0.05)

    def test_empty_input(self, sample_lexicon):
        assert enrich_entries([], sample_lexicon) == []

    def test_with_progress_display(self, sample_lexicon):
        enriched = enrich_entries([entry("desk", "noun")], sample_lexicon, progress=True)
        assert len(enriched) == 1


class _FakeSynset:
    def __init__(self, name, definition):
        self._name = name
        self._definition = definition

    def name(self):
        return self._name

    def definition(self):
        return self._definition


class _FakeReader:
    """Stands in for nltk's WordNet reader."""

    def __init__(self, index):
        self.index = index
        self.queries = []

    def synsets(self, lemma, pos=None):
        self.queries.append((lemma, pos))
        return self.index.get((lemma, pos), [])


class TestWordNetDatabase:
    """WordNetDatabase against a stub reader."""

    def test_candidates_from_synsets(self):
        reader = _FakeReader({("desk", "n"): [_FakeSynset("desk.n.01", "a piece of furniture")]})
        db = WordNetDatabase(reader)

        assert db.lookup_noun("Desk") == [
            DefinitionCandidate(definition="a piece of furniture", sense="desk.n.01")
        ]

    def test_pos_codes(self):
        reader = _FakeReader({})
        db = WordNetDatabase(reader)

        db.lookup_noun("x")
        db.lookup_verb("x")
        db.lookup_adjective("x")
        db.lookup_adverb("x")

        assert [pos for _, pos in reader.queries] == ["n", "v", "a", "r"]

    def test_accent_fallback(self):
        reader = _FakeReader({("cafe", "n"): [_FakeSynset("cafe.n.01", "a small restaurant")]})
        db = WordNetDatabase(reader)

        candidates = db.lookup_noun("café")

        assert [lemma for lemma, _ in reader.queries] == ["café", "cafe"]
        assert candidates[0].definition == "a small restaurant"

    def test_no_fallback_for_plain_ascii(self):
        reader = _FakeReader({})
        WordNetDatabase(reader).lookup_noun("zzyzx")
        assert len(reader.queries) == 1

    def test_empty_word(self):
        reader = _FakeReader({})
        assert WordNetDatabase(reader).lookup_noun("  ") == []
        assert reader.queries == []


class _MissingCorpus:
    def synsets(self, *args, **kwargs):
        raise LookupError("Resource wordnet not found.")


class TestEnsureWordNetData:
    def test_missing_without_download(self, monkeypatch):
        monkeypatch.setattr(wordnet_define, "wn", _MissingCorpus())

        with pytest.raises(DefinitionLookupError, match="not installed"):
            ensure_wordnet_data(download=False)

    def test_download_failure(self, monkeypatch):
        downloads = []
        monkeypatch.setattr(wordnet_define, "wn", _MissingCorpus())
        monkeypatch.setattr(wordnet_define.nltk, "download", lambda pkg, quiet=False: downloads.append(pkg) or False)

        with pytest.raises(DefinitionLookupError, match="after download"):
            ensure_wordnet_data(download=True)
        assert downloads == ["wordnet", "omw-1.4"]

    def test_data_present(self, monkeypatch):
        monkeypatch.setattr(wordnet_define, "wn", _FakeReader({}))
        ensure_wordnet_data(download=False)


@pytest.mark.skipif(not _wordnet_available(), reason="WordNet data not installed")
class TestRealWordNet:
    """Baseline behavior of NLTK WordNet lookups."""

    def test_noun_definition(self):
        definition = get_definition(lookup_table(WordNetDatabase()), "desk", "noun")
        assert definition
        assert "furniture" in definition

    def test_each_class_finds_something(self):
        table = lookup_table(WordNetDatabase())
        assert get_definition(table, "run", "verb")
        assert get_definition(table, "happy", "adjective")
        assert get_definition(table, "quickly", "adverb")

    def test_nonexistent_word(self):
        assert get_definition(lookup_table(WordNetDatabase()), "nonexistentword12345", "noun") is None

    def test_concurrent_enrichment(self):
        entries = [entry(w, "noun", freq=i) for i, w in enumerate(["desk", "castle", "dog", "table"])]
        enriched = enrich_entries(entries, WordNetDatabase(), max_workers=4)
        assert [e.word for e in enriched] == ["desk", "castle", "dog", "table"]
