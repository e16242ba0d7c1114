"""
wordnet_define.py — Attach WordNet definitions to word entries.

Each entry is looked up by (word, grammatical class):
  - noun      -> lookup_noun
  - verb      -> lookup_verb
  - adjective -> lookup_adjective (includes adjective satellites)
  - adverb    -> lookup_adverb

The first candidate's definition is kept, whitespace-trimmed. Words with no
candidate (or an empty definition) are dropped from the list.

Lookups run concurrently on a thread pool; results are gathered back in the
input order, so the frequency sort survives enrichment unchanged.

Uses NLTK's WordNet interface.
"""

import logging
import threading
import unicodedata
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence

import nltk
from nltk.corpus import wordnet as wn
from nltk.corpus.reader.wordnet import ADJ, ADV, NOUN, VERB

from freqlex.entries import EnrichedWordEntry, WordEntry
from freqlex.errors import DefinitionLookupError
from freqlex.pos_tags import GrammaticalClass
from freqlex.progress_display import ProgressDisplay


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefinitionCandidate:
    """One sense returned by the lexical database."""

    definition: str
    sense: str = ""


class LexicalDatabase(Protocol):
    """Read-only dictionary with one lookup per grammatical class."""

    def lookup_noun(self, word: str) -> Sequence[DefinitionCandidate]: ...

    def lookup_verb(self, word: str) -> Sequence[DefinitionCandidate]: ...

    def lookup_adjective(self, word: str) -> Sequence[DefinitionCandidate]: ...

    def lookup_adverb(self, word: str) -> Sequence[DefinitionCandidate]: ...


LookupFn = Callable[[str], Sequence[DefinitionCandidate]]


def ensure_wordnet_data(download: bool = True):
    """
    Make sure the WordNet corpus is loadable, downloading it if allowed.

    Raises:
        DefinitionLookupError: If the data is missing and cannot be fetched
    """
    try:
        wn.synsets('test')
        logger.info("WordNet data found")
        return
    except LookupError as e:
        if not download:
            raise DefinitionLookupError(
                "WordNet data not installed (run: python -m nltk.downloader wordnet)"
            ) from e

    logger.info("Downloading WordNet data...")
    nltk.download('wordnet', quiet=True)
    nltk.download('omw-1.4', quiet=True)  # Open Multilingual WordNet

    try:
        wn.synsets('test')
    except LookupError as e:
        raise DefinitionLookupError(f"WordNet data unavailable after download: {e}") from e
    logger.info("WordNet data downloaded")


def normalize_for_lookup(word: str) -> str:
    """
    Normalize a corpus word for WordNet lookup.

    NFKC, lowercase, and spaces joined with underscores the way WordNet
    stores collocations ("ice cream" -> "ice_cream").
    """
    normalized = unicodedata.normalize('NFKC', word).strip().lower()
    return '_'.join(normalized.split())


def strip_accents(word: str) -> str:
    """
    Strip accents for a fallback lookup.

    Example: café -> cafe, naïve -> naive
    """
    nfd = unicodedata.normalize('NFD', word)
    without_accents = ''.join(
        char for char in nfd
        if not unicodedata.combining(char)
    )
    return unicodedata.normalize('NFC', without_accents)


class WordNetDatabase:
    """
    LexicalDatabase backed by NLTK's WordNet corpus reader.

    The reader seeks on shared data file handles, so every query holds one
    lock. Lookups from many threads are safe but run one at a time.
    """

    def __init__(self, reader=None):
        self._wn = reader if reader is not None else wn
        self._lock = threading.Lock()

    def _lookup(self, word: str, pos: str) -> List[DefinitionCandidate]:
        normalized = normalize_for_lookup(word)
        if not normalized:
            return []

        with self._lock:
            synsets = self._wn.synsets(normalized, pos=pos)

            # If no results and word has accents, try without accents
            if not synsets and normalized != strip_accents(normalized):
                synsets = self._wn.synsets(strip_accents(normalized), pos=pos)

            return [
                DefinitionCandidate(definition=synset.definition(), sense=synset.name())
                for synset in synsets
            ]

    def lookup_noun(self, word: str) -> List[DefinitionCandidate]:
        return self._lookup(word, NOUN)

    def lookup_verb(self, word: str) -> List[DefinitionCandidate]:
        return self._lookup(word, VERB)

    def lookup_adjective(self, word: str) -> List[DefinitionCandidate]:
        return self._lookup(word, ADJ)

    def lookup_adverb(self, word: str) -> List[DefinitionCandidate]:
        return self._lookup(word, ADV)


def lookup_table(db: LexicalDatabase) -> Dict[GrammaticalClass, LookupFn]:
    """Map each grammatical class to the database lookup that serves it."""
    return {
        GrammaticalClass.NOUN: db.lookup_noun,
        GrammaticalClass.VERB: db.lookup_verb,
        GrammaticalClass.ADJECTIVE: db.lookup_adjective,
        GrammaticalClass.ADVERB: db.lookup_adverb,
    }


def get_definition(lookups: Dict[GrammaticalClass, LookupFn], word: str, pos: str) -> Optional[str]:
    """
    Look up the first definition of a word for its grammatical class.

    Returns:
        Trimmed definition, or None if the class is unknown, the database has
        no candidates, or the first definition is blank
    """
    try:
        lookup = lookups[GrammaticalClass(pos)]
    except (ValueError, KeyError):
        return None

    candidates = lookup(word)
    if not candidates:
        return None

    definition = getattr(candidates[0], 'definition', None)
    if not definition:
        return None

    definition = definition.strip()
    return definition or None


def _define(lookups: Dict[GrammaticalClass, LookupFn], entry: WordEntry) -> Optional[str]:
    """Worker: one lookup, with database failures made fatal."""
    try:
        return get_definition(lookups, entry.word, entry.pos)
    except DefinitionLookupError:
        raise
    except Exception as e:
        raise DefinitionLookupError(
            f"Lookup failed for {entry.word!r} ({entry.pos}): {e}"
        ) from e


def enrich_entries(
    entries: Sequence[WordEntry],
    db: LexicalDatabase,
    max_workers: int = 8,
    timeout: Optional[float] = 300.0,
    progress: bool = False,
) -> List[EnrichedWordEntry]:
    """
    Attach definitions to entries, dropping the ones without any.

    Args:
        entries: Sorted, remapped word entries
        db: Lexical database to query
        max_workers: Thread pool size
        timeout: Seconds allowed for all lookups together (None = no limit)
        progress: Show a live progress panel

    Returns:
        Enriched entries, in the same relative order as `entries`

    Raises:
        DefinitionLookupError: On the first failed lookup, or on timeout

    Lookups already running when the run fails are not interrupted. The pool
    threads are joined at interpreter exit, so a lookup that never returns
    still holds the process open after the error is reported.
    """
    lookups = lookup_table(db)

    logger.info(f"Looking up definitions for {len(entries):,} entries ({max_workers} workers)")

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='wordnet')
    try:
        with ProgressDisplay("Looking up definitions", total=len(entries), enabled=progress) as display:
            futures = [executor.submit(_define, lookups, entry) for entry in entries]
            try:
                for future in as_completed(futures, timeout=timeout):
                    display.advance(found=future.result() is not None)
            except FuturesTimeoutError as e:
                raise DefinitionLookupError(
                    f"Definition lookups did not finish within {timeout:g}s"
                ) from e
    finally:
        # After a failure, lookups still queued are cancelled
        executor.shutdown(wait=False, cancel_futures=True)

    enriched = [
        EnrichedWordEntry.from_entry(entry, definition)
        for entry, definition in zip(entries, (future.result() for future in futures))
        if definition
    ]

    logger.info(f"  Defined: {len(enriched):,}")
    logger.info(f"  Dropped (no definition): {len(entries) - len(enriched):,}")
    return enriched
