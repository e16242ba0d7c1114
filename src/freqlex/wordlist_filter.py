"""
wordlist_filter.py — Turn raw corpus records into sorted, remapped word entries.

Steps (in order):
  1. Drop alternate word forms (any field containing '@')
  2. Project fixed columns: word=1, pos=2, freq=4, ra=5, disp=6
  3. Keep only allowed part-of-speech tags
  4. Sort ascending by (freq, disp, ra)
  5. Remap corpus tags to grammatical classes (noun/verb/adjective/adverb)

Numbers are parsed leniently by default: a leading numeric prefix is accepted
("12abc" -> 12) and anything else becomes NaN. A NaN key never decides an
ordering; the comparison falls through to the next key instead.
"""

import logging
import math
import re
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Iterable, List, Sequence, Tuple

from freqlex.entries import Number, WordEntry
from freqlex.errors import CorpusParseError
from freqlex.pos_tags import PosTagTables


logger = logging.getLogger(__name__)

# Alternate forms (plurals etc.) use '@' as a placeholder to keep the tab
# columns aligned. They are not part of the word list.
ALTERNATE_FORM_MARKER = '@'

WORD_FIELD = 1
POS_FIELD = 2
FREQ_FIELD = 4
RANK_FIELD = 5
DISP_FIELD = 6

SORT_KEYS = ('freq', 'disp', 'ra')

# Integers past this are not exact as doubles; they are kept as floats
MAX_SAFE_INTEGER = 2 ** 53 - 1

# Sign, then either a 0x hex prefix with its digits or decimal digits
_INT_PREFIX_RE = re.compile(r'^\s*([+-]?)(?:0[xX]([0-9a-fA-F]*)|(\d+))')
_FLOAT_PREFIX_RE = re.compile(
    r'^\s*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity))'
)


@dataclass
class FilterStats:
    """Row counts per filter step."""

    records_in: int = 0
    alternate_forms_skipped: int = 0
    disallowed_pos_skipped: int = 0
    entries_out: int = 0
    entries_with_nan: int = 0


def parse_int(value: str) -> Number:
    """
    Parse the leading integer of a string, or NaN if there is none.

    A 0x prefix reads the digits as hex ("0x10" -> 16, "0xg" -> NaN).
    Magnitudes above MAX_SAFE_INTEGER come back as floats, so every value
    fits a JSON number.
    """
    match = _INT_PREFIX_RE.match(value or '')
    if not match:
        return math.nan

    sign, hex_digits, digits = match.groups()
    if hex_digits is not None:
        if not hex_digits:
            return math.nan
        number = int(hex_digits, 16)
    else:
        number = int(digits)
    if sign == '-':
        number = -number

    if abs(number) > MAX_SAFE_INTEGER:
        return float(number)
    return number


def parse_float(value: str) -> float:
    """Parse the leading decimal number of a string, or NaN if there is none."""
    match = _FLOAT_PREFIX_RE.match(value or '')
    if not match:
        return math.nan
    return float(match.group(1).replace('Infinity', 'inf'))


def _is_nan(value: Number) -> bool:
    return isinstance(value, float) and math.isnan(value)


def exclude_alternate_forms(records: Iterable[Sequence[str]]) -> List[Sequence[str]]:
    """Drop every record with the alternate-form marker in any field."""
    return [
        record for record in records
        if not any(ALTERNATE_FORM_MARKER in field for field in record)
    ]


def _field(record: Sequence[str], index: int) -> str:
    return record[index] if index < len(record) else ''


def project_record(record: Sequence[str], strict_numbers: bool = False) -> WordEntry:
    """
    Map a raw record to a WordEntry using the fixed column positions.

    Raises:
        CorpusParseError: In strict mode, if a numeric field does not parse
    """
    entry = WordEntry(
        word=_field(record, WORD_FIELD),
        pos=_field(record, POS_FIELD),
        freq=parse_int(_field(record, FREQ_FIELD)),
        disp=parse_float(_field(record, DISP_FIELD)),
        ra=parse_int(_field(record, RANK_FIELD)),
    )

    if strict_numbers:
        bad = [key for key in SORT_KEYS if _is_nan(getattr(entry, key))]
        if bad:
            raise CorpusParseError(
                f"Unparseable {', '.join(bad)} for word {entry.word!r}: {list(record)!r}"
            )

    return entry


def filter_allowed(entries: Iterable[WordEntry], tables: PosTagTables) -> List[WordEntry]:
    """Keep entries whose corpus tag is allowed."""
    return [entry for entry in entries if tables.is_allowed(entry.pos)]


def compare_entries(a: WordEntry, b: WordEntry) -> int:
    """
    Compare two entries by (freq, disp, ra).

    A zero or NaN difference on a key moves on to the next key, so NaN values
    never order an entry before or after another on that key.
    """
    for key in SORT_KEYS:
        diff = getattr(a, key) - getattr(b, key)
        if diff and not math.isnan(diff):
            return -1 if diff < 0 else 1
    return 0


def sort_entries(entries: Iterable[WordEntry]) -> List[WordEntry]:
    """Stable ascending sort by (freq, disp, ra)."""
    return sorted(entries, key=cmp_to_key(compare_entries))


def remap_pos(entries: Iterable[WordEntry], tables: PosTagTables) -> List[WordEntry]:
    """
    Replace each corpus tag with its grammatical class name.

    Raises:
        PosMappingError: If an entry's tag has no class (table invariant broken)
    """
    return [replace(entry, pos=tables.class_for(entry.pos).value) for entry in entries]


def build_word_entries(
    records: Sequence[Sequence[str]],
    tables: PosTagTables,
    strict_numbers: bool = False,
) -> Tuple[List[WordEntry], FilterStats]:
    """
    Run every filter/transform step over the raw records.

    Args:
        records: Raw corpus records
        tables: Part-of-speech tables
        strict_numbers: Raise on unparseable numbers instead of using NaN

    Returns:
        (sorted, remapped entries, per-step statistics)
    """
    stats = FilterStats(records_in=len(records))

    relevant = exclude_alternate_forms(records)
    stats.alternate_forms_skipped = len(records) - len(relevant)

    projected = [project_record(record, strict_numbers) for record in relevant]

    allowed = filter_allowed(projected, tables)
    stats.disallowed_pos_skipped = len(projected) - len(allowed)

    entries = remap_pos(sort_entries(allowed), tables)
    stats.entries_out = len(entries)
    stats.entries_with_nan = sum(
        1 for entry in entries
        if any(_is_nan(getattr(entry, key)) for key in SORT_KEYS)
    )

    logger.info(f"  Alternate forms skipped: {stats.alternate_forms_skipped:,}")
    logger.info(f"  Disallowed POS skipped: {stats.disallowed_pos_skipped:,}")
    logger.info(f"  Entries kept: {stats.entries_out:,}")
    if stats.entries_with_nan:
        logger.warning(f"  {stats.entries_with_nan:,} entries have unparseable numbers (NaN)")

    return entries, stats
