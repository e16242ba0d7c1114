"""
corpus_ingest.py — Read the BNC frequency list into raw records.

Reads:
  - data/raw/en/1_1_all_fullalpha.csv (tab-delimited, HTML-entity encoded)

Each record is the list of string fields of one row. No header row is
assumed; every non-blank row is data. Only positions 1 (word), 2 (POS tag),
4 (frequency), 5 (rank) and 6 (dispersion) are used downstream.
"""

import csv
import html
import io
import logging
from pathlib import Path
from typing import List

from freqlex.errors import CorpusDecodeError, CorpusParseError, CorpusReadError


logger = logging.getLogger(__name__)

DELIMITER = '\t'


def read_corpus_text(filepath: Path, encoding: str = 'utf-8') -> str:
    """
    Read the corpus and decode HTML/XML character entities.

    The list ships entity-encoded (e.g. caf&eacute;), so entities are turned
    into literal characters before parsing.

    Raises:
        CorpusReadError: If the file cannot be read
        CorpusDecodeError: If the bytes are not valid text in `encoding`
    """
    try:
        raw = Path(filepath).read_bytes()
    except OSError as e:
        raise CorpusReadError(f"Cannot read corpus {filepath}: {e}") from e

    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise CorpusDecodeError(
            f"Corpus {filepath} is not valid {encoding} (byte {e.start}): {e.reason}"
        ) from e
    except LookupError as e:
        raise CorpusDecodeError(f"Unknown corpus encoding {encoding!r}") from e

    return html.unescape(text)


def parse_records(text: str) -> List[List[str]]:
    """
    Parse tab-delimited text into records.

    Blank lines are skipped rather than read as one-field rows, so they
    never fail the width check. Every other row must have the
    same number of fields as the first one.

    Raises:
        CorpusParseError: On an unterminated or misplaced quoted field, or on
            an inconsistent field count
    """
    reader = csv.reader(io.StringIO(text, newline=''), delimiter=DELIMITER, strict=True)

    records = []
    expected_width = None
    try:
        for row in reader:
            if not row:
                continue

            if expected_width is None:
                expected_width = len(row)
            elif len(row) != expected_width:
                raise CorpusParseError(
                    f"Line {reader.line_num}: expected {expected_width} fields, got {len(row)}"
                )

            records.append(row)
    except csv.Error as e:
        raise CorpusParseError(f"Line {reader.line_num}: {e}") from e

    return records


def load_corpus(filepath: Path, encoding: str = 'utf-8') -> List[List[str]]:
    """Read, decode and parse the corpus file."""
    logger.info(f"Reading corpus from {filepath}")

    records = parse_records(read_corpus_text(filepath, encoding))

    logger.info(f"  -> Parsed {len(records):,} rows")
    return records
