#!/usr/bin/env python3
"""
Word frequency list build pipeline.

Reads the BNC frequency list, keeps content words (nouns, verbs, adjectives,
adverbs), sorts them by (frequency, dispersion, rank), attaches a WordNet
definition to each and writes the result as JSON.

Usage:
    uv run freqlex
    uv run freqlex --input 1_1_all_fullalpha.csv --output wordFreqList.json
    uv run python -m freqlex.pipeline --config build.yaml --workers 16

Pipeline:
    corpus -> alternate-form filter -> POS filter -> sort -> remap
           -> WordNet definitions -> JSON
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from freqlex.config import PipelineConfig, load_config
from freqlex.corpus_ingest import load_corpus
from freqlex.entries import EnrichedWordEntry
from freqlex.errors import FreqlexError
from freqlex.export_json import write_json_atomic
from freqlex.pos_tags import load_pos_tables
from freqlex.wordlist_filter import build_word_entries
from freqlex.wordnet_define import (
    LexicalDatabase,
    WordNetDatabase,
    enrich_entries,
    ensure_wordnet_data,
)


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Counts from one pipeline run."""

    rows_read: int = 0
    alternate_forms_skipped: int = 0
    disallowed_pos_skipped: int = 0
    entries_sorted: int = 0
    undefined_dropped: int = 0
    entries_written: int = 0

    def log(self):
        logger.info("")
        logger.info("Statistics:")
        logger.info(f"  Rows read: {self.rows_read:,}")
        logger.info(f"  Alternate forms skipped: {self.alternate_forms_skipped:,}")
        logger.info(f"  Disallowed POS skipped: {self.disallowed_pos_skipped:,}")
        logger.info(f"  Entries sorted: {self.entries_sorted:,}")
        logger.info(f"  No definition (dropped): {self.undefined_dropped:,}")
        logger.info(f"  Entries written: {self.entries_written:,}")


def build_word_list(
    config: PipelineConfig, db: LexicalDatabase
) -> Tuple[List[EnrichedWordEntry], RunReport]:
    """
    Run load, filter and enrich stages without writing anything.

    Returns:
        (enriched entries, RunReport with everything but entries_written)
    """
    tables = load_pos_tables(config.pos_tables_path)

    records = load_corpus(config.input_path, config.encoding)

    logger.info("Filtering and sorting entries...")
    entries, stats = build_word_entries(records, tables, strict_numbers=config.strict_numbers)

    enriched = enrich_entries(
        entries,
        db,
        max_workers=config.max_workers,
        timeout=config.lookup_timeout,
        progress=config.show_progress,
    )

    report = RunReport(
        rows_read=stats.records_in,
        alternate_forms_skipped=stats.alternate_forms_skipped,
        disallowed_pos_skipped=stats.disallowed_pos_skipped,
        entries_sorted=stats.entries_out,
        undefined_dropped=stats.entries_out - len(enriched),
    )
    return enriched, report


def run_pipeline(config: PipelineConfig, db: Optional[LexicalDatabase] = None) -> RunReport:
    """
    Build the word list and write it to config.output_path.

    Args:
        config: Pipeline configuration
        db: Lexical database (default: WordNet via NLTK)

    Raises:
        FreqlexError: Any stage failure; nothing is written in that case
    """
    logger.info("Word frequency list build")
    logger.info(f"  Input: {config.input_path}")
    logger.info(f"  Output: {config.output_path}")

    if db is None:
        ensure_wordnet_data(download=config.download_wordnet)
        db = WordNetDatabase()

    enriched, report = build_word_list(config, db)

    write_json_atomic(enriched, config.output_path, indent=config.indent)
    report.entries_written = len(enriched)

    report.log()
    logger.info("")
    logger.info("Word frequency list build complete")
    return report


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Build a JSON word list with WordNet definitions from the BNC frequency list'
    )
    parser.add_argument('--config', type=Path,
                        help='YAML config file (fields of PipelineConfig)')
    parser.add_argument('--input', type=Path, dest='input_path',
                        help='Tab-delimited corpus file')
    parser.add_argument('--output', type=Path, dest='output_path',
                        help='Output JSON file')
    parser.add_argument('--workers', type=int, dest='max_workers',
                        help='Concurrent definition lookups (default: 8)')
    parser.add_argument('--timeout', type=float, dest='lookup_timeout',
                        help='Seconds allowed for all lookups (default: 300)')
    parser.add_argument('--strict-numbers', action='store_true', default=None,
                        help='Fail on unparseable frequency/rank/dispersion instead of using NaN')
    parser.add_argument('--no-progress', action='store_false', dest='show_progress', default=None,
                        help='Disable the live progress panel')
    parser.add_argument('--no-download', action='store_false', dest='download_wordnet', default=None,
                        help='Do not download WordNet data if it is missing')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Warnings and errors only')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the freqlex command."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    try:
        config = load_config(
            args.config,
            input_path=args.input_path,
            output_path=args.output_path,
            max_workers=args.max_workers,
            lookup_timeout=args.lookup_timeout,
            strict_numbers=args.strict_numbers,
            show_progress=args.show_progress,
            download_wordnet=args.download_wordnet,
        )
        run_pipeline(config)
    except FreqlexError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
