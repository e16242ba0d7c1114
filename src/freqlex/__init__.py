"""
Word frequency list builder.

Turns the BNC word frequency list into a JSON word list of content words,
each with its grammatical class and a WordNet definition:
- corpus_ingest: read and parse the tab-delimited corpus
- wordlist_filter: filter, sort and remap part-of-speech tags
- wordnet_define: concurrent WordNet definition lookups
- export_json: atomic JSON output

The pipeline module runs all stages in a single pass.
"""

from freqlex.pipeline import main, run_pipeline

__all__ = [
    "main",
    "run_pipeline",
]
