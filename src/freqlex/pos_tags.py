"""
pos_tags.py — Part-of-speech tables for the BNC frequency list.

Reads:
  - schema/bnc_pos.yaml (packaged next to this module)

Provides:
  - GrammaticalClass: the four WordNet classes (noun, verb, adjective, adverb)
  - PosTagTables: frozen tag sets and the corpus tag -> class mapping

allowed_tags is always corpus_tags - disallowed_tags, derived once at load.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

import yaml

from freqlex.errors import ConfigError, PosMappingError


logger = logging.getLogger(__name__)


class GrammaticalClass(str, Enum):
    """Grammatical classes understood by the lexical database."""

    NOUN = 'noun'
    VERB = 'verb'
    ADJECTIVE = 'adjective'
    ADVERB = 'adverb'


@dataclass(frozen=True)
class PosTagTables:
    """Immutable tag sets and remapping table."""

    corpus_tags: FrozenSet[str]
    disallowed_tags: FrozenSet[str]
    allowed_tags: FrozenSet[str]
    class_by_tag: Mapping[str, GrammaticalClass]

    def is_allowed(self, tag: str) -> bool:
        return tag in self.allowed_tags

    def class_for(self, tag: str) -> GrammaticalClass:
        """
        Map a corpus tag to its grammatical class.

        Raises:
            PosMappingError: If the tag has no mapping. Tables are checked at
                load time, so this only fires for tags that were never allowed.
        """
        try:
            return self.class_by_tag[tag]
        except KeyError:
            raise PosMappingError(f"No grammatical class mapped for tag {tag!r}") from None


def default_schema_path() -> Path:
    """Get the packaged schema/bnc_pos.yaml path."""
    return Path(__file__).parent / "schema" / "bnc_pos.yaml"


def build_pos_tables(schema: dict) -> PosTagTables:
    """
    Build PosTagTables from a parsed schema mapping.

    Expected keys: corpus_tags, disallowed_tags, grammatical_classes (a list of
    {class, tags} items).

    Raises:
        ConfigError: If the schema is malformed, names an unknown class, maps a
            tag twice, or leaves an allowed tag without a class.
    """
    if not isinstance(schema, dict):
        raise ConfigError("POS schema must be a mapping")

    try:
        corpus_tags = frozenset(str(t) for t in schema['corpus_tags'])
        disallowed_tags = frozenset(str(t) for t in schema['disallowed_tags'])
        class_items = schema['grammatical_classes']
    except (KeyError, TypeError) as e:
        raise ConfigError(f"POS schema is missing a required section: {e}") from e

    class_by_tag = {}
    for item in class_items or []:
        try:
            grammatical_class = GrammaticalClass(item['class'])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid grammatical class entry {item!r}") from e

        for tag in item.get('tags') or []:
            tag = str(tag)
            if tag in class_by_tag and class_by_tag[tag] is not grammatical_class:
                raise ConfigError(
                    f"Tag {tag!r} mapped to both {class_by_tag[tag].value} "
                    f"and {grammatical_class.value}"
                )
            class_by_tag[tag] = grammatical_class

    allowed_tags = corpus_tags - disallowed_tags

    unmapped = sorted(allowed_tags - class_by_tag.keys())
    if unmapped:
        raise ConfigError(f"Allowed tags without a grammatical class: {', '.join(unmapped)}")

    return PosTagTables(
        corpus_tags=corpus_tags,
        disallowed_tags=disallowed_tags,
        allowed_tags=allowed_tags,
        class_by_tag=MappingProxyType(class_by_tag),
    )


@lru_cache(maxsize=None)
def load_pos_tables(schema_path: Optional[Path] = None) -> PosTagTables:
    """
    Load and cache the part-of-speech tables.

    Args:
        schema_path: YAML schema to read (default: packaged bnc_pos.yaml)

    Returns:
        Frozen PosTagTables, shared by every caller with the same path
    """
    path = Path(schema_path) if schema_path is not None else default_schema_path()

    if not path.exists():
        raise ConfigError(f"POS schema not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            schema = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse POS schema {path}: {e}") from e

    tables = build_pos_tables(schema)
    logger.debug(
        f"Loaded POS tables from {path}: {len(tables.allowed_tags)} allowed "
        f"of {len(tables.corpus_tags)} corpus tags"
    )
    return tables
