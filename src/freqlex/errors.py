"""
Error taxonomy for the word list build.

Every error here is fatal to a run: the CLI logs the message and exits 1.
"""


class FreqlexError(Exception):
    """Base class for all build failures."""


class ConfigError(FreqlexError):
    """Invalid pipeline configuration or part-of-speech tables."""


class CorpusDecodeError(FreqlexError):
    """Corpus bytes are not valid text in the configured encoding."""


class CorpusReadError(CorpusDecodeError):
    """Corpus file could not be opened or read."""


class CorpusParseError(FreqlexError):
    """Malformed tab-delimited structure (or a bad number in strict mode)."""


class PosMappingError(FreqlexError):
    """An allowed corpus tag has no grammatical class mapping."""


class DefinitionLookupError(FreqlexError):
    """The lexical database is unavailable or a lookup failed."""


class OutputWriteError(FreqlexError):
    """The output file could not be persisted."""
