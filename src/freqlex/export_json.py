"""
export_json.py — Write the enriched word list as an indented JSON array.

Outputs:
  - data/build/en/wordFreqList.json

Field order per object: word, pos, freq, disp, ra, definition. NaN numbers
serialize as null. The file is written to a temp file next to the target and
renamed into place, so the target path never holds a partial list.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

import orjson

from freqlex.entries import EnrichedWordEntry
from freqlex.errors import OutputWriteError


logger = logging.getLogger(__name__)

SUPPORTED_INDENTS = (0, 2)


def render_json(entries: Sequence[EnrichedWordEntry], indent: int = 2) -> bytes:
    """
    Serialize entries to JSON bytes (2-space indent, or compact with 0).

    Raises:
        OutputWriteError: If a value cannot be encoded
    """
    if indent not in SUPPORTED_INDENTS:
        raise ValueError(f"indent must be one of {SUPPORTED_INDENTS}, got {indent}")

    option = orjson.OPT_INDENT_2 if indent == 2 else 0
    try:
        return orjson.dumps([entry.to_dict() for entry in entries], option=option)
    except orjson.JSONEncodeError as e:
        raise OutputWriteError(f"Cannot encode word list as JSON: {e}") from e


def write_json_atomic(entries: Sequence[EnrichedWordEntry], output_path: Path, indent: int = 2) -> None:
    """
    Write entries to `output_path` atomically.

    Raises:
        OutputWriteError: If the directory, temp file, or rename fails
    """
    output_path = Path(output_path)
    payload = render_json(entries, indent)

    logger.info(f"Writing {len(entries):,} entries to {output_path}")

    tmp_name = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            'wb',
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix='.tmp',
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_name, output_path)
        tmp_name = None
    except OSError as e:
        raise OutputWriteError(f"Cannot write {output_path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning(f"Could not remove temp file {tmp_name}")

    logger.info(f"Written: {output_path}")
