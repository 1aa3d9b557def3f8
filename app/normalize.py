"""
Core TSV transformation logic.

Responsibilities:
- body decoding (charset detection)
- line / field splitting
- normalize: expand colon-separated alternatives into the cross-product of rows
- denormalize: group repeated keys back into colon-joined values
- mode dispatch

Everything below is pure: no module state is read or written, so concurrent
requests cannot observe each other.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from charset_normalizer import from_bytes

from .rules import (
    INVALID_MODE_MESSAGE,
    LINE_TERMINATOR,
    MODE_DENORMALIZE,
    MODE_NORMALIZE,
    PRIMARY_SEPARATOR,
    SECONDARY_SEPARATOR,
)

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")


def decode_body(raw: bytes) -> str:
    """
    Decode request bytes to text.

    Rules:
    - Valid UTF-8 is taken as is; a BOM is stripped so it never ends up inside the first key.
    - Otherwise detect encoding best-effort via charset-normalizer.
    - If decode fails, fall back to UTF-8 with replacement characters.
    """
    if not raw:
        return ""

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    try:
        return raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        logger.warning("decode with %s failed, falling back to utf-8", decode_used)
        return raw.decode("utf-8", errors="replace")


def split_lines(document: str) -> List[str]:
    """Split on CR, LF or CRLF. Trailing empty lines are not lines."""
    lines = _NEWLINE.split(document)
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def split_fields(line: str, separator: str = PRIMARY_SEPARATOR) -> List[str]:
    # str.split keeps trailing empties: "a\tb\t" -> ["a", "b", ""]
    return line.split(separator)


def iter_combinations(cells: Sequence[Sequence[str]]) -> Iterator[Tuple[str, ...]]:
    """
    Depth-first cross-product over per-field alternatives.

    The first field varies slowest and the last fastest; alternatives are taken
    in declaration order. A line with no fields yields one empty combination.
    """
    return itertools.product(*cells)


def expand_line(line: str) -> List[str]:
    cells = [split_fields(field, SECONDARY_SEPARATOR) for field in split_fields(line)]
    return [PRIMARY_SEPARATOR.join(combo) for combo in iter_combinations(cells)]


def normalize_tsv(document: str) -> str:
    """Expand every line into one output line per combination of its alternatives."""
    out: List[str] = []
    for line in split_lines(document):
        for expanded in expand_line(line):
            out.append(expanded + LINE_TERMINATOR)
    return "".join(out)


def group_values(lines: Iterable[str]) -> Dict[str, List[str]]:
    """Map key -> values in first-seen key order. Lines with fewer than two fields are dropped."""
    groups: Dict[str, List[str]] = {}
    for line in lines:
        parts = split_fields(line)
        if len(parts) < 2:
            continue
        key, value = parts[0], parts[1]
        groups.setdefault(key, []).append(value)
    return groups


def denormalize_tsv(document: str) -> str:
    """Aggregate repeated-key lines into one line per key with colon-joined values."""
    groups = group_values(split_lines(document))
    return "".join(
        key + PRIMARY_SEPARATOR + SECONDARY_SEPARATOR.join(values) + LINE_TERMINATOR
        for key, values in groups.items()
    )


def transform(text: str, mode: Optional[str] = MODE_NORMALIZE) -> str:
    """
    Dispatch on mode.

    An unknown mode is not an error: the fixed diagnostic string is returned
    as the result.
    """
    if mode is None:
        mode = MODE_NORMALIZE

    if mode == MODE_NORMALIZE:
        result = normalize_tsv(text)
    elif mode == MODE_DENORMALIZE:
        result = denormalize_tsv(text)
    else:
        logger.info("unknown mode %r", mode)
        return INVALID_MODE_MESSAGE

    logger.info(
        "%s: %d lines in, %d lines out",
        mode,
        len(split_lines(text)),
        result.count(LINE_TERMINATOR),
    )
    return result
