"""Request-boundary checks run before any transformation."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import EmptyInputError, InputTooLargeError, MissingSeparatorError
from .normalize import split_lines
from .rules import PRIMARY_SEPARATOR

logger = logging.getLogger(__name__)


def check_size(raw: bytes, limit: int) -> None:
    if len(raw) > limit:
        logger.warning("rejected body of %d bytes (limit %d)", len(raw), limit)
        raise InputTooLargeError(len(raw), limit)


def require_text(text: Optional[str]) -> str:
    if not text:
        logger.warning("rejected empty input")
        raise EmptyInputError()
    return text


def require_separator(text: str) -> None:
    """Every non-blank line must contain at least one tab."""
    for number, line in enumerate(split_lines(text), start=1):
        if line.strip() and PRIMARY_SEPARATOR not in line:
            logger.warning("rejected input: line %d has no tab", number)
            raise MissingSeparatorError(number)


def validate_text(text: Optional[str]) -> str:
    text = require_text(text)
    require_separator(text)
    return text
