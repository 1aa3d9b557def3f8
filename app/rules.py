"""
Deterministic TSV transformation rules.

This file exists to make separators and fixed messages explicit and enforceable.
"""

PRIMARY_SEPARATOR = "\t"  # between fields
SECONDARY_SEPARATOR = ":"  # between alternatives / aggregated values
LINE_TERMINATOR = "\n"  # after every emitted line, including the last

MODE_NORMALIZE = "normalize"
MODE_DENORMALIZE = "denormalize"

INVALID_MODE_MESSAGE = "Invalid mode."
POST_ONLY_MESSAGE = "Send TSV with POST."
