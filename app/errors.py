"""Errors raised at the request boundary, before the core transformations run."""

from __future__ import annotations


class TsvInputError(Exception):
    """Base error for rejected request input."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(TsvInputError):
    """Raised when no TSV text was supplied."""

    def __init__(self):
        super().__init__("Please enter TSV data.")


class MissingSeparatorError(TsvInputError):
    """Raised when a non-blank line has no tab between key and value."""

    def __init__(self, line_number: int):
        super().__init__(
            f"Invalid TSV format: line {line_number} has no tab. "
            "Separate key and value with a tab."
        )
        self.line_number = line_number


class InputTooLargeError(TsvInputError):
    """Raised when the request body exceeds the configured size cap."""

    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(f"Input too large: {size} bytes (limit {limit}).")
        self.size = size
        self.limit = limit
