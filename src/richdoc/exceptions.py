"""Custom exceptions for richdoc."""


class RichdocError(Exception):
    """Base exception for all richdoc errors."""

    pass


class ParseError(RichdocError):
    """Raised when a document or snapshot file cannot be read or parsed."""

    pass


class ValidationError(RichdocError):
    """Raised when loaded data does not match the expected structure."""

    pass


class MarkerSyntaxError(ParseError):
    """Raised when a marker string is not valid marker syntax."""

    pass
