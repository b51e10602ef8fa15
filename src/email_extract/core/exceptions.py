"""Custom exceptions for email-extract."""


class EmailExtractError(Exception):
    """Base exception for all email-extract errors."""


class ParseError(EmailExtractError):
    """Failed to turn a message into an Email record."""


class StructureError(ParseError):
    """Failed to decode the MIME structure of a message."""


class DecodeError(ParseError):
    """Failed to decode the content of a message part."""


class MissingHeaderError(ParseError):
    """A mandatory header is absent."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required header: {name}")
        self.name = name


class InvalidHeaderError(ParseError):
    """A mandatory header is present but could not be parsed."""

    def __init__(self, header: str, details: str) -> None:
        super().__init__(f"Invalid header format for {header}: {details}")
        self.header = header
        self.details = details


class InvalidDateError(ParseError):
    """Date header could not be parsed.

    Not raised by the parser: unparseable dates fall back to the current time.
    """

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid date format: {text}")
        self.text = text


class ConversionError(EmailExtractError):
    """Failed to convert an email to markdown."""
