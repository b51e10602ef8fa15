"""email-extract - Structured records, entities and heuristics from decoded emails."""

from email_extract.core.address import EmailAddress, PersonName, parse_address_list
from email_extract.core.converter import MarkdownConverter
from email_extract.core.exceptions import (
    ConversionError,
    DecodeError,
    EmailExtractError,
    InvalidDateError,
    InvalidHeaderError,
    MissingHeaderError,
    ParseError,
    StructureError,
)
from email_extract.core.extracted import (
    ExtractedEmail,
    ExtractedEntities,
    ExtractedUrl,
    MonetaryAmount,
    PhoneNumber,
    PhoneType,
    SocialHandle,
    SocialPlatform,
    UrlType,
)
from email_extract.core.metadata import analyze_metadata
from email_extract.core.mime import MimeMessage, MimePart
from email_extract.core.models import (
    AuthenticationResults,
    AuthResult,
    Body,
    CategoryHint,
    Email,
    EmailMetadata,
    Headers,
    MessageId,
    Priority,
    Sentiment,
    SpamIndicator,
    ThreadInfo,
    Urgency,
)
from email_extract.core.parser import EmailParser, parse_date, parse_email
from email_extract.core.subject import Subject
from email_extract.core.text import html_to_text, separate_signature

__all__ = [
    "AuthResult",
    "AuthenticationResults",
    "Body",
    "CategoryHint",
    "ConversionError",
    "DecodeError",
    "Email",
    "EmailAddress",
    "EmailExtractError",
    "EmailMetadata",
    "EmailParser",
    "ExtractedEmail",
    "ExtractedEntities",
    "ExtractedUrl",
    "Headers",
    "InvalidDateError",
    "InvalidHeaderError",
    "MarkdownConverter",
    "MessageId",
    "MimeMessage",
    "MimePart",
    "MissingHeaderError",
    "MonetaryAmount",
    "ParseError",
    "PersonName",
    "PhoneNumber",
    "PhoneType",
    "Priority",
    "Sentiment",
    "SocialHandle",
    "SocialPlatform",
    "SpamIndicator",
    "StructureError",
    "Subject",
    "ThreadInfo",
    "Urgency",
    "UrlType",
    "analyze_metadata",
    "html_to_text",
    "parse_address_list",
    "parse_date",
    "parse_email",
    "separate_signature",
]
