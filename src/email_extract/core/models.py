"""Frozen dataclasses for the parsed email record."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from email_extract.core.address import EmailAddress
from email_extract.core.extracted import ExtractedEntities
from email_extract.core.subject import Subject


@dataclass(frozen=True)
class MessageId:
    """Message-ID header value."""

    value: str

    @classmethod
    def synthetic(cls, uid: int) -> MessageId:
        """Placeholder id for messages without a Message-ID header."""
        return cls(f"<synthetic-{uid}@local>")

    def __str__(self) -> str:
        return self.value


class Priority(Enum):
    HIGHEST = "highest"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"
    LOWEST = "lowest"

    @classmethod
    def from_header(cls, value: str) -> Priority:
        """Map an X-Priority value (1-5) to a Priority."""
        return _PRIORITY_BY_HEADER.get(value.strip(), cls.NORMAL)


_PRIORITY_BY_HEADER = {
    "1": Priority.HIGHEST,
    "2": Priority.HIGH,
    "4": Priority.LOW,
    "5": Priority.LOWEST,
}


class AuthResult(Enum):
    PASS = "pass"
    FAIL = "fail"
    NEUTRAL = "neutral"
    NONE = "none"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AuthenticationResults:
    spf: AuthResult | None = None
    dkim: AuthResult | None = None
    dmarc: AuthResult | None = None


@dataclass(frozen=True)
class Headers:
    """Selected header values plus every header in original order.

    ``all`` holds lower-cased names; ``custom`` keeps the original case of
    ``X-*`` headers.
    """

    all: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    content_type: str | None = None
    mailer: str | None = None
    priority: Priority | None = None
    list_unsubscribe: str | None = None
    authentication: AuthenticationResults = field(default_factory=AuthenticationResults)
    custom: tuple[tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ThreadInfo:
    in_reply_to: MessageId | None = None
    references: tuple[MessageId, ...] = field(default_factory=tuple)
    is_reply: bool = False
    thread_position: int = 0


@dataclass(frozen=True)
class Body:
    """Email body content with derived counts and signature split."""

    text: str = ""
    html: str | None = None
    text_from_html: str | None = None
    word_count: int = 0
    char_count: int = 0
    line_count: int = 0
    language: str | None = None
    has_attachments: bool = False
    signature: str | None = None
    content_without_signature: str = ""

    def is_empty(self) -> bool:
        return not self.text.strip() and self.html is None

    def best_text(self) -> str:
        """Plain text if present, else text derived from HTML, else empty."""
        if self.text:
            return self.text
        if self.text_from_html is not None:
            return self.text_from_html
        return ""


@dataclass(frozen=True)
class SpamIndicator:
    indicator: str
    weight: float


class Urgency(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass(frozen=True)
class CategoryHint:
    category: str
    confidence: float
    reason: str


class Sentiment(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


@dataclass(frozen=True)
class EmailMetadata:
    """Heuristic analysis results. ``spam_score`` is within 0.0-1.0."""

    spam_score: float = 0.0
    spam_indicators: tuple[SpamIndicator, ...] = field(default_factory=tuple)
    urgency: Urgency = Urgency.NORMAL
    category_hints: tuple[CategoryHint, ...] = field(default_factory=tuple)
    is_automated: bool = False
    is_mailing_list: bool = False
    sentiment: Sentiment = Sentiment.NEUTRAL


@dataclass(frozen=True)
class Email:
    """A fully parsed email with extracted entities and metadata."""

    message_id: MessageId
    uid: int
    sender: EmailAddress
    subject: Subject
    body: Body
    date: datetime
    headers: Headers
    thread: ThreadInfo
    extracted: ExtractedEntities
    metadata: EmailMetadata
    to: tuple[EmailAddress, ...] = field(default_factory=tuple)
    cc: tuple[EmailAddress, ...] = field(default_factory=tuple)
    bcc: tuple[EmailAddress, ...] = field(default_factory=tuple)
    reply_to: EmailAddress | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation: enums as values, datetimes as ISO strings."""
        return to_jsonable(self)


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums, tuples and datetimes for json.dumps."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value
