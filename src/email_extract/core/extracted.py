"""Pattern-based entity extraction from email text.

Patterns are compiled once at import and shared read-only by every caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

CONTEXT_CHARS = 30

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?(?:\(?\d{3}\)?[-.\s]?)?\d{3}[-.\s]?\d{4}")
URL_RE = re.compile(r"https?://[^\s<>\[\]{}|\\^]+")
AMOUNT_RE = re.compile(
    r"[$€£¥]\s*[\d,]+(?:\.\d{2})?|[\d,]+(?:\.\d{2})?\s*(?:USD|EUR|GBP|CAD|AUD)"
)
TWITTER_RE = re.compile(r"@([a-zA-Z0-9_]{1,15})")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/([a-zA-Z0-9-]+)")

TOLL_FREE_PREFIXES = ("1800", "1888", "1877")
TRACKING_MARKERS = ("track", "click", "redirect", "utm_", "mc_eid", "trk")
SOCIAL_DOMAINS = ("linkedin", "twitter", "facebook", "instagram")
DOCUMENT_SUFFIXES = (".pdf", ".doc", ".docx", ".xls")


class PhoneType(Enum):
    MOBILE = "mobile"
    LANDLINE = "landline"
    TOLL_FREE = "toll_free"
    UNKNOWN = "unknown"


class UrlType(Enum):
    WEBSITE = "website"
    SOCIAL_MEDIA = "social_media"
    UNSUBSCRIBE = "unsubscribe"
    TRACKING = "tracking"
    CALENDAR = "calendar"
    DOCUMENT = "document"
    OTHER = "other"


class SocialPlatform(Enum):
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    GITHUB = "github"
    OTHER = "other"


@dataclass(frozen=True)
class ExtractedEmail:
    """Email address found in body text."""

    address: str
    context: str
    position: int


@dataclass(frozen=True)
class PhoneNumber:
    raw: str
    normalized: str
    phone_type: PhoneType = PhoneType.UNKNOWN
    country_code: str | None = None


@dataclass(frozen=True)
class ExtractedUrl:
    url: str
    domain: str
    is_tracking: bool
    url_type: UrlType


@dataclass(frozen=True)
class MonetaryAmount:
    raw: str
    value: float
    currency: str


@dataclass(frozen=True)
class SocialHandle:
    """Social media handle. ``platform_name`` is only set for OTHER."""

    platform: SocialPlatform
    handle: str
    platform_name: str | None = None


@dataclass(frozen=True)
class ExtractedEntities:
    """All entities extracted from one text, each in order of appearance.

    ``names``, ``companies``, ``dates`` and ``addresses`` are reserved and
    left empty by :meth:`extract`.
    """

    emails: tuple[ExtractedEmail, ...] = field(default_factory=tuple)
    phone_numbers: tuple[PhoneNumber, ...] = field(default_factory=tuple)
    urls: tuple[ExtractedUrl, ...] = field(default_factory=tuple)
    names: tuple[str, ...] = field(default_factory=tuple)
    companies: tuple[str, ...] = field(default_factory=tuple)
    dates: tuple[str, ...] = field(default_factory=tuple)
    amounts: tuple[MonetaryAmount, ...] = field(default_factory=tuple)
    addresses: tuple[str, ...] = field(default_factory=tuple)
    social_handles: tuple[SocialHandle, ...] = field(default_factory=tuple)

    @classmethod
    def extract(cls, text: str) -> ExtractedEntities:
        """Run every entity scan over ``text``."""
        return cls(
            emails=tuple(_extract_emails(text)),
            phone_numbers=tuple(_extract_phones(text)),
            urls=tuple(_extract_urls(text)),
            amounts=tuple(_extract_amounts(text)),
            social_handles=tuple(_extract_social_handles(text)),
        )

    def is_empty(self) -> bool:
        """True when no emails, phones, URLs or amounts were found."""
        return not (self.emails or self.phone_numbers or self.urls or self.amounts)

    def total_count(self) -> int:
        """Count of emails, phones, URLs, amounts and social handles."""
        return (
            len(self.emails)
            + len(self.phone_numbers)
            + len(self.urls)
            + len(self.amounts)
            + len(self.social_handles)
        )


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8", errors="surrogatepass"))


def _extract_emails(text: str) -> list[ExtractedEmail]:
    emails = []
    # Matches arrive in order, so only the gap since the last one is encoded
    last_index = 0
    last_offset = 0
    for match in EMAIL_RE.finditer(text):
        last_offset += _utf8_len(text[last_index : match.start()])
        last_index = match.start()

        start = max(match.start() - CONTEXT_CHARS, 0)
        end = match.end() + CONTEXT_CHARS
        emails.append(
            ExtractedEmail(
                address=match.group(0),
                context=text[start:end],
                position=last_offset,
            )
        )
    return emails


def normalize_phone(raw: str) -> str:
    """Keep only digits and ``+``."""
    return "".join(c for c in raw if c.isascii() and (c.isdigit() or c == "+"))


def detect_phone_type(normalized: str) -> PhoneType:
    digits = "".join(c for c in normalized if c.isdigit())
    if digits.startswith(TOLL_FREE_PREFIXES):
        return PhoneType.TOLL_FREE
    return PhoneType.UNKNOWN


def _extract_phones(text: str) -> list[PhoneNumber]:
    phones = []
    for match in PHONE_RE.finditer(text):
        raw = match.group(0)
        normalized = normalize_phone(raw)
        phones.append(
            PhoneNumber(raw=raw, normalized=normalized, phone_type=detect_phone_type(normalized))
        )
    return phones


def extract_domain(url: str) -> str:
    """Host part of a URL: scheme removed, cut at the first slash."""
    rest = url.removeprefix("https://").removeprefix("http://")
    return rest.split("/", 1)[0]


def is_tracking_url(url: str) -> bool:
    lower = url.lower()
    return any(marker in lower for marker in TRACKING_MARKERS)


def detect_url_type(url: str, domain: str) -> UrlType:
    """Classify a URL; the first matching rule wins."""
    lower = url.lower()
    domain_lower = domain.lower()

    if "unsubscribe" in lower or "optout" in lower:
        return UrlType.UNSUBSCRIBE
    if is_tracking_url(url):
        return UrlType.TRACKING
    if any(name in domain_lower for name in SOCIAL_DOMAINS):
        return UrlType.SOCIAL_MEDIA
    if "calendar" in lower or ".ics" in lower:
        return UrlType.CALENDAR
    if lower.endswith(DOCUMENT_SUFFIXES):
        return UrlType.DOCUMENT
    return UrlType.WEBSITE


def _extract_urls(text: str) -> list[ExtractedUrl]:
    urls = []
    for match in URL_RE.finditer(text):
        url = match.group(0)
        domain = extract_domain(url)
        urls.append(
            ExtractedUrl(
                url=url,
                domain=domain,
                is_tracking=is_tracking_url(url),
                url_type=detect_url_type(url, domain),
            )
        )
    return urls


def parse_amount(raw: str) -> MonetaryAmount | None:
    """Parse a matched amount, or None if it holds no usable number.

    Currency is picked by presence, in USD, EUR, GBP order, defaulting to USD.
    """
    clean = "".join(c for c in raw if c in "0123456789.,").replace(",", "")
    try:
        value = float(clean)
    except ValueError:
        return None

    if "$" in raw or "USD" in raw:
        currency = "USD"
    elif "€" in raw or "EUR" in raw:
        currency = "EUR"
    elif "£" in raw or "GBP" in raw:
        currency = "GBP"
    else:
        currency = "USD"

    return MonetaryAmount(raw=raw, value=value, currency=currency)


def _extract_amounts(text: str) -> list[MonetaryAmount]:
    amounts = []
    for match in AMOUNT_RE.finditer(text):
        amount = parse_amount(match.group(0))
        if amount is not None:
            amounts.append(amount)
    return amounts


def _extract_social_handles(text: str) -> list[SocialHandle]:
    handles = [
        SocialHandle(platform=SocialPlatform.TWITTER, handle=match.group(1))
        for match in TWITTER_RE.finditer(text)
    ]
    handles.extend(
        SocialHandle(platform=SocialPlatform.LINKEDIN, handle=match.group(1))
        for match in LINKEDIN_RE.finditer(text)
    )
    return handles
