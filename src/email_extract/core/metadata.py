"""Heuristic spam, urgency, category and sentiment analysis."""

from __future__ import annotations

from email_extract.core.address import EmailAddress
from email_extract.core.extracted import ExtractedEntities
from email_extract.core.models import (
    Body,
    CategoryHint,
    EmailMetadata,
    Headers,
    Priority,
    Sentiment,
    SpamIndicator,
    Urgency,
)
from email_extract.core.subject import Subject

SPAM_SUBJECT_PHRASES = ("urgent", "act now", "limited time")
URGENT_SUBJECT_WORDS = ("urgent", "asap", "emergency")
POSITIVE_WORDS = ("thank", "appreciate", "great", "excellent")
NEGATIVE_WORDS = ("complaint", "frustrated", "disappointed", "problem")

# More tracking links than this counts as a spam indicator
TRACKING_URL_LIMIT = 3


def analyze_metadata(
    sender: EmailAddress,
    headers: Headers,
    subject: Subject,
    body: Body,
    extracted: ExtractedEntities,
) -> EmailMetadata:
    """Combine already-parsed parts of a message into heuristic metadata.

    Args:
        sender: Parsed From address.
        headers: Parsed header summary.
        subject: Normalized subject.
        body: Parsed body; sentiment reads its best text.
        extracted: Entities found in the body.

    Returns:
        EmailMetadata with a spam score clamped to [0.0, 1.0].
    """
    is_noreply = sender.is_noreply()
    subject_lower = subject.original.lower()

    indicators: list[SpamIndicator] = []
    if is_noreply:
        indicators.append(SpamIndicator("noreply_sender", 0.1))

    tracking_count = sum(1 for url in extracted.urls if url.is_tracking)
    if tracking_count > TRACKING_URL_LIMIT:
        indicators.append(SpamIndicator("excessive_tracking", 0.2))

    if any(phrase in subject_lower for phrase in SPAM_SUBJECT_PHRASES):
        indicators.append(SpamIndicator("urgency_language", 0.15))

    spam_score = min(max(sum(i.weight for i in indicators), 0.0), 1.0)

    if any(word in subject_lower for word in URGENT_SUBJECT_WORDS) or headers.priority in (
        Priority.HIGH,
        Priority.HIGHEST,
    ):
        urgency = Urgency.HIGH
    else:
        urgency = Urgency.NORMAL

    hints: list[CategoryHint] = []
    if headers.list_unsubscribe is not None:
        hints.append(CategoryHint("newsletter", 0.9, "Has List-Unsubscribe header"))
    if is_noreply:
        hints.append(CategoryHint("automated", 0.8, "From noreply address"))
    # companies is never populated yet, so this hint cannot fire
    if extracted.phone_numbers and extracted.companies:
        hints.append(CategoryHint("lead", 0.6, "Contains contact information"))

    return EmailMetadata(
        spam_score=spam_score,
        spam_indicators=tuple(indicators),
        urgency=urgency,
        category_hints=tuple(hints),
        is_automated=is_noreply or headers.mailer is not None,
        is_mailing_list=headers.list_unsubscribe is not None,
        sentiment=detect_sentiment(body.best_text()),
    )


def detect_sentiment(text: str) -> Sentiment:
    """Keyword sentiment; positive words win when both kinds appear."""
    lower = text.lower()
    if any(word in lower for word in POSITIVE_WORDS):
        return Sentiment.POSITIVE
    if any(word in lower for word in NEGATIVE_WORDS):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL
