"""Email parser: headers, addresses, subject, body, entities and metadata."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from email_extract.core.address import EmailAddress, parse_address_list
from email_extract.core.exceptions import InvalidHeaderError, MissingHeaderError
from email_extract.core.extracted import ExtractedEntities
from email_extract.core.metadata import analyze_metadata
from email_extract.core.mime import MimeMessage, select_bodies
from email_extract.core.models import (
    AuthenticationResults,
    AuthResult,
    Body,
    Email,
    Headers,
    MessageId,
    Priority,
    ThreadInfo,
)
from email_extract.core.subject import NO_SUBJECT, Subject
from email_extract.core.text import count_lines, html_to_text, separate_signature

logger = logging.getLogger(__name__)


class EmailParser:
    """Parses a decoded MIME view into an Email record."""

    def parse(self, uid: int, message: MimeMessage) -> Email:
        """Parse a decoded message.

        Args:
            uid: Numeric identifier of the message (e.g. IMAP UID).
            message: Decoded MIME view with headers and body parts.

        Returns:
            Parsed Email.

        Raises:
            MissingHeaderError: If the message has no From header.
            InvalidHeaderError: If the From header holds no address.
        """
        headers = self._extract_headers(message)
        message_id = self._extract_message_id(message, uid)
        sender = self._extract_sender(message)
        to = parse_address_list(message.get("to") or "")
        cc = parse_address_list(message.get("cc") or "")
        bcc = parse_address_list(message.get("bcc") or "")
        reply_to_value = message.get("reply-to")
        reply_to = EmailAddress.parse(reply_to_value) if reply_to_value is not None else None
        subject_value = message.get("subject")
        subject = Subject.parse(subject_value if subject_value is not None else NO_SUBJECT)
        date = parse_date(message.get("date"))
        thread = self._extract_thread(message, subject)
        body = self._extract_body(message)

        extracted = ExtractedEntities.extract(body.best_text())
        metadata = analyze_metadata(sender, headers, subject, body, extracted)

        logger.debug("Parsed email: %s from %s", subject.original, sender.address)

        return Email(
            message_id=message_id,
            uid=uid,
            sender=sender,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            body=body,
            date=date,
            headers=headers,
            thread=thread,
            extracted=extracted,
            metadata=metadata,
        )

    def _extract_headers(self, message: MimeMessage) -> Headers:
        """Summarize the headers the analysis relies on."""
        mailer = message.get("x-mailer")
        if mailer is None:
            mailer = message.get("user-agent")

        priority_value = message.get("x-priority")

        return Headers(
            all=tuple((name.lower(), value) for name, value in message.headers),
            content_type=message.get("content-type"),
            mailer=mailer,
            priority=Priority.from_header(priority_value) if priority_value is not None else None,
            list_unsubscribe=message.get("list-unsubscribe"),
            authentication=self._parse_authentication(message.get_all("authentication-results")),
            custom=tuple(
                (name, value) for name, value in message.headers if name.lower().startswith("x-")
            ),
        )

    @staticmethod
    def _parse_authentication(values: list[str]) -> AuthenticationResults:
        """Read SPF/DKIM/DMARC pass or fail from Authentication-Results headers."""
        found: dict[str, AuthResult] = {}
        for value in values:
            lower = value.lower()
            for method in ("spf", "dkim", "dmarc"):
                if f"{method}=pass" in lower:
                    found[method] = AuthResult.PASS
                elif f"{method}=fail" in lower:
                    found[method] = AuthResult.FAIL
        return AuthenticationResults(**found)

    @staticmethod
    def _extract_message_id(message: MimeMessage, uid: int) -> MessageId:
        value = message.get("message-id")
        if value is None:
            return MessageId.synthetic(uid)
        return MessageId(value)

    @staticmethod
    def _extract_sender(message: MimeMessage) -> EmailAddress:
        value = message.get("from")
        if value is None:
            raise MissingHeaderError("From")

        sender = EmailAddress.parse(value)
        if sender is None:
            raise InvalidHeaderError("From", f"Could not parse: {value}")
        return sender

    @staticmethod
    def _extract_thread(message: MimeMessage, subject: Subject) -> ThreadInfo:
        in_reply_to_value = message.get("in-reply-to")
        in_reply_to = MessageId(in_reply_to_value) if in_reply_to_value is not None else None
        references = tuple(MessageId(ref) for ref in (message.get("references") or "").split())

        is_reply = in_reply_to is not None or subject.reply_depth > 0
        return ThreadInfo(
            in_reply_to=in_reply_to,
            references=references,
            is_reply=is_reply,
            thread_position=len(references) + 1 if is_reply else 0,
        )

    @staticmethod
    def _extract_body(message: MimeMessage) -> Body:
        """Select body parts, derive text from HTML if needed, split the signature."""
        text, html, has_attachments = select_bodies(message.root)

        text_from_html = html_to_text(html) if not text and html is not None else None

        if text:
            best_text = text
        elif text_from_html is not None:
            best_text = text_from_html
        else:
            best_text = ""

        content, signature = separate_signature(best_text)

        return Body(
            text=text,
            html=html,
            text_from_html=text_from_html,
            word_count=len(best_text.split()),
            char_count=len(best_text),
            line_count=count_lines(best_text),
            has_attachments=has_attachments,
            signature=signature,
            content_without_signature=content,
        )


def parse_date(value: str | None) -> datetime:
    """Parse an RFC 2822 date string into an aware UTC datetime.

    Args:
        value: Date header value, or None when the header is absent.

    Returns:
        Parsed datetime, or the current time if missing or unparseable.
    """
    if not value:
        return datetime.now(UTC)
    try:
        parsed = parsedate_to_datetime(value)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        # Dates near datetime.min/max can overflow when shifted to UTC
        return parsed.astimezone(UTC)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Failed to parse date: %s", value)
        return datetime.now(UTC)


def parse_email(uid: int, raw: bytes) -> Email:
    """Parse raw RFC 822 bytes into an Email.

    Raises:
        StructureError: If the MIME structure cannot be decoded.
        MissingHeaderError: If the message has no From header.
        InvalidHeaderError: If the From header holds no address.
    """
    return EmailParser().parse(uid, MimeMessage.from_bytes(raw))
