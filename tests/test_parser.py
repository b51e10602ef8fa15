"""Unit tests for EmailParser, parse_email and parse_date."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from email_extract.core.exceptions import (
    InvalidHeaderError,
    MissingHeaderError,
    ParseError,
)
from email_extract.core.mime import MimeMessage
from email_extract.core.models import (
    AuthResult,
    CategoryHint,
    MessageId,
    Priority,
    Sentiment,
    Urgency,
)
from email_extract.core.parser import EmailParser, parse_date, parse_email

# ---------------------------------------------------------------------------
# Raw message fixtures
# ---------------------------------------------------------------------------


class TestParseSimpleText:
    """Plain text message with recipients, a mailer header and entities."""

    def test_identity(self, simple_text_raw: bytes) -> None:
        email = parse_email(42, simple_text_raw)
        assert email.uid == 42
        assert email.message_id == MessageId("<test123@example.com>")
        assert email.date == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def test_addresses(self, simple_text_raw: bytes) -> None:
        email = parse_email(1, simple_text_raw)
        assert email.sender.address == "john@example.com"
        assert email.sender.name is not None
        assert email.sender.name.first == "John"
        assert email.sender.name.last == "Doe"
        assert [a.address for a in email.to] == ["recipient@proton.me", "jane@example.org"]
        assert email.to[1].name is not None
        assert email.to[1].name.full == "Jane Roe"
        assert [a.address for a in email.cc] == ["cc@example.com"]
        assert email.bcc == ()
        assert email.reply_to is None

    def test_subject(self, simple_text_raw: bytes) -> None:
        email = parse_email(1, simple_text_raw)
        assert email.subject.original == "Test Email"
        assert email.subject.normalized == "Test Email"
        assert email.subject.reply_depth == 0

    def test_headers(self, simple_text_raw: bytes) -> None:
        headers = parse_email(1, simple_text_raw).headers
        assert headers.mailer == "Acme Mail 2.1"
        assert headers.priority is None
        assert headers.list_unsubscribe is None
        assert headers.content_type is None
        assert headers.custom == (("X-Mailer", "Acme Mail 2.1"),)
        assert headers.all[0] == ("from", "John Doe <john@example.com>")
        assert [name for name, _ in headers.all] == [
            "from",
            "to",
            "cc",
            "subject",
            "date",
            "message-id",
            "x-mailer",
        ]

    def test_body(self, simple_text_raw: bytes) -> None:
        body = parse_email(1, simple_text_raw).body
        assert body.text.startswith("Hello, this is a test email.")
        assert body.html is None
        assert body.text_from_html is None
        assert body.word_count == 20
        assert body.char_count == len(body.text)
        assert body.line_count == 3
        assert body.signature is None
        assert not body.has_attachments

    def test_extracted(self, simple_text_raw: bytes) -> None:
        extracted = parse_email(1, simple_text_raw).extracted
        assert [e.address for e in extracted.emails] == ["john@company.com"]
        assert [p.raw for p in extracted.phone_numbers] == ["(555) 123-4567"]
        assert [u.url for u in extracted.urls] == ["https://company.com"]

    def test_metadata(self, simple_text_raw: bytes) -> None:
        metadata = parse_email(1, simple_text_raw).metadata
        assert metadata.spam_score == 0.0
        assert metadata.urgency is Urgency.NORMAL
        assert metadata.is_automated
        assert not metadata.is_mailing_list
        assert metadata.sentiment is Sentiment.NEUTRAL

    def test_not_a_reply(self, simple_text_raw: bytes) -> None:
        thread = parse_email(1, simple_text_raw).thread
        assert not thread.is_reply
        assert thread.in_reply_to is None
        assert thread.references == ()
        assert thread.thread_position == 0


class TestParseReply:
    """Reply headers, nested Re: prefixes and a dashed signature."""

    def test_thread(self, reply_raw: bytes) -> None:
        thread = parse_email(1, reply_raw).thread
        assert thread.is_reply
        assert thread.in_reply_to == MessageId("<original@example.com>")
        assert thread.references == (
            MessageId("<root@example.com>"),
            MessageId("<original@example.com>"),
        )
        assert thread.thread_position == 3

    def test_subject(self, reply_raw: bytes) -> None:
        subject = parse_email(1, reply_raw).subject
        assert subject.reply_depth == 2
        assert subject.normalized == "Original Subject"

    def test_date_converted_to_utc(self, reply_raw: bytes) -> None:
        email = parse_email(1, reply_raw)
        assert email.date == datetime(2025, 1, 1, 17, 0, tzinfo=UTC)
        assert email.date.tzinfo is UTC

    def test_signature(self, reply_raw: bytes) -> None:
        body = parse_email(1, reply_raw).body
        assert body.content_without_signature == "Reply content."
        assert body.signature == "--\nJohn Doe\nAcme Corp"
        assert body.line_count == 5

    def test_sender_without_name(self, reply_raw: bytes) -> None:
        email = parse_email(1, reply_raw)
        assert email.sender.address == "sender@example.com"
        assert email.sender.name is None


class TestParseHtmlOnly:
    """HTML-only newsletter from a noreply address."""

    def test_text_from_html(self, simple_html_raw: bytes) -> None:
        body = parse_email(1, simple_html_raw).body
        assert body.text == ""
        assert body.html is not None
        assert body.html.startswith("<html>")
        assert body.text_from_html == "Hello\nWorld & friends"
        assert body.best_text() == "Hello\nWorld & friends"
        assert body.word_count == 4
        assert body.char_count == 21
        assert body.line_count == 2

    def test_content_type(self, simple_html_raw: bytes) -> None:
        headers = parse_email(1, simple_html_raw).headers
        assert headers.content_type is not None
        assert headers.content_type.startswith("text/html")

    def test_newsletter_metadata(self, simple_html_raw: bytes) -> None:
        email = parse_email(1, simple_html_raw)
        metadata = email.metadata
        assert email.headers.list_unsubscribe == "<https://news.example.com/unsubscribe>"
        assert metadata.is_mailing_list
        assert metadata.is_automated
        assert metadata.spam_score == pytest.approx(0.1)
        assert metadata.category_hints == (
            CategoryHint("newsletter", 0.9, "Has List-Unsubscribe header"),
            CategoryHint("automated", 0.8, "From noreply address"),
        )

    def test_missing_message_id_is_synthetic(self, simple_html_raw: bytes) -> None:
        email = parse_email(9, simple_html_raw)
        assert email.message_id == MessageId("<synthetic-9@local>")


class TestParseMultipartMixed:
    """Nested alternative body, attachment, priority and auth results."""

    def test_body_selection(self, multipart_mixed_raw: bytes) -> None:
        body = parse_email(1, multipart_mixed_raw).body
        assert body.text.startswith("See the attached report.")
        assert body.html is not None
        assert body.text_from_html is None
        assert body.has_attachments

    def test_forwarded_subject(self, multipart_mixed_raw: bytes) -> None:
        email = parse_email(1, multipart_mixed_raw)
        assert email.subject.is_forward
        assert email.subject.normalized == "Quarterly report"
        assert not email.thread.is_reply

    def test_priority_and_urgency(self, multipart_mixed_raw: bytes) -> None:
        email = parse_email(1, multipart_mixed_raw)
        assert email.headers.priority is Priority.HIGHEST
        assert email.metadata.urgency is Urgency.HIGH

    def test_authentication(self, multipart_mixed_raw: bytes) -> None:
        auth = parse_email(1, multipart_mixed_raw).headers.authentication
        assert auth.spf is AuthResult.PASS
        assert auth.dkim is AuthResult.FAIL
        assert auth.dmarc is AuthResult.PASS

    def test_sentiment(self, multipart_mixed_raw: bytes) -> None:
        assert parse_email(1, multipart_mixed_raw).metadata.sentiment is Sentiment.POSITIVE

    def test_quoted_sender_name(self, multipart_mixed_raw: bytes) -> None:
        sender = parse_email(1, multipart_mixed_raw).sender
        assert sender.name is not None
        assert sender.name.full == "Alice Smith"

    def test_date(self, multipart_mixed_raw: bytes) -> None:
        assert parse_email(1, multipart_mixed_raw).date == datetime(
            2025, 1, 17, 8, 15, tzinfo=UTC
        )


# ---------------------------------------------------------------------------
# Gmail payloads
# ---------------------------------------------------------------------------


class TestParseGmail:
    """EmailParser over Gmail API message dicts."""

    def test_multipart(self, gmail_multipart_raw: dict[str, Any]) -> None:
        email = EmailParser().parse(7, MimeMessage.from_gmail(gmail_multipart_raw))
        assert email.uid == 7
        assert email.message_id == MessageId("<gmail-alt@vendor.io>")
        assert email.sender.name is not None
        assert email.sender.name.full == "Vera Vendor"
        assert email.date == datetime(2025, 1, 20, 8, 0, tzinfo=UTC)
        assert email.body.has_attachments

    def test_counted_reply_subject(self, gmail_multipart_raw: dict[str, Any]) -> None:
        email = EmailParser().parse(7, MimeMessage.from_gmail(gmail_multipart_raw))
        assert email.subject.reply_depth == 2
        assert email.subject.normalized == "Invoice"
        assert email.thread.is_reply
        assert email.thread.in_reply_to is None
        assert email.thread.thread_position == 1

    def test_signature_and_entities(self, gmail_multipart_raw: dict[str, Any]) -> None:
        email = EmailParser().parse(7, MimeMessage.from_gmail(gmail_multipart_raw))
        assert email.body.signature == "Best regards\nVera"
        assert email.body.content_without_signature.startswith("Hi team,")

        extracted = email.extracted
        assert [e.address for e in extracted.emails] == ["billing@vendor.io"]
        assert [(a.value, a.currency) for a in extracted.amounts] == [(2400.5, "USD")]
        assert extracted.urls[0].is_tracking

    def test_html_only(self, gmail_html_only_raw: dict[str, Any]) -> None:
        before = datetime.now(UTC)
        email = EmailParser().parse(5, MimeMessage.from_gmail(gmail_html_only_raw))
        after = datetime.now(UTC)

        assert email.sender.address == "shop@store.example"
        assert email.message_id == MessageId("<synthetic-5@local>")
        assert email.body.text_from_html == "Caf&eacute; & more\nÜnïcödé line"
        assert before <= email.date <= after


# ---------------------------------------------------------------------------
# Header edge cases
# ---------------------------------------------------------------------------


class TestHeaderEdgeCases:
    """Edge cases driven through hand-built MIME views."""

    def test_missing_from(self, no_from_raw: bytes) -> None:
        with pytest.raises(MissingHeaderError, match="Missing required header: From"):
            parse_email(1, no_from_raw)

    def test_unparseable_from(self, make_message) -> None:
        message = make_message([("From", "not an address")])
        with pytest.raises(InvalidHeaderError) as exc_info:
            EmailParser().parse(1, message)
        assert "Could not parse: not an address" in str(exc_info.value)
        assert isinstance(exc_info.value, ParseError)

    def test_missing_subject(self, make_message) -> None:
        email = EmailParser().parse(1, make_message([("From", "a@example.com")]))
        assert email.subject.original == "(no subject)"

    def test_empty_subject_kept(self, make_message) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("Subject", "")])
        )
        assert email.subject.original == ""

    def test_reply_to(self, make_message) -> None:
        email = EmailParser().parse(
            1,
            make_message([("From", "a@example.com"), ("Reply-To", "Help <help@example.com>")]),
        )
        assert email.reply_to is not None
        assert email.reply_to.address == "help@example.com"

    def test_invalid_reply_to_is_none(self, make_message) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("Reply-To", "nobody")])
        )
        assert email.reply_to is None

    def test_bcc(self, make_message) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("Bcc", "x@example.com, y@example.com")])
        )
        assert [a.address for a in email.bcc] == ["x@example.com", "y@example.com"]

    def test_user_agent_as_mailer(self, make_message) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("User-Agent", "Thunderbird")])
        )
        assert email.headers.mailer == "Thunderbird"
        assert email.headers.custom == ()

    def test_x_mailer_preferred(self, make_message) -> None:
        email = EmailParser().parse(
            1,
            make_message(
                [
                    ("From", "a@example.com"),
                    ("User-Agent", "Thunderbird"),
                    ("X-Mailer", "Outlook"),
                ]
            ),
        )
        assert email.headers.mailer == "Outlook"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1", Priority.HIGHEST),
            ("2", Priority.HIGH),
            ("3", Priority.NORMAL),
            ("4", Priority.LOW),
            ("5", Priority.LOWEST),
            (" 2 ", Priority.HIGH),
            ("1 (Highest)", Priority.NORMAL),
        ],
    )
    def test_priority(self, make_message, value: str, expected: Priority) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("X-Priority", value)])
        )
        assert email.headers.priority is expected

    def test_later_authentication_header_wins(self, make_message) -> None:
        email = EmailParser().parse(
            1,
            make_message(
                [
                    ("From", "a@example.com"),
                    ("Authentication-Results", "mx; spf=fail; dkim=pass"),
                    ("Authentication-Results", "mx; SPF=Pass; dkim=none"),
                ]
            ),
        )
        auth = email.headers.authentication
        assert auth.spf is AuthResult.PASS
        assert auth.dkim is AuthResult.PASS
        assert auth.dmarc is None

    def test_reply_subject_without_in_reply_to(self, make_message) -> None:
        email = EmailParser().parse(
            1,
            make_message(
                [
                    ("From", "a@example.com"),
                    ("Subject", "Re: hi"),
                    ("References", "<a@x> <b@x>"),
                ]
            ),
        )
        assert email.thread.is_reply
        assert email.thread.in_reply_to is None
        assert email.thread.thread_position == 3

    def test_references_without_reply_position_zero(self, make_message) -> None:
        email = EmailParser().parse(
            1, make_message([("From", "a@example.com"), ("References", "<a@x>")])
        )
        assert not email.thread.is_reply
        assert email.thread.thread_position == 0

    def test_empty_body(self, make_message) -> None:
        email = EmailParser().parse(1, make_message([("From", "a@example.com")], body=""))
        assert email.body.is_empty()
        assert email.body.word_count == 0
        assert email.body.line_count == 0
        assert email.extracted.is_empty()

    def test_bad_date_falls_back_to_now(self) -> None:
        raw = b"From: a@example.com\r\nDate: not a date\r\n\r\nbody\r\n"
        before = datetime.now(UTC)
        email = parse_email(1, raw)
        after = datetime.now(UTC)
        assert before <= email.date <= after

    def test_out_of_range_date_falls_back_to_now(self) -> None:
        raw = b"From: a@example.com\r\nDate: Fri, 31 Dec 9999 23:59:59 -0100\r\n\r\nbody\r\n"
        before = datetime.now(UTC)
        email = parse_email(1, raw)
        after = datetime.now(UTC)
        assert before <= email.date <= after
        assert email.sender.address == "a@example.com"


# ---------------------------------------------------------------------------
# parse_date
# ---------------------------------------------------------------------------


class TestParseDate:
    def test_rfc2822(self) -> None:
        assert parse_date("Wed, 01 Jan 2025 12:00:00 +0000") == datetime(
            2025, 1, 1, 12, 0, tzinfo=UTC
        )

    def test_offset_normalized(self) -> None:
        result = parse_date("Wed, 01 Jan 2025 12:00:00 +0200")
        assert result == datetime(2025, 1, 1, 10, 0, tzinfo=UTC)
        assert result.tzinfo is UTC

    def test_naive_treated_as_utc(self) -> None:
        # -0000 means "no zone information"
        result = parse_date("Wed, 01 Jan 2025 12:00:00 -0000")
        assert result == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
        assert result.tzinfo is UTC

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "garbage",
            "32 Foo 2025",
            "Fri, 31 Dec 9999 23:59:59 -0100",
        ],
    )
    def test_fallback_to_now(self, value: str | None) -> None:
        before = datetime.now(UTC)
        result = parse_date(value)
        after = datetime.now(UTC)
        assert before <= result <= after
        assert result.tzinfo is UTC
