"""Shared fixtures for email-extract tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from email_extract.core.address import EmailAddress
from email_extract.core.mime import MimeMessage, MimePart
from email_extract.core.models import Body, Headers

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def simple_text_raw() -> bytes:
    """Plain text email with a display-name sender and entities in the body."""
    return (FIXTURES_DIR / "simple_text.eml").read_bytes()


@pytest.fixture
def reply_raw() -> bytes:
    """Reply with In-Reply-To/References and a dashed signature."""
    return (FIXTURES_DIR / "reply.eml").read_bytes()


@pytest.fixture
def simple_html_raw() -> bytes:
    """HTML-only newsletter from a noreply sender."""
    return (FIXTURES_DIR / "simple_html.eml").read_bytes()


@pytest.fixture
def multipart_mixed_raw() -> bytes:
    """multipart/mixed with an alternative body and a text attachment."""
    return (FIXTURES_DIR / "multipart_mixed.eml").read_bytes()


@pytest.fixture
def no_from_raw() -> bytes:
    """Message without a From header."""
    return (FIXTURES_DIR / "no_from.eml").read_bytes()


@pytest.fixture
def gmail_multipart_raw() -> dict[str, Any]:
    """Gmail API response for a multipart/mixed email with a PDF attachment."""
    return json.loads((FIXTURES_DIR / "gmail_multipart.json").read_text())


@pytest.fixture
def gmail_html_only_raw() -> dict[str, Any]:
    """Gmail API response for a single-part HTML email."""
    return json.loads((FIXTURES_DIR / "gmail_html_only.json").read_text())


@pytest.fixture
def make_message():
    """Factory for a single-part text/plain MimeMessage with given headers."""

    def _make(headers: list[tuple[str, str]], body: str = "Hello") -> MimeMessage:
        return MimeMessage(
            headers=tuple(headers),
            root=MimePart(content_type="text/plain", body=body),
        )

    return _make


@pytest.fixture
def sender() -> EmailAddress:
    """An ordinary, non-automated sender."""
    parsed = EmailAddress.parse("Alice Smith <alice@example.com>")
    assert parsed is not None
    return parsed


@pytest.fixture
def noreply_sender() -> EmailAddress:
    """An automated sender."""
    parsed = EmailAddress.parse("noreply@service.example.com")
    assert parsed is not None
    return parsed


@pytest.fixture
def empty_headers() -> Headers:
    return Headers()


@pytest.fixture
def empty_body() -> Body:
    return Body()
