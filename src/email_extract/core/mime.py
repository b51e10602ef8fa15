"""Decoded MIME view consumed by the parser, with adapters for common sources.

The parser never decodes bytes itself. It reads an ordered header list and a
tree of parts whose textual payloads are already decoded. Two adapters build
that view: raw RFC 822 bytes and Gmail API ``format=full`` message dicts.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any

from email_extract.core.exceptions import DecodeError, StructureError

logger = logging.getLogger(__name__)

_FOLDING_RE = re.compile(r"\r?\n(?=[ \t])")


@dataclass(frozen=True)
class MimePart:
    """One node of the MIME tree. Only text leaves carry a body."""

    content_type: str
    body: str | None = None
    filename: str | None = None
    is_attachment: bool = False
    parts: tuple[MimePart, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MimeMessage:
    """Ordered headers plus the root MIME part."""

    headers: tuple[tuple[str, str], ...]
    root: MimePart

    def get(self, name: str) -> str | None:
        """First value of a header, matched case-insensitively."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return None

    def get_all(self, name: str) -> list[str]:
        lower = name.lower()
        return [value for key, value in self.headers if key.lower() == lower]

    @classmethod
    def from_bytes(cls, raw: bytes) -> MimeMessage:
        """Build a view from raw RFC 822 bytes.

        Raises:
            StructureError: If the message cannot be parsed.
        """
        try:
            message = BytesParser(policy=policy.default).parsebytes(raw)
            headers = tuple(_header_items(message))
            root = _part_from_message(message)
        except Exception as e:
            raise StructureError(f"Failed to parse email structure: {e}") from e
        return cls(headers=headers, root=root)

    @classmethod
    def from_gmail(cls, raw_message: dict[str, Any]) -> MimeMessage:
        """Build a view from a Gmail API message dict (format=full).

        Raises:
            StructureError: If the payload is not a MIME part dict.
            DecodeError: If a body is not valid base64url.
        """
        payload = raw_message.get("payload")
        if not isinstance(payload, dict):
            raise StructureError(
                f"Message {raw_message.get('id', '?')} has no payload"
            )

        try:
            headers = tuple(
                (h.get("name", ""), h.get("value", "")) for h in payload.get("headers", [])
            )
            root = _part_from_gmail(payload)
        except DecodeError:
            raise
        except Exception as e:
            raise StructureError(
                f"Failed to parse message {raw_message.get('id', '?')}: {e}"
            ) from e
        return cls(headers=headers, root=root)


def _header_items(message: EmailMessage) -> list[tuple[str, str]]:
    """Decoded (name, value) pairs; a value the policy cannot parse is kept unfolded."""
    items = []
    for name, raw in message.raw_items():
        try:
            value = str(message.policy.header_fetch_parse(name, raw))
        except Exception as e:
            logger.warning("Failed to decode header %s: %s", name, e)
            value = _FOLDING_RE.sub("", raw).strip()
        items.append((name, value))
    return items


def _part_from_message(message: EmailMessage) -> MimePart:
    content_type = message.get_content_type()
    filename = message.get_filename()
    is_attachment = message.get_content_disposition() == "attachment" or bool(filename)

    if message.is_multipart():
        return MimePart(
            content_type=content_type,
            filename=filename,
            is_attachment=is_attachment,
            parts=tuple(_part_from_message(p) for p in message.iter_parts()),
        )

    body: str | None = None
    if message.get_content_maintype() == "text":
        try:
            body = message.get_content()
        except LookupError:
            # Unknown charset
            logger.warning("Unknown charset %r, decoding as UTF-8", message.get_content_charset())
            payload = message.get_payload(decode=True) or b""
            body = payload.decode("utf-8", errors="replace")

    return MimePart(
        content_type=content_type,
        body=body,
        filename=filename,
        is_attachment=is_attachment,
    )


def _part_from_gmail(part: dict[str, Any]) -> MimePart:
    content_type = part.get("mimeType", "")
    filename = part.get("filename") or None

    if content_type.startswith("multipart/"):
        return MimePart(
            content_type=content_type,
            filename=filename,
            is_attachment=bool(filename),
            parts=tuple(_part_from_gmail(p) for p in part.get("parts", [])),
        )

    body: str | None = None
    data = part.get("body", {}).get("data")
    if data and content_type.startswith("text/"):
        body = decode_base64url(data)

    return MimePart(
        content_type=content_type,
        body=body,
        filename=filename,
        is_attachment=bool(filename),
    )


def decode_base64url(data: str) -> str:
    """Decode base64url body data as UTF-8, replacing invalid bytes.

    Raises:
        DecodeError: If the data is not valid base64url.
    """
    # Gmail strips the padding (RFC 4648 §5)
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Failed to decode content: {e}") from e
    return raw.decode("utf-8", errors="replace")


def select_bodies(root: MimePart) -> tuple[str, str | None, bool]:
    """Pick the plain text and HTML bodies from a MIME tree.

    Depth-first; the first non-empty text/plain part and the first
    text/html part win. Attachments are skipped but reported.

    Returns:
        Tuple of (text, html, has_attachments). Text is empty when absent.
    """
    if not root.parts:
        content_type = root.content_type.lower()
        body = root.body
        if body is None or root.is_attachment:
            return "", None, root.is_attachment
        if "text/html" in content_type:
            return "", body, False
        if "text/plain" in content_type:
            return body, None, False
        return "", None, False

    text = ""
    html: str | None = None
    has_attachments = False

    def walk(part: MimePart) -> None:
        nonlocal text, html, has_attachments
        for sub_part in part.parts:
            if sub_part.parts:
                walk(sub_part)
                continue
            if sub_part.is_attachment:
                has_attachments = True
                continue
            if sub_part.body is None:
                continue
            content_type = sub_part.content_type.lower()
            if "text/plain" in content_type and not text:
                text = sub_part.body
            elif "text/html" in content_type and html is None:
                html = sub_part.body

    walk(root)
    return text, html, has_attachments
