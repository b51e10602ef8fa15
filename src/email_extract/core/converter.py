"""Markdown rendering of parsed emails, using trafilatura for HTML-only bodies."""

from __future__ import annotations

import logging

import trafilatura

from email_extract.core.exceptions import ConversionError
from email_extract.core.models import Body, Email

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


class MarkdownConverter:
    """Convert a parsed Email to markdown with YAML front matter."""

    def __init__(self, favor_recall: bool = True) -> None:
        self._favor_recall = favor_recall

    def convert(self, email: Email) -> str:
        """Render an email as markdown.

        Strategy:
        1. Plain text body is used as-is.
        2. HTML-only bodies go through trafilatura (links and tables kept).
        3. If trafilatura returns None or fails, the stripped HTML text is used.

        Raises:
            ConversionError: If the email has no renderable content.
        """
        markdown_body = self._convert_body(email.body)

        if markdown_body is None:
            raise ConversionError(f"No convertible content for message {email.message_id}")

        return f"{self._build_front_matter(email)}\n{markdown_body}"

    def _convert_body(self, body: Body) -> str | None:
        if body.text:
            return body.text

        result: str | None = None
        if body.html:
            try:
                result = trafilatura.extract(
                    body.html,
                    output_format="txt",
                    favor_recall=self._favor_recall,
                    include_links=True,
                    include_tables=True,
                )
            except Exception as e:
                logger.warning("Trafilatura extraction failed: %s", e)
                result = None

        if result is None and body.text_from_html:
            result = body.text_from_html

        return result

    @staticmethod
    def _build_front_matter(email: Email) -> str:
        """Build YAML front matter from the parsed header fields."""
        lines = [
            "---",
            f"subject: {_quote(email.subject.original)}",
            f"from: {_quote(str(email.sender))}",
            f"to: {_quote(', '.join(str(a) for a in email.to))}",
            f"date: {email.date.strftime('%Y-%m-%d %H:%M:%S')}",
        ]
        if email.cc:
            lines.append(f"cc: {_quote(', '.join(str(a) for a in email.cc))}")
        lines.append(f"message_id: {_quote(str(email.message_id))}")
        lines.append(f"urgency: {email.metadata.urgency.value}")
        lines.append(f"sentiment: {email.metadata.sentiment.value}")
        if email.metadata.category_hints:
            names = ", ".join(_quote(h.category) for h in email.metadata.category_hints)
            lines.append(f"categories: [{names}]")
        lines.append("---")

        return "\n".join(lines)
