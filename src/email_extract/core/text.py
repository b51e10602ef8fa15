"""Plain-text helpers: HTML stripping and signature separation."""

from __future__ import annotations

_BLOCK_TAG_PREFIXES = ("br", "/p", "/div", "/li", "/h")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

SIGNATURE_DELIMITERS = (
    "--\n",
    "-- \n",
    "---\n",
    "Best regards",
    "Kind regards",
    "Regards,",
)


def html_to_text(html: str) -> str:
    """Convert an HTML payload to whitespace-normalized plain text.

    Tags are dropped, ``<script>``/``<style>`` contents are suppressed, and
    line breaks are inserted after ``<br>`` and closing block tags. Only a
    handful of named entities are decoded. Empty lines are removed.
    """
    out: list[str] = []
    in_tag = False
    in_script = False
    in_style = False
    tag_start = 0

    for i, char in enumerate(html):
        if not in_tag and char == "<":
            tag_start = i
            head = html[i : i + 9].lower()
            if head.startswith("<script"):
                in_script = True
            elif head.startswith("<style"):
                in_style = True
            elif head.startswith("</script"):
                in_script = False
            elif head.startswith("</style"):
                in_style = False
            in_tag = True
        elif in_tag and char == ">":
            in_tag = False
            if html[tag_start + 1 : i].lower().startswith(_BLOCK_TAG_PREFIXES):
                out.append("\n")
        elif not in_tag and not in_script and not in_style:
            out.append(char)

    text = "".join(out)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)

    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def separate_signature(text: str) -> tuple[str, str | None]:
    """Split text into main content and a trailing signature block.

    Delimiters are tried in priority order, not by position: the first one
    found anywhere in the text decides the split.

    Returns:
        Tuple of (content, signature). Signature is None when no delimiter
        matched, in which case content is the untouched text.
    """
    for delimiter in SIGNATURE_DELIMITERS:
        pos = text.find(delimiter)
        if pos == -1:
            continue
        signature = text[pos:].strip()
        if signature:
            return text[:pos].strip(), signature

    return text, None


def count_lines(text: str) -> int:
    """Count newline-separated lines; a trailing newline adds no line."""
    if not text:
        return 0
    return len(text.removesuffix("\n").split("\n"))
