"""Subject line normalization: reply depth and forward detection."""

from __future__ import annotations

from dataclasses import dataclass

NO_SUBJECT = "(no subject)"

_FORWARD_CHARS = "fFwWdD:"

# Re[n]: counts are unsigned 32-bit; larger values are ignored
MAX_REPLY_COUNT = 2**32 - 1


@dataclass(frozen=True)
class Subject:
    """Subject line with reply/forward prefixes analysed."""

    original: str
    normalized: str
    reply_depth: int = 0
    is_forward: bool = False
    language: str | None = None

    @classmethod
    def parse(cls, text: str) -> Subject:
        """Strip ``Re:``/``Re[n]:`` prefixes, then one ``Fwd:``/``Fw:`` prefix.

        ``Re[n]:`` adds n to the reply depth. A ``Re[`` without a closing
        ``]:`` ends prefix stripping.
        """
        normalized = text
        reply_depth = 0

        while True:
            prefix = normalized[:3].lower()
            if prefix == "re:":
                normalized = normalized[3:].lstrip()
                reply_depth += 1
            elif prefix == "re[":
                end = normalized.find("]:")
                if end == -1:
                    break
                count = normalized[3:end]
                if count.isascii() and count.isdigit() and int(count) <= MAX_REPLY_COUNT:
                    reply_depth += int(count)
                normalized = normalized[end + 2 :].lstrip()
            else:
                break

        is_forward = False
        lower = normalized[:4].lower()
        if lower.startswith(("fwd:", "fw:")):
            is_forward = True
            # Strips every leading f/w/d/colon, not just the prefix itself
            normalized = normalized.lstrip(_FORWARD_CHARS).lstrip()

        return cls(
            original=text,
            normalized=normalized,
            reply_depth=reply_depth,
            is_forward=is_forward,
        )

    def __str__(self) -> str:
        return self.original
