"""Sender/recipient address parsing: display names, local parts, domains."""

from __future__ import annotations

from dataclasses import dataclass

NOREPLY_MARKERS = ("noreply", "no-reply", "donotreply", "automated", "mailer-daemon")

FREEMAIL_DOMAINS = frozenset(
    {
        "gmail.com",
        "yahoo.com",
        "outlook.com",
        "hotmail.com",
        "protonmail.com",
        "proton.me",
        "icloud.com",
        "aol.com",
    }
)


def _strip_quotes(text: str) -> str:
    """Remove one layer of surrounding double quotes."""
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


@dataclass(frozen=True)
class PersonName:
    """Display name split into first and last tokens."""

    full: str
    first: str | None = None
    last: str | None = None

    @classmethod
    def parse(cls, text: str) -> PersonName:
        """Parse a display name.

        Middle tokens are not kept; ``full`` preserves inner spacing.
        """
        text = _strip_quotes(text.strip())
        parts = text.split()

        if not parts:
            return cls(full="")
        if len(parts) == 1:
            return cls(full=parts[0], first=parts[0])
        return cls(full=text, first=parts[0], last=parts[-1])

    def __str__(self) -> str:
        return self.full


@dataclass(frozen=True)
class EmailAddress:
    """Parsed mailbox. ``address`` is always ``local_part@domain``."""

    address: str
    local_part: str
    domain: str
    name: PersonName | None = None

    @classmethod
    def parse(cls, value: str) -> EmailAddress | None:
        """Parse ``Name <local@domain>`` or a bare ``local@domain``.

        Args:
            value: A single header value (one mailbox).

        Returns:
            The parsed address, or None when no ``@`` can be found.
        """
        value = value.strip()

        if "<" in value and ">" in value:
            start = value.index("<")
            end = value.index(">")
            name_part = _strip_quotes(value[:start].strip())
            address = value[start + 1 : end].strip()

            local, sep, domain = address.partition("@")
            if not sep:
                return None
            return cls(
                address=address,
                local_part=local,
                domain=domain,
                name=PersonName.parse(name_part) if name_part else None,
            )

        local, sep, domain = value.partition("@")
        if not sep:
            return None
        return cls(address=value, local_part=local, domain=domain)

    def is_noreply(self) -> bool:
        """Whether the local part looks like an automated sender."""
        lower = self.local_part.lower()
        return any(marker in lower for marker in NOREPLY_MARKERS)

    def is_freemail(self) -> bool:
        """Whether the domain is a known consumer webmail provider."""
        return self.domain.lower() in FREEMAIL_DOMAINS

    def __str__(self) -> str:
        if self.name is not None:
            return f"{self.name} <{self.address}>"
        return self.address


def parse_address_list(value: str) -> tuple[EmailAddress, ...]:
    """Parse a comma-separated recipient header, dropping unparseable entries."""
    addresses = []
    for token in value.split(","):
        parsed = EmailAddress.parse(token.strip())
        if parsed is not None:
            addresses.append(parsed)
    return tuple(addresses)
