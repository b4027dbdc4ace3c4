from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable, List, Optional

# RFC 6265: cookie-name is an RFC 9110 token, cookie-value is a run of
# cookie-octets, optionally wrapped in double quotes.
_NAME_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_VALUE_OCTETS = re.compile(r'[\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]*')

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(slots=True, frozen=True)
class Cookie:
    """
    A single cookie record as supplied by the caller or issued by a server.

    Attributes:
        name: Cookie name.
        value: Cookie value, sent verbatim. Must not contain separators,
            whitespace or control characters.
        domain: Domain attribute, empty when unknown.
        path: Path attribute.
        expires: Expiry timestamp (UTC) or ``None`` for session cookies.
        secure: Whether the cookie is restricted to HTTPS.
        http_only: Whether the cookie carried the HttpOnly flag.
    """

    name: str
    value: str
    domain: str = ""
    path: str = "/"
    expires: Optional[datetime] = None
    secure: bool = False
    http_only: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Cookie name must not be empty")
        if not _NAME_TOKEN.fullmatch(self.name):
            raise ValueError(f"Invalid cookie name {self.name!r}")
        if not _valid_value(self.value):
            raise ValueError(f"Invalid value for cookie '{self.name}'")

    def header_pair(self) -> str:
        """Render as the ``name=value`` fragment used in a Cookie header."""
        return f"{self.name}={self.value}"


def _valid_value(value: str) -> bool:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return _VALUE_OCTETS.fullmatch(value) is not None


def parse_set_cookie(header: str, *, now: Optional[datetime] = None) -> Optional[Cookie]:
    """
    Parse one raw ``Set-Cookie`` header value.

    No cookie policy is applied: foreign domains and past expiry dates are
    kept as sent. ``Max-Age`` wins over ``Expires``; a non-positive
    ``Max-Age`` maps to the Unix epoch. Returns ``None`` when the entry has
    no usable ``name=value`` pair.
    """
    parts = header.split(";")
    if "=" not in parts[0]:
        return None
    name, value = parts[0].split("=", 1)

    domain = ""
    path = "/"
    expires: Optional[datetime] = None
    max_age: Optional[int] = None
    secure = False
    http_only = False

    for attribute in parts[1:]:
        key, _, attr_value = attribute.partition("=")
        key = key.strip().lower()
        attr_value = attr_value.strip()
        if key == "domain":
            domain = attr_value
        elif key == "path":
            path = attr_value or "/"
        elif key == "expires":
            try:
                expires = parsedate_to_datetime(attr_value)
            except (TypeError, ValueError):
                continue
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
        elif key == "max-age":
            try:
                max_age = int(attr_value)
            except ValueError:
                continue
        elif key == "secure":
            secure = True
        elif key == "httponly":
            http_only = True

    if max_age is not None:
        if max_age <= 0:
            expires = _EPOCH
        else:
            expires = (now or datetime.now(timezone.utc)) + timedelta(seconds=max_age)

    try:
        return Cookie(
            name=name.strip(),
            value=value.strip(),
            domain=domain,
            path=path,
            expires=expires,
            secure=secure,
            http_only=http_only,
        )
    except ValueError:
        return None


def parse_cookie_header(header: str) -> List[Cookie]:
    """
    Parse a raw ``Cookie`` header string into ordered cookie records.

    Empty segments are skipped; segments without ``=`` are ignored. Order and
    duplicates are preserved.

    Raises:
        ValueError: A segment has an invalid name or value.
    """
    cookies: List[Cookie] = []
    for part in header.split(";"):
        part = part.strip()
        if not part or "=" not in part:
            continue
        name, value = part.split("=", 1)
        name = name.strip()
        if not name:
            continue
        cookies.append(Cookie(name=name, value=value.strip()))
    return cookies


def render_cookie_header(cookies: Iterable[Cookie]) -> str:
    """Join cookies into a ``Cookie`` header value, keeping their order."""
    return "; ".join(cookie.header_pair() for cookie in cookies)
