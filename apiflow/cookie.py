"""Reading cookies from request headers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from apiflow.context import Context

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~"
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
)

_ASCII_SPACE = " \t\r\n"


@dataclass(frozen=True)
class Cookie:
    """A cookie sent by the client."""

    name: str
    value: str


class NoCookieError(LookupError):
    """Raised when a named cookie is not present in the request."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"http: named cookie not present: {name}")


def _valid_name(name: str) -> bool:
    return bool(name) and all(c in _TOKEN_CHARS for c in name)


def _valid_value_char(c: str) -> bool:
    return 0x20 <= ord(c) < 0x7F and c not in '";\\'


def _parse_value(raw: str) -> str | None:
    if len(raw) > 1 and raw[0] == '"' and raw[-1] == '"':
        raw = raw[1:-1]
    if all(_valid_value_char(c) for c in raw):
        return raw
    return None


def parse_cookies(lines: Iterable[str], name_filter: str = "") -> list[Cookie]:
    """Parse ``Cookie`` header values, skipping malformed entries.

    When ``name_filter`` is not empty, only cookies of that name are returned.
    """
    cookies: list[Cookie] = []
    for line in lines:
        line = line.strip(_ASCII_SPACE)
        if not line:
            continue
        for part in line.split(";"):
            part = part.strip(_ASCII_SPACE)
            if not part:
                continue
            name, _, raw = part.partition("=")
            name = name.strip(_ASCII_SPACE)
            if not _valid_name(name):
                continue
            if name_filter and name_filter != name:
                continue
            value = _parse_value(raw)
            if value is None:
                continue
            cookies.append(Cookie(name=name, value=value))
    return cookies


def _cookie_lines(ctx: Context) -> list[str]:
    return [value for name, value in ctx.each_header() if name.lower() == "cookie"]


def read_cookie(ctx: Context, name: str) -> Cookie:
    """Return the first cookie called ``name``, or raise :class:`NoCookieError`."""
    found = parse_cookies(_cookie_lines(ctx), name)
    if not found:
        raise NoCookieError(name)
    return found[0]


def read_cookies(ctx: Context) -> list[Cookie]:
    """Return every well-formed cookie in the request headers."""
    return parse_cookies(_cookie_lines(ctx))