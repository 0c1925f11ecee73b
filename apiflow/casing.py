"""Split identifiers into words and join them in CamelCase, snake_case and others."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Iterable

TransformFunc = Callable[[str], str]

COMMON_INITIALISMS = frozenset(
    {
        "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML",
        "HTTP", "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS",
        "RPC", "SLA", "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP", "UI",
        "UID", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XMPP", "XSRF",
        "XSS",
        # Media initialisms
        "1080P", "2D", "3D", "4K", "8K", "AAC", "AC3", "CDN", "DASH", "DRM",
        "DVR", "EAC3", "FPS", "GOP", "H264", "H265", "HD", "HLS", "MJPEG",
        "MP2T", "MP3", "MP4", "MPEG2", "MPEG4", "NTSC", "PCM", "RGB", "RGBA",
        "RTMP", "RTP", "SCTE", "SCTE35", "SMPTE", "UPID", "UPIDS", "VOD",
        "YUV420", "YUV422", "YUV444",
    }
)

COMMON_SUFFIXES = frozenset({"D", "GB", "K", "KB", "KBPS", "MB", "MPBS", "P", "TB"})

_INTEGER = re.compile(r"[+-]?[0-9]+")

_NONE, _LOWER, _FIRST_UPPER, _UPPER, _SYMBOL = range(5)


def _category(c: str) -> str:
    return unicodedata.category(c)


def _is_punct(c: str) -> bool:
    return _category(c).startswith("P")


def _is_upper(c: str) -> bool:
    return _category(c) == "Lu"


def _is_lower(c: str) -> bool:
    return _category(c) == "Ll"


def _is_letter(c: str) -> bool:
    return _category(c).startswith("L")


def _is_integer(part: str) -> bool:
    if not _INTEGER.fullmatch(part):
        return False
    return -(2**63) <= int(part) < 2**63


def _is_separator(c: str) -> bool:
    if c.isascii():
        return not (c.isalnum() or c == "_")
    if _is_letter(c) or _category(c) == "Nd":
        return False
    return c.isspace()


def _title(part: str) -> str:
    """Upper-case the first letter of each word, leaving the rest alone."""
    out = []
    prev = " "
    for c in part:
        if _is_separator(prev):
            titled = c.title()
            out.append(titled if len(titled) == 1 else c)
        else:
            out.append(c)
        prev = c
    return "".join(out)


def _lower(part: str) -> str:
    return part.lower()


def identity(part: str) -> str:
    """Return the part as a plain string, with its casing unchanged."""
    return str(part)


def initialism(part: str) -> str:
    """Upper-case common initialisms such as ID and HTTP."""
    upper = part.upper()
    return upper if upper in COMMON_INITIALISMS else part


def split(value: str) -> list[str]:
    """Split a value into words across casing styles, numbers and symbols.

    ``split("HTTPServer_2020")`` returns ``["HTTP", "Server", "2020"]``.
    """
    results: list[str] = []
    start = 0
    state = _NONE

    for i, c in enumerate(value):
        if c.isspace() or _is_punct(c):
            if i > start:
                results.append(value[start:i])
            start = i + 1
            state = _NONE
            continue

        if state not in (_FIRST_UPPER, _UPPER) and _is_upper(c):
            if start != i:
                results.append(value[start:i])
                start = i
            state = _FIRST_UPPER
        elif state == _FIRST_UPPER and _is_upper(c):
            state = _UPPER
        elif state != _SYMBOL and not _is_letter(c):
            if start != i:
                results.append(value[start:i])
                start = i
            state = _SYMBOL
        elif state != _LOWER and _is_lower(c):
            if state == _UPPER:
                # The last upper-case letter starts the lower-case word.
                if i > 0 and start != i - 1:
                    results.append(value[start : i - 1])
                    start = i - 1
            elif state != _FIRST_UPPER:
                if i > 0 and start != i:
                    results.append(value[start:i])
                    start = i
            state = _LOWER

    if start < len(value):
        results.append(value[start:])
    return results


def join(parts: Iterable[str], sep: str, *args: TransformFunc) -> str:
    """Join parts with ``sep`` after applying each transform; empty parts are dropped."""
    kept = []
    for part in parts:
        for transform in args:
            part = transform(part)
            if part == "":
                break
        else:
            kept.append(part)
            continue
    return sep.join(kept)


def merge_numbers(parts: list[str], *args: str) -> list[str]:
    """Merge number parts with adjacent words, e.g. ``h264`` rather than ``h_264``.

    Extra arguments are suffixes that attach to the number before them
    (``4K``); without any, a common set is used. Pass ``""`` to use none.
    """
    lookup = {word.upper() for word in args} if args else COMMON_SUFFIXES
    results: list[str] = []
    prev_num = False
    i = 0
    while i < len(parts):
        part = parts[i]
        if _is_integer(part):
            if i < len(parts) - 1 and parts[i + 1].upper() in lookup:
                results.append(part + parts[i + 1])
                i += 2
                continue
            if not prev_num:
                if i == 0:
                    results.append(part)
                else:
                    results[-1] += part
                prev_num = True
                i += 1
                continue
            prev_num = True
        else:
            if i == 1 and prev_num:
                results[0] += part
                prev_num = False
                i += 1
                continue
            prev_num = False
        results.append(part)
        i += 1
    return results


def camel(value: str, *args: TransformFunc) -> str:
    """Return a CamelCase version of ``value``; parts are lower-cased unless transforms are given."""
    transforms = list(args) if args else [_lower]
    return join(split(value), "", *transforms, _title)


def lower_camel(value: str, *args: TransformFunc) -> str:
    """Return a lowerCamelCase version of ``value``."""
    result = camel(value, *args)
    return result[:1].lower() + result[1:]


def snake(value: str, *args: TransformFunc) -> str:
    """Return a snake_case version of ``value``."""
    transforms = args if args else (_lower,)
    return join(merge_numbers(split(value)), "_", *transforms)


def kebab(value: str, *args: TransformFunc) -> str:
    """Return a kebab-case version of ``value``."""
    transforms = args if args else (_lower,)
    return join(merge_numbers(split(value)), "-", *transforms)