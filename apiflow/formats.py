"""Request/response body formats and content-type based selection."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, BinaryIO

from apiflow.context import Context

Transformer = Callable[[Context, str, Any], Any]


class UnknownContentTypeError(ValueError):
    """Raised when no format is registered for a content type."""

    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"unknown content type: {content_type}")


@dataclass(frozen=True)
class Format:
    """A pair of functions to write a value to a stream and read one from bytes."""

    marshal: Callable[[BinaryIO, Any], None]
    unmarshal: Callable[[bytes], Any]


_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def json_marshal(writer: BinaryIO, value: Any) -> None:
    """Write ``value`` as compact JSON followed by a newline, HTML-safe."""
    text = json.dumps(
        value,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        allow_nan=False,
    )
    writer.write((text.translate(_HTML_ESCAPES) + "\n").encode("utf-8"))


def json_unmarshal(data: bytes) -> Any:
    """Parse JSON bytes into Python values."""
    return json.loads(data)


DEFAULT_JSON_FORMAT = Format(marshal=json_marshal, unmarshal=json_unmarshal)


def default_formats() -> dict[str, Format]:
    """Return a fresh mapping of the default formats (JSON only)."""
    return {"application/json": DEFAULT_JSON_FORMAT, "json": DEFAULT_JSON_FORMAT}


class Formats:
    """Registered formats, a default content type and response transformers."""

    def __init__(
        self,
        formats: Mapping[str, Format] | None = None,
        default_format: str = "",
        transformers: Iterable[Transformer] = (),
    ) -> None:
        self._formats = dict(formats or {})
        if not default_format and "application/json" in self._formats:
            default_format = "application/json"
        self.default_format = default_format
        self._keys = ([default_format] if default_format else []) + list(self._formats)
        self._transformers = list(transformers)

    def content_types(self) -> list[str]:
        """Supported content types, the default first."""
        return list(self._keys)

    def unmarshal(self, content_type: str, data: bytes) -> Any:
        """Decode ``data`` using the format for ``content_type``.

        Handles values like ``application/json; charset=utf-8`` and
        ``my/format+json``; an empty content type is treated as JSON.
        """
        start = content_type.find("+") + 1
        end = content_type.find(";")
        if end == -1:
            end = len(content_type)
        key = content_type[start:end] or "application/json"
        fmt = self._formats.get(key)
        if fmt is None:
            raise UnknownContentTypeError(content_type)
        return fmt.unmarshal(data)

    def marshal(self, writer: BinaryIO, content_type: str, value: Any) -> None:
        """Encode ``value`` to ``writer`` using the format for ``content_type``."""
        fmt = self._formats.get(content_type)
        if fmt is None:
            fmt = self._formats.get(content_type[content_type.find("+") + 1 :])
        if fmt is None:
            raise UnknownContentTypeError(content_type)
        fmt.marshal(writer, value)

    def transform(self, ctx: Context, status: str, value: Any) -> Any:
        """Run every transformer in order over ``value`` and return the result."""
        for transformer in self._transformers:
            value = transformer(ctx, status, value)
        return value