"""A small HTTP request router with named parameters, wildcards and groups.

Patterns are split on ``/``. A segment ``:name`` captures a path parameter,
``:name|regexp`` captures it only when the regular expression matches, and a
final ``...`` segment captures the rest of the path. Registering ``GET`` also
registers ``HEAD``; registering no methods registers all of them. ``OPTIONS``
and ``405 Method Not Allowed`` responses are handled automatically.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import unquote_plus, urlsplit

ALL_METHODS: tuple[str, ...] = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
)

_compiled_patterns: dict[str, re.Pattern[str]] = {}

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class _ParamKey:
    name: str


def param(context: Mapping[Any, Any], name: str) -> str:
    """Return the named parameter or wildcard (``...``) from a request context, or ``""``."""
    value = context.get(_ParamKey(name))
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Request:
    """An incoming request as seen by the router."""

    method: str
    url: str
    headers: Mapping[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    context: Mapping[Any, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """The escaped path of the request URL."""
        return urlsplit(self.url).path

    def with_context(self, context: Mapping[Any, Any]) -> Request:
        """Return a copy of the request carrying ``context``."""
        return replace(self, context=context)


class ResponseRecorder:
    """Collects the status, headers and body written by a handler."""

    def __init__(self) -> None:
        self.code = 200
        self.headers: dict[str, list[str]] = {}
        self.body = bytearray()
        self._wrote_header = False

    def write_header(self, code: int) -> None:
        """Record the status code; only the first call has any effect."""
        if self._wrote_header:
            return
        self.code = code
        self._wrote_header = True

    def write(self, data: bytes) -> int:
        """Append ``data`` to the body, implying a 200 status if none was set."""
        self.write_header(200)
        self.body.extend(data)
        return len(data)

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")


Handler = Callable[[ResponseRecorder, Request], None]
Middleware = Callable[[Handler], Handler]


def http_error(writer: ResponseRecorder, message: str, code: int) -> None:
    """Reply with a plain-text error message and status code."""
    writer.headers["Content-Type"] = ["text/plain; charset=utf-8"]
    writer.headers["X-Content-Type-Options"] = ["nosniff"]
    writer.write_header(code)
    writer.write((message + "\n").encode("utf-8"))


def _default_not_found(writer: ResponseRecorder, request: Request) -> None:
    http_error(writer, "404 page not found", 404)


def _default_method_not_allowed(writer: ResponseRecorder, request: Request) -> None:
    http_error(writer, "Method Not Allowed", 405)


def _default_options(writer: ResponseRecorder, request: Request) -> None:
    writer.write_header(204)


def _query_unescape(value: str) -> str:
    if _BAD_ESCAPE.search(value):
        raise ValueError(f"invalid URL escape in {value!r}")
    return unquote_plus(value)


@dataclass(frozen=True)
class _Route:
    method: str
    segments: list[str]
    wildcard: bool
    handler: Handler

    def match(self, context: Mapping[Any, Any], url_segments: list[str]) -> dict[Any, Any] | None:
        if not self.wildcard and len(url_segments) != len(self.segments):
            return None

        values = dict(context)
        for i, segment in enumerate(self.segments):
            if i > len(url_segments) - 1:
                return None

            if segment == "...":
                values[_ParamKey("...")] = "/".join(url_segments[i:])
                return values

            if segment.startswith(":"):
                key, sep, rx_pattern = segment[1:].partition("|")
                try:
                    value = _query_unescape(url_segments[i])
                except ValueError:
                    return None
                if sep:
                    if _compiled_patterns[rx_pattern].search(value):
                        values[_ParamKey(key)] = value
                        continue
                elif value != "":
                    values[_ParamKey(key)] = value
                    continue
                return None

            if url_segments[i] != segment:
                return None

        return values


class Mux:
    """Dispatches requests to handlers by path pattern and method."""

    def __init__(self) -> None:
        self.not_found: Handler = _default_not_found
        self.method_not_allowed: Handler = _default_method_not_allowed
        self.options: Handler = _default_options
        self._routes: list[_Route] = []
        self._middlewares: list[Middleware] = []

    def handle(self, pattern: str, handler: Handler, *args: str) -> None:
        """Register ``handler`` for ``pattern`` and the given methods."""
        methods = list(args)
        if "GET" in methods and "HEAD" not in methods:
            methods.append("HEAD")
        if not methods:
            methods = list(ALL_METHODS)

        segments = pattern.split("/")
        for segment in segments:
            if segment.startswith(":"):
                _, sep, rx_pattern = segment.partition("|")
                if sep:
                    _compiled_patterns[rx_pattern] = re.compile(rx_pattern)

        wrapped = self._wrap(handler)
        wildcard = pattern.endswith("/...")
        for method in methods:
            self._routes.append(
                _Route(
                    method=method.upper(),
                    segments=list(segments),
                    wildcard=wildcard,
                    handler=wrapped,
                )
            )

    def handle_func(self, pattern: str, handler: Handler, *args: str) -> None:
        """Register a handler function; the same as :meth:`handle`."""
        self.handle(pattern, handler, *args)

    def use(self, *args: Middleware) -> None:
        """Add middleware used by routes registered afterwards on this mux."""
        self._middlewares.extend(args)

    def group(self, fn: Callable[[Mux], None]) -> None:
        """Call ``fn`` with a mux sharing the routes but with its own middleware."""
        sub = copy.copy(self)
        sub._middlewares = list(self._middlewares)
        fn(sub)

    def serve_http(self, writer: ResponseRecorder, request: Request) -> None:
        """Dispatch ``request`` to the matching handler."""
        url_segments = request.path.split("/")
        allowed: list[str] = []

        for route in self._routes:
            matched = route.match(request.context, url_segments)
            if matched is None:
                continue
            if request.method == route.method:
                route.handler(writer, request.with_context(matched))
                return
            if route.method not in allowed:
                allowed.append(route.method)

        if allowed:
            writer.headers["Allow"] = [", ".join([*allowed, "OPTIONS"])]
            if request.method == "OPTIONS":
                self._wrap(self.options)(writer, request)
            else:
                self._wrap(self.method_not_allowed)(writer, request)
            return

        self._wrap(self.not_found)(writer, request)

    def _wrap(self, handler: Handler) -> Handler:
        for middleware in reversed(self._middlewares):
            handler = middleware(handler)
        return handler