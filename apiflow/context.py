"""Request/response context shared by routers, middleware and handlers."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, BinaryIO
from urllib.parse import SplitResult, parse_qs, urlsplit


def _canonical(name: str) -> str:
    """Return the canonical form of a header name, e.g. ``content-type`` -> ``Content-Type``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def _header_pairs(headers: Any) -> Iterator[tuple[str, str]]:
    if headers is None:
        return
    items = headers.items() if isinstance(headers, Mapping) else headers
    for name, value in items:
        if isinstance(value, str):
            yield _canonical(name), value
        else:
            for item in value:
                yield _canonical(name), item


class Context(ABC):
    """The current request/response context, independent of any router."""

    @property
    @abstractmethod
    def operation(self) -> Any:
        """The operation that matched the request, if any."""

    @property
    @abstractmethod
    def method(self) -> str:
        """The HTTP method of the request."""

    @property
    @abstractmethod
    def host(self) -> str:
        """The host the request was sent to."""

    @property
    @abstractmethod
    def remote_addr(self) -> str:
        """The remote address of the client."""

    @property
    @abstractmethod
    def url(self) -> SplitResult:
        """The full request URL."""

    @property
    @abstractmethod
    def status(self) -> int:
        """The response status code set so far (0 when unset)."""

    @abstractmethod
    def values(self) -> Mapping[Any, Any]:
        """Request-scoped values carried along with the request."""

    @abstractmethod
    def param(self, name: str) -> str:
        """Return the value of a path parameter, or an empty string."""

    @abstractmethod
    def query(self, name: str) -> str:
        """Return the first value of a query parameter, or an empty string."""

    @abstractmethod
    def header(self, name: str) -> str:
        """Return the first value of a request header, or an empty string."""

    @abstractmethod
    def each_header(self) -> Iterator[tuple[str, str]]:
        """Yield every ``(name, value)`` pair of the request headers."""

    @abstractmethod
    def body_reader(self) -> BinaryIO:
        """Return a readable stream of the request body."""

    @abstractmethod
    def set_status(self, code: int) -> None:
        """Set the response status code."""

    @abstractmethod
    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any existing values."""

    @abstractmethod
    def append_header(self, name: str, value: str) -> None:
        """Add a value to a response header."""

    @abstractmethod
    def body_writer(self) -> BinaryIO:
        """Return a writable stream for the response body."""


class SimpleContext(Context):
    """An in-memory context holding a request and recording the response."""

    def __init__(
        self,
        method: str = "GET",
        url: str = "/",
        headers: Any = None,
        body: bytes | None = b"",
        params: Mapping[str, str] | None = None,
        operation: Any = None,
        remote_addr: str = "",
    ) -> None:
        self._method = method
        self._url = urlsplit(url)
        self._headers = list(_header_pairs(headers))
        self._body = io.BytesIO(body or b"")
        self._params = dict(params or {})
        self._operation = operation
        self._remote_addr = remote_addr
        self._status = 0
        self._response_headers: dict[str, list[str]] = {}
        self._response_body = io.BytesIO()
        self._values: Mapping[Any, Any] = MappingProxyType({})

    @property
    def operation(self) -> Any:
        return self._operation

    @property
    def method(self) -> str:
        return self._method

    @property
    def host(self) -> str:
        return self.header("Host") or self._url.netloc

    @property
    def remote_addr(self) -> str:
        return self._remote_addr

    @property
    def url(self) -> SplitResult:
        return self._url

    @property
    def status(self) -> int:
        return self._status

    def values(self) -> Mapping[Any, Any]:
        return self._values

    def param(self, name: str) -> str:
        return self._params.get(name, "")

    def query(self, name: str) -> str:
        found = parse_qs(self._url.query, keep_blank_values=True).get(name)
        return found[0] if found else ""

    def header(self, name: str) -> str:
        wanted = _canonical(name)
        return next((value for key, value in self._headers if key == wanted), "")

    def each_header(self) -> Iterator[tuple[str, str]]:
        yield from self._headers

    def body_reader(self) -> BinaryIO:
        return self._body

    def set_status(self, code: int) -> None:
        self._status = code

    def set_header(self, name: str, value: str) -> None:
        self._response_headers[_canonical(name)] = [value]

    def append_header(self, name: str, value: str) -> None:
        self._response_headers.setdefault(_canonical(name), []).append(value)

    def body_writer(self) -> BinaryIO:
        return self._response_body

    def response_headers(self) -> dict[str, list[str]]:
        """Return a copy of the response headers set so far."""
        return {name: list(values) for name, values in self._response_headers.items()}


class SubContext(Context):
    """A context that wraps another, replacing only its request-scoped values."""

    def __init__(self, inner: Context, override: Mapping[Any, Any]) -> None:
        self._inner = inner
        self._override = override

    @property
    def operation(self) -> Any:
        return self._inner.operation

    @property
    def method(self) -> str:
        return self._inner.method

    @property
    def host(self) -> str:
        return self._inner.host

    @property
    def remote_addr(self) -> str:
        return self._inner.remote_addr

    @property
    def url(self) -> SplitResult:
        return self._inner.url

    @property
    def status(self) -> int:
        return self._inner.status

    def values(self) -> Mapping[Any, Any]:
        return self._override

    def param(self, name: str) -> str:
        return self._inner.param(name)

    def query(self, name: str) -> str:
        return self._inner.query(name)

    def header(self, name: str) -> str:
        return self._inner.header(name)

    def each_header(self) -> Iterator[tuple[str, str]]:
        return self._inner.each_header()

    def body_reader(self) -> BinaryIO:
        return self._inner.body_reader()

    def set_status(self, code: int) -> None:
        self._inner.set_status(code)

    def set_header(self, name: str, value: str) -> None:
        self._inner.set_header(name, value)

    def append_header(self, name: str, value: str) -> None:
        self._inner.append_header(name, value)

    def body_writer(self) -> BinaryIO:
        return self._inner.body_writer()


def with_context(ctx: Context, override: Mapping[Any, Any]) -> Context:
    """Return a context like ``ctx`` whose request-scoped values are ``override``."""
    return SubContext(ctx, override)


def with_value(ctx: Context, key: Any, value: Any) -> Context:
    """Return a context like ``ctx`` with one extra request-scoped value set."""
    merged: dict[Any, Any] = dict(ctx.values())
    merged[key] = value
    return with_context(ctx, MappingProxyType(merged))


__all__: Iterable[str] = [
    "Context",
    "SimpleContext",
    "SubContext",
    "with_context",
    "with_value",
]