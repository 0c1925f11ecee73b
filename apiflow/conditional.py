"""Conditional requests using ``If-Match``, ``If-None-Match`` and date headers.

A handler resolves :class:`Params` from the request, then calls
:meth:`Params.precondition_failed` with the resource's current ETag and
modification time. Reads that fail get a 304 Not Modified; writes get a
412 Precondition Failed listing each failed condition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from apiflow.context import Context

_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class ErrorDetail:
    """One problem found while checking a request."""

    message: str = ""
    location: str = ""
    value: Any = None

    def __str__(self) -> str:
        return f"{self.message} ({self.location}: {self.value})"


class StatusError(Exception):
    """An error carrying an HTTP status code and optional details."""

    def __init__(self, status: int, detail: str = "", errors: list[ErrorDetail] | None = None) -> None:
        self.status = status
        self.title = HTTPStatus(status).phrase
        self.detail = detail
        self.errors = list(errors or [])
        super().__init__(detail or self.title)


def _trim_etag(value: str) -> str:
    if value.startswith("W/") and len(value) > 2:
        value = value[2:]
    return value.strip('"')


def _http_date(moment: datetime | None) -> str:
    if moment is None:
        moment = datetime.min
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return (
        f"{_DAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year:04d} {moment:%H:%M:%S} GMT"
    )


def _after(moment: datetime | None, other: datetime) -> bool:
    return moment is not None and moment > other


@dataclass
class Params:
    """Conditional request headers sent by a client."""

    if_match: list[str] = field(default_factory=list)
    if_none_match: list[str] = field(default_factory=list)
    if_modified_since: datetime | None = None
    if_unmodified_since: datetime | None = None
    _is_write: bool = field(default=False, repr=False, compare=False)

    def resolve(self, ctx: Context) -> list[ErrorDetail]:
        """Note whether the request is a write; never reports errors."""
        if ctx.method in _WRITE_METHODS:
            self._is_write = True
        return []

    def has_conditional_params(self) -> bool:
        """Whether any conditional header was sent."""
        return bool(
            self.if_match
            or self.if_none_match
            or self.if_modified_since is not None
            or self.if_unmodified_since is not None
        )

    def precondition_failed(self, etag: str, modified: datetime | None) -> None:
        """Raise :class:`StatusError` when the conditions do not hold.

        ``etag`` is the resource's current ETag (empty when it does not exist)
        and ``modified`` its last modification time, or ``None``. Reads fail
        with 304 Not Modified, writes with 412 Precondition Failed.
        """
        failed = False
        errors: list[ErrorDetail] = []
        found = f"found resource with ETag {etag}" if etag else "found no existing resource"

        for match in self.if_none_match:
            trimmed = _trim_etag(match)
            if trimmed == etag or (trimmed == "*" and etag != ""):
                if self._is_write:
                    errors.append(
                        ErrorDetail(
                            message=f"If-None-Match: {match} precondition failed, {found}",
                            location="headers.If-None-Match",
                            value=match,
                        )
                    )
                failed = True

        if self.if_match and not any(_trim_etag(m) == etag for m in self.if_match):
            if self._is_write:
                errors.append(
                    ErrorDetail(
                        message=f"If-Match precondition failed, {found}",
                        location="headers.If-Match",
                        value=list(self.if_match),
                    )
                )
            failed = True

        if self.if_modified_since is not None and not _after(modified, self.if_modified_since):
            if self._is_write:
                since = _http_date(self.if_modified_since)
                errors.append(
                    ErrorDetail(
                        message=(
                            f"If-Modified-Since: {since} precondition failed, "
                            f"resource was modified at {_http_date(modified)}"
                        ),
                        location="headers.If-Modified-Since",
                        value=since,
                    )
                )
            failed = True

        if self.if_unmodified_since is not None and _after(modified, self.if_unmodified_since):
            if self._is_write:
                since = _http_date(self.if_unmodified_since)
                errors.append(
                    ErrorDetail(
                        message=(
                            f"If-Unmodified-Since: {since} precondition failed, "
                            f"resource was modified at {_http_date(modified)}"
                        ),
                        location="headers.If-Unmodified-Since",
                        value=since,
                    )
                )
            failed = True

        if failed:
            if self._is_write:
                raise StatusError(412, HTTPStatus(412).phrase, errors)
            raise StatusError(304)