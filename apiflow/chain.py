"""Middleware chains wrapped around request handlers."""

from __future__ import annotations

from collections.abc import Callable

from apiflow.context import Context

Handler = Callable[[Context], None]
Middleware = Callable[[Context, Handler], None]


def _wrap(middleware: Middleware, following: Handler) -> Handler:
    def handle(ctx: Context) -> None:
        middleware(ctx, following)

    return handle


class Middlewares(list):
    """An ordered list of ``middleware(ctx, next)`` functions."""

    def handler(self, endpoint: Handler) -> Handler:
        """Compose the middlewares around ``endpoint``; the first one runs first."""
        wrapped = endpoint
        for middleware in reversed(self):
            wrapped = _wrap(middleware, wrapped)
        return wrapped