"""Building blocks for HTTP APIs: contexts, formats, middleware, routing, cookies, casing and conditional requests."""

__version__ = "0.1.0"

__all__ = [
    "autoconfig",
    "casing",
    "chain",
    "conditional",
    "context",
    "cookie",
    "flow",
    "formats",
]