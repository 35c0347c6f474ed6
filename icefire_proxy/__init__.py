"""Command table, middleware, RESP reply writing, request decoding and routers for a Redis-protocol proxy."""

__version__ = "0.1.0"