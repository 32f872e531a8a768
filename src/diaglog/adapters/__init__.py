"""Adapters connecting diaglog to other logging systems."""

from diaglog.adapters.logging import ContextProvider, DiagLogHandler, from_stdlib_level

__all__ = ["ContextProvider", "DiagLogHandler", "from_stdlib_level"]
