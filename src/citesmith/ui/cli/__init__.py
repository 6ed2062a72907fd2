"""Public CLI exports for citesmith."""

from __future__ import annotations

from .app import app, main
from .commands import list_bibliography, render
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "list_bibliography",
    "main",
    "render",
]
