"""CLI command implementations."""

from __future__ import annotations

from .bibliography import list_bibliography
from .render import render


__all__ = ["list_bibliography", "render"]
