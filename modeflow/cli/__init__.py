from __future__ import annotations

from modeflow.cli.entrypoint import main

__all__ = ["main"]
