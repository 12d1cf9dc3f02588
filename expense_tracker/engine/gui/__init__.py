"""Optional PySide6 desktop form for the expense tracker."""

from __future__ import annotations

from .main import launch_gui, main

__all__ = ["launch_gui", "main"]
