"""Top-level package for the personal expense tracker.

Exposes the package version for runtime checks and CLI banners.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
