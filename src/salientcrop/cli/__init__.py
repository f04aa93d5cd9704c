"""CLI module for salientcrop.

Provides the ``salientcrop`` command for computing crops of image files.
"""

from __future__ import annotations

from salientcrop.cli.main import ResampleMethod, app

__all__ = ["ResampleMethod", "app"]
