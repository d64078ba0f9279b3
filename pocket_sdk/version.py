"""
Version helpers for the pocket SDK.
"""

from __future__ import annotations

from importlib import metadata

# Bump this when publishing
__version__ = "0.1.0"


def version() -> str:
    """Installed distribution version, falling back to the static one in a source checkout."""
    try:
        return metadata.version("pocket-sdk")
    except metadata.PackageNotFoundError:
        return __version__


__all__ = ["__version__", "version"]
