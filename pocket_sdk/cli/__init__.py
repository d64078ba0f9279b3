"""
pocket_sdk.cli
==============

Typer-based command-line interface, installed as the `pocket-sdk` console
script.

    $ pocket-sdk --help
"""

from .main import app, main

__all__ = ["app", "main"]
