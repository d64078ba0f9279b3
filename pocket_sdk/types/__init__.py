"""
pocket_sdk.types
================

Datatypes shared by the builder, signer, indexer and transformer:

- :mod:`pocket_sdk.types.core`: addresses, type tags, payloads, transactions
- :mod:`pocket_sdk.types.pocket`: the `Pocket` projection and its enums
- :mod:`pocket_sdk.types.events`: typed event payloads and the `Event` envelope
- :mod:`pocket_sdk.types.response`: raw JSON -> `Pocket`
"""

from . import core, events, pocket, response

__all__ = ["core", "events", "pocket", "response"]
