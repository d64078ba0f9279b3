"""
Hamster Pocket SDK for Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    PocketSdkError,
    EncodingError,
    DecodingError,
    TypeTagParseError,
    ConfigurationError,
    RpcError,
    SimulationFailure,
    SubmissionFailure,
    ConfirmationTimeout,
)

# Ledger
from .rpc.http import LedgerClient  # noqa: F401

# Wallet
from .wallet.signer import Account, derive_resource_account_address  # noqa: F401

# Tx helpers
from .tx.build import TransactionBuilder, TransactionalExecutor, ViewExecutor  # noqa: F401
from .tx.send import LedgerService, ReadOnlySigner, TransactionSigner  # noqa: F401

# Events
from .events.indexer import EventIndexer  # noqa: F401
from .types.events import Event, EventName, EventReason  # noqa: F401

# Domain
from .types.pocket import Pocket, PocketStatus  # noqa: F401
from .types.response import transform_pocket  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "PocketSdkError", "EncodingError", "DecodingError", "TypeTagParseError",
    "ConfigurationError", "RpcError", "SimulationFailure", "SubmissionFailure",
    "ConfirmationTimeout",
    # Ledger
    "LedgerClient",
    # Wallet
    "Account", "derive_resource_account_address",
    # Tx
    "TransactionBuilder", "TransactionalExecutor", "ViewExecutor",
    "LedgerService", "ReadOnlySigner", "TransactionSigner",
    # Events
    "EventIndexer", "Event", "EventName", "EventReason",
    # Domain
    "Pocket", "PocketStatus", "transform_pocket",
]
