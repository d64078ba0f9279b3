from .indexer import EventIndexer

__all__ = ["EventIndexer"]
