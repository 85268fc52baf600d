"""
Adapters layer - Datastore integrations.
"""

from .memory_store import SAMPLE_DATA_FILE, InMemoryDataStore

__all__ = ["InMemoryDataStore", "SAMPLE_DATA_FILE"]
