"""
Record store layer - interface, filters and the in-memory implementation
"""

from src.store.base import RecordStore, TaskFilters, ClientFilters, PolicyFilters
from src.store.memory import InMemoryRecordStore

__all__ = [
    "RecordStore",
    "TaskFilters",
    "ClientFilters",
    "PolicyFilters",
    "InMemoryRecordStore",
]
