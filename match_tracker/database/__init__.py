"""
Database Module
JSON-basierter State Store für Snapshot, Metadaten und Historie
"""

from .state_store import PersistenceError, StateStore

__all__ = ["StateStore", "PersistenceError"]
