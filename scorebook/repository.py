"""
Load-all / save-all persistence for the three stored collections.

The store hands over and receives whole collections as JSON-ready lists;
repositories only decide where those lists live.
"""
import copy
import json
from typing import Optional

from scorebook.database import get_session
from scorebook.models.snapshot import CollectionSnapshot

MATCHES = "matches"
PLAYERS = "players"
ROSTERS = "rosters"


class SnapshotRepository:
    """Base class: one JSON list per collection name"""

    def load_all(self, collection: str) -> list:
        raise NotImplementedError

    def save_all(self, collection: str, items: list):
        raise NotImplementedError


class InMemoryRepository(SnapshotRepository):
    """Keeps collections in a dict; for tests and throwaway sessions"""

    def __init__(self, initial: Optional[dict] = None):
        self._data = copy.deepcopy(initial) if initial else {}

    def load_all(self, collection: str) -> list:
        return copy.deepcopy(self._data.get(collection, []))

    def save_all(self, collection: str, items: list):
        self._data[collection] = copy.deepcopy(items)


class SqlRepository(SnapshotRepository):
    """Stores each collection as one row of the collection_snapshots table"""

    def __init__(self, session_factory=get_session):
        self._session_factory = session_factory

    def load_all(self, collection: str) -> list:
        session = self._session_factory()
        try:
            row = session.get(CollectionSnapshot, collection)
            return json.loads(row.payload) if row else []
        finally:
            session.close()

    def save_all(self, collection: str, items: list):
        session = self._session_factory()
        try:
            row = session.get(CollectionSnapshot, collection)
            if row is None:
                row = CollectionSnapshot(key=collection)
                session.add(row)
            row.payload = json.dumps(items)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
