import copy
import threading
from typing import Dict, List, Optional

from healthlens.application.ports import DocumentStorePort


class InMemoryDocumentStore(DocumentStorePort):
    """Dict-backed store for local runs and tests."""

    def __init__(self, collections: Optional[Dict[str, List[dict]]] = None, connected: bool = True):
        self._collections: Dict[str, List[dict]] = {
            name: [dict(d) for d in docs] for name, docs in (collections or {}).items()
        }
        self._lock = threading.Lock()
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected

    def find_one(self, collection: str, query: dict, timeout: Optional[float] = None) -> Optional[dict]:
        with self._lock:
            docs = list(self._collections.get(collection, []))
        for doc in docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return {k: copy.deepcopy(v) for k, v in doc.items() if k != "_id"}
        return None

    def find_many(self, collection: str, limit: int) -> List[dict]:
        with self._lock:
            docs = self._collections.get(collection, [])[:limit]
            return copy.deepcopy(docs)

    def replace_all(self, collection: str, documents: List[dict]) -> int:
        with self._lock:
            self._collections[collection] = [dict(d) for d in documents]
            return len(documents)
