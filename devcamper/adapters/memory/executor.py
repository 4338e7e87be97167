"""
In-memory query executor.

Evaluates query descriptors over dict documents held in process. Used for
tests, seeding dry runs and local development without a MongoDB server.
"""

import logging
from copy import deepcopy
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from devcamper.adapters.memory.matching import matches, project, sort_documents
from devcamper.core.models import Population, QueryDescriptor

logger = logging.getLogger(__name__)


class InMemoryQueryExecutor:
    """
    Executes queries against in-process collections.

    Implements the IQueryExecutor interface. Documents are copied on the
    way in and out, so callers never share state with the store.
    """

    def __init__(self, collections: Optional[Dict[str, Iterable[Dict[str, Any]]]] = None):
        """
        Initialize in-memory query executor.

        Args:
            collections: Initial documents by collection name; documents
                without an ``_id`` get a fresh ObjectId
        """
        self._lock = RLock()
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        for name, documents in (collections or {}).items():
            for document in documents:
                self.insert_one(name, document)

    def _collection(self, name: str) -> List[Dict[str, Any]]:
        return self.collections.setdefault(name, [])

    def count(self, collection: str, filter: Dict[str, Any]) -> int:
        with self._lock:
            return sum(1 for doc in self._collection(collection) if matches(doc, filter))

    def fetch(self, descriptor: QueryDescriptor) -> List[Dict[str, Any]]:
        """
        Filter, sort, window, expand and project one collection.

        Args:
            descriptor: Query to execute

        Returns:
            Copies of the documents of the requested page
        """
        with self._lock:
            found = [doc for doc in self._collection(descriptor.collection) if matches(doc, descriptor.filter)]
            found = sort_documents(found, descriptor.sort)

            end = None if descriptor.limit is None else descriptor.skip + descriptor.limit
            page = [deepcopy(doc) for doc in found[descriptor.skip:end]]

            for population in descriptor.populate:
                self._populate(page, population)

        projection = descriptor.output_projection()
        return [project(doc, projection) for doc in page]

    def _populate(self, documents: List[Dict[str, Any]], population: Population) -> None:
        related = self._collection(population.collection)
        projection = population.projection()

        for document in documents:
            key = document.get(population.local_field)
            linked = [
                project(deepcopy(other), projection)
                for other in related
                if key is not None and other.get(population.foreign_field) == key
            ]
            if population.just_one:
                if linked:
                    document[population.path] = linked[0]
                else:
                    document.pop(population.path, None)
            else:
                document[population.path] = linked

    def find_one(self, descriptor: QueryDescriptor) -> Optional[Dict[str, Any]]:
        documents = self.fetch(descriptor.window(0, 1))
        return documents[0] if documents else None

    def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        stored = deepcopy(document)
        stored.setdefault("_id", ObjectId())
        with self._lock:
            self._collection(collection).append(stored)
        return deepcopy(stored)

    def update_one(
        self, collection: str, filter: Dict[str, Any], changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        with self._lock:
            for document in self._collection(collection):
                if matches(document, filter):
                    for path, value in changes.items():
                        _set_path(document, path, deepcopy(value))
                    return deepcopy(document)
        return None

    def delete_one(self, collection: str, filter: Dict[str, Any]) -> bool:
        with self._lock:
            documents = self._collection(collection)
            for index, document in enumerate(documents):
                if matches(document, filter):
                    del documents[index]
                    return True
        return False

    def delete_many(self, collection: str, filter: Dict[str, Any]) -> int:
        with self._lock:
            documents = self._collection(collection)
            kept = [doc for doc in documents if not matches(doc, filter)]
            removed = len(documents) - len(kept)
            documents[:] = kept
        logger.debug("Deleted %d documents from %s", removed, collection)
        return removed


def _set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    head, _, rest = path.partition(".")
    if not rest:
        document[head] = value
        return
    child = document.get(head)
    if not isinstance(child, dict):
        child = {}
        document[head] = child
    _set_path(child, rest, value)
