"""
MongoDB query executor.

Executes query descriptors as MongoDB aggregation pipelines.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from devcamper.adapters.mongodb.pipeline import build_pipeline
from devcamper.core.errors import DuplicateDocumentError, QueryExecutionError
from devcamper.core.models import QueryDescriptor

logger = logging.getLogger(__name__)


class MongoQueryExecutor:
    """
    Executes queries against MongoDB.

    Implements the IQueryExecutor interface for MongoDB. Connection pooling,
    timeouts and retries are left to the ``MongoClient``.
    """

    def __init__(self, mongo_uri: str, database_name: str, **client_options: Any):
        """
        Initialize MongoDB query executor.

        Args:
            mongo_uri: MongoDB connection URI
            database_name: Name of the database
            **client_options: Extra ``MongoClient`` keyword arguments
        """
        self.mongo_uri = mongo_uri
        self.database_name = database_name

        self.client: MongoClient = MongoClient(mongo_uri, **client_options)
        self.db: Database = self.client[database_name]

    def count(self, collection: str, filter: Dict[str, Any]) -> int:
        try:
            return self.db[collection].count_documents(filter)
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query=filter) from e

    def fetch(self, descriptor: QueryDescriptor) -> List[Dict[str, Any]]:
        """
        Run the descriptor as an aggregation pipeline.

        Args:
            descriptor: Query to execute

        Returns:
            Documents of the requested page
        """
        pipeline = build_pipeline(descriptor)
        logger.debug("Aggregating %s: %s", descriptor.collection, pipeline)
        try:
            return list(self.db[descriptor.collection].aggregate(pipeline))
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query={"pipeline": pipeline}) from e

    def find_one(self, descriptor: QueryDescriptor) -> Optional[Dict[str, Any]]:
        documents = self.fetch(descriptor.window(0, 1))
        return documents[0] if documents else None

    def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(document)
        try:
            result = self.db[collection].insert_one(document)
        except DuplicateKeyError as e:
            fields = (e.details or {}).get("keyValue", {})
            raise DuplicateDocumentError(str(e), fields=fields) from e
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query=document) from e
        document["_id"] = result.inserted_id
        return document

    def update_one(
        self, collection: str, filter: Dict[str, Any], changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        try:
            return self.db[collection].find_one_and_update(
                filter, {"$set": changes}, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            fields = (e.details or {}).get("keyValue", {})
            raise DuplicateDocumentError(str(e), fields=fields) from e
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query=filter) from e

    def delete_one(self, collection: str, filter: Dict[str, Any]) -> bool:
        try:
            return self.db[collection].delete_one(filter).deleted_count > 0
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query=filter) from e

    def delete_many(self, collection: str, filter: Dict[str, Any]) -> int:
        try:
            return self.db[collection].delete_many(filter).deleted_count
        except PyMongoError as e:
            raise QueryExecutionError(str(e), query=filter) from e
