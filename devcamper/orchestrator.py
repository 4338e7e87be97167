"""
Advanced results orchestrator - main entry point.

Coordinates translation, execution and formatting to turn a request's query
parameters into a result envelope.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from devcamper.core.interfaces import IQueryExecutor
from devcamper.core.models import PageWindow, QueryDescriptor, ResultEnvelope, TranslatorConfig
from devcamper.execution.executor import QueryExecutor
from devcamper.execution.result_formatter import ResultFormatter
from devcamper.query.translator import PopulateArg, QueryTranslator
from devcamper.schema.resources import RESOURCES, ResourceSchema
from devcamper.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)


class AdvancedResults:
    """
    Main orchestrator for filtered, sorted, paginated resource listings.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        query_executor: IQueryExecutor,
        resources: Optional[Dict[str, ResourceSchema]] = None,
        config: Optional[TranslatorConfig] = None,
    ):
        """
        Initialize advanced results with a store adapter.

        Args:
            query_executor: Store-specific query executor
            resources: Resource schemas by collection name
            config: Translator settings used where a resource declares none
        """
        self.store = query_executor
        self.query_executor = QueryExecutor(query_executor)
        self.resources = resources if resources is not None else RESOURCES
        self.config = config

    @classmethod
    def from_mongodb(
        cls,
        mongo_uri: str,
        database_name: str,
        resources: Optional[Dict[str, ResourceSchema]] = None,
        config: Optional[TranslatorConfig] = None,
        **client_options: Any,
    ) -> "AdvancedResults":
        """
        Create advanced results backed by MongoDB.

        Args:
            mongo_uri: MongoDB connection URI
            database_name: Name of the database
            resources: Resource schemas by collection name
            config: Default translator settings
            **client_options: Extra ``MongoClient`` keyword arguments

        Returns:
            Configured AdvancedResults for MongoDB
        """
        from devcamper.adapters.mongodb import MongoQueryExecutor

        executor = MongoQueryExecutor(mongo_uri=mongo_uri, database_name=database_name, **client_options)
        return cls(query_executor=executor, resources=resources, config=config)

    @classmethod
    def in_memory(
        cls,
        collections: Optional[Dict[str, Iterable[Dict[str, Any]]]] = None,
        resources: Optional[Dict[str, ResourceSchema]] = None,
        config: Optional[TranslatorConfig] = None,
    ) -> "AdvancedResults":
        """Create advanced results backed by the in-memory store."""
        from devcamper.adapters.memory import InMemoryQueryExecutor

        return cls(query_executor=InMemoryQueryExecutor(collections), resources=resources, config=config)

    def get_schema(self, collection: str) -> ResourceSchema:
        """
        Get the schema of a collection.

        Raises:
            ValueError: If the collection has no schema
        """
        try:
            return self.resources[collection]
        except KeyError:
            raise ValueError(f"Unknown resource collection '{collection}'") from None

    def get_translator(self, collection: str, config: Optional[TranslatorConfig] = None) -> QueryTranslator:
        schema = self.get_schema(collection)
        return QueryTranslator(
            schema,
            registry=self.resources,
            config=config or schema.translator_config or self.config,
        )

    def build(
        self,
        collection: str,
        params: Dict[str, Any],
        populate: PopulateArg = None,
        base_filter: Optional[Dict[str, Any]] = None,
        config: Optional[TranslatorConfig] = None,
    ) -> Tuple[QueryDescriptor, PageWindow]:
        """Translate request parameters without executing anything."""
        translator = self.get_translator(collection, config)
        return translator.build(params, populate=populate, base_filter=base_filter)

    def translate(
        self,
        collection: str,
        params: Dict[str, Any],
        populate: PopulateArg = None,
        base_filter: Optional[Dict[str, Any]] = None,
        config: Optional[TranslatorConfig] = None,
    ) -> ResultEnvelope:
        """
        Run a listing request and build its envelope.

        Args:
            collection: Resource collection to list
            params: Parsed query-string parameters
            populate: Relation(s) to expand in each document
            base_filter: Conditions forced on top of the request's filter
            config: Translator settings for this call only

        Returns:
            Result envelope for the requested page

        Raises:
            QueryExecutionError: If the store rejects or fails the query
        """
        descriptor, window = self.build(collection, params, populate, base_filter, config)
        total, documents = self.query_executor.execute(descriptor)
        return ResultFormatter.format_envelope(documents, window, total)

    async def translate_async(
        self,
        collection: str,
        params: Dict[str, Any],
        populate: PopulateArg = None,
        base_filter: Optional[Dict[str, Any]] = None,
        config: Optional[TranslatorConfig] = None,
    ) -> ResultEnvelope:
        """
        Async version of translate().

        The count and the page fetch are issued concurrently.
        """
        descriptor, window = self.build(collection, params, populate, base_filter, config)
        total, documents = await self.query_executor.execute_async(descriptor)
        return ResultFormatter.format_envelope(documents, window, total)

    def get_by_id(
        self, collection: str, document_id: Any, populate: PopulateArg = None
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch one document by identity, with optional relation expansion.

        Malformed ids are treated as not found.

        Returns:
            The raw document, or None
        """
        try:
            object_id = TypeMapper.cast(document_id, "objectid")
        except ValueError:
            logger.debug("Malformed %s id: %r", collection, document_id)
            return None

        translator = self.get_translator(collection)
        descriptor = (
            QueryDescriptor(collection=collection)
            .where({"_id": object_id})
            .select(translator.build_projection(None))
        )
        descriptor = translator.expand(descriptor, populate)
        return self.query_executor.find_one(descriptor)
