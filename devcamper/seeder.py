"""
Import or delete the sample data set.

Usage::

    python -m devcamper.seeder -i _data
    python -m devcamper.seeder -d
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from devcamper import config
from devcamper.core.errors import DevcamperError
from devcamper.core.interfaces import IQueryExecutor
from devcamper.passwords import hash_password
from devcamper.schema.resources import RESOURCES, ResourceSchema
from devcamper.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)

# Import order keeps referenced documents ahead of their referrers.
SEED_COLLECTIONS = ("bootcamps", "courses", "users", "reviews")

# Seed files carry plain-text passwords for these collections.
PASSWORD_FIELDS = {"users": "password"}

_CAST_TYPES = {"objectid", "date", "datetime"}


def prepare_document(schema: ResourceSchema, document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Cast id and date fields of a raw JSON document to their stored types
    and hash plain-text passwords.

    Raises:
        ValueError: If a value cannot be cast
    """
    prepared = dict(document)
    password_field = PASSWORD_FIELDS.get(schema.collection)
    if password_field and prepared.get(password_field):
        prepared[password_field] = hash_password(str(prepared[password_field]))
    for field, field_type in schema.field_types.items():
        if field_type in _CAST_TYPES and "." not in field and prepared.get(field) is not None:
            prepared[field] = TypeMapper.cast(prepared[field], field_type)
    return prepared


def load_documents(data_dir: Path, collection: str) -> List[Dict[str, Any]]:
    path = data_dir / f"{collection}.json"
    if not path.exists():
        logger.warning("No %s found, skipping %s", path, collection)
        return []
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def import_data(store: IQueryExecutor, data_dir: Path) -> Dict[str, int]:
    """
    Insert every seed file found in ``data_dir``.

    Returns:
        Number of inserted documents by collection
    """
    inserted: Dict[str, int] = {}
    for collection in SEED_COLLECTIONS:
        schema = RESOURCES[collection]
        documents = load_documents(data_dir, collection)
        for document in documents:
            store.insert_one(collection, prepare_document(schema, document))
        inserted[collection] = len(documents)
        logger.info("Imported %d %s", len(documents), collection)
    return inserted


def delete_data(store: IQueryExecutor) -> Dict[str, int]:
    """Delete every document of the seeded collections."""
    deleted = {collection: store.delete_many(collection, {}) for collection in SEED_COLLECTIONS}
    for collection, count in deleted.items():
        logger.info("Deleted %d %s", count, collection)
    return deleted


def main(argv: Optional[Sequence[str]] = None, store: Optional[IQueryExecutor] = None) -> int:
    parser = argparse.ArgumentParser(description="Import or delete the sample data set")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("-i", "--import", dest="data_dir", type=Path, help="Directory holding the seed JSON files")
    action.add_argument("-d", "--delete", action="store_true", help="Delete all seeded collections")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    if store is None:
        from devcamper.adapters.mongodb import MongoQueryExecutor

        store = MongoQueryExecutor(mongo_uri=config.MONGO_URI, database_name=config.MONGO_DATABASE)

    try:
        if args.delete:
            delete_data(store)
            print("Data Deleted...")
        else:
            import_data(store, args.data_dir)
            print("Data Imported...")
    except (DevcamperError, ValueError, OSError) as e:
        logger.error("Seeding failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
