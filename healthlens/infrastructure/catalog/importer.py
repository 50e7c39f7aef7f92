"""Load a JSON dataset into a document collection, replacing what is there.

Run with:
    healthlens-import data/skin_diseases.json --collection skin_diseases
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from healthlens.application.ports import DocumentStorePort
from healthlens.infrastructure.config import DATA_DIR, Settings
from healthlens.infrastructure.store.memory_store import InMemoryDocumentStore


logger = logging.getLogger(__name__)

DEFAULT_DATASET = DATA_DIR / "skin_diseases.json"
DATASET_KEYS = ("diseases", "records")


def load_dataset(path: str | Path) -> List[dict]:
    """
    Read documents from a JSON file.

    Accepts a bare list of objects, or an object holding that list under
    one of DATASET_KEYS.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        for key in DATASET_KEYS:
            if key in data:
                data = data[key]
                break
        else:
            raise ValueError(f"{path}: expected a list or one of the keys {', '.join(DATASET_KEYS)}")

    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise ValueError(f"{path}: dataset must be a list of objects")
    return data


def import_dataset(store: DocumentStorePort, path: str | Path, collection: str) -> int:
    documents = load_dataset(path)
    count = store.replace_all(collection, documents)
    logger.info("Imported %d documents into %s", count, collection)
    return count


def seed_memory_store(settings: Settings, data_dir: str | Path = DATA_DIR) -> InMemoryDocumentStore:
    """In-memory store preloaded with the bundled datasets that exist."""
    store = InMemoryDocumentStore()
    for filename, collection in (
        ("skin_diseases.json", settings.skin_diseases_collection),
        ("mental_health_data.json", settings.mental_health_collection),
    ):
        path = Path(data_dir) / filename
        if path.exists():
            import_dataset(store, path, collection)
        else:
            logger.warning("No seed data at %s; %s starts empty", path, collection)
    return store


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    settings = Settings()

    parser = argparse.ArgumentParser(description="Replace a collection's contents from a JSON dataset.")
    parser.add_argument("path", nargs="?", default=str(DEFAULT_DATASET), help="JSON dataset to import")
    parser.add_argument(
        "--collection",
        default=settings.skin_diseases_collection,
        help="Target collection (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    from healthlens.infrastructure.store.mongo_store import MongoDocumentStore

    store = MongoDocumentStore(settings=settings)
    try:
        store.connect()
        import_dataset(store, args.path, args.collection)
    except Exception as e:
        logger.error("Import failed: %s", e)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
