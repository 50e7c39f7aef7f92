"""Tests for the dataset import command."""
import json
import os
import tempfile
from unittest.mock import patch

import pytest

from healthlens.application.use_cases import SkinAnalysisUseCase
from healthlens.infrastructure.catalog.importer import (
    DEFAULT_DATASET,
    import_dataset,
    load_dataset,
    main,
    seed_memory_store,
)
from healthlens.infrastructure.config import Settings
from healthlens.infrastructure.prediction.mock_predictor import MockSkinPredictor
from healthlens.infrastructure.store.memory_store import InMemoryDocumentStore


ECZEMA = {
    "name": "Eczema",
    "symptoms": "Dry itchy patches",
    "causes": "Barrier defects",
    "treatment": "Emollients",
    "prevention": "Moisturise",
    "severity": "Mild",
}


@pytest.fixture
def dataset_file():
    """Write a dataset to a temporary JSON file."""
    paths = []

    def _write(payload):
        with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".json") as f:
            json.dump(payload, f)
            paths.append(f.name)
        return f.name

    yield _write

    for path in paths:
        if os.path.exists(path):
            os.unlink(path)


class TestLoadDataset:
    def test_diseases_key(self, dataset_file):
        assert load_dataset(dataset_file({"diseases": [ECZEMA]})) == [ECZEMA]

    def test_records_key(self, dataset_file):
        assert load_dataset(dataset_file({"records": [{"title": "x"}]})) == [{"title": "x"}]

    def test_bare_list(self, dataset_file):
        assert load_dataset(dataset_file([ECZEMA])) == [ECZEMA]

    def test_unknown_shape_rejected(self, dataset_file):
        with pytest.raises(ValueError):
            load_dataset(dataset_file({"items": [ECZEMA]}))

    def test_non_object_items_rejected(self, dataset_file):
        with pytest.raises(ValueError):
            load_dataset(dataset_file({"diseases": ["Eczema"]}))

    def test_bundled_dataset_loads(self):
        names = {d["name"] for d in load_dataset(DEFAULT_DATASET)}
        assert {"Acne", "Eczema", "Psoriasis"} <= names


class TestImportRoundTrip:
    def test_import_replaces_existing(self, dataset_file):
        store = InMemoryDocumentStore({"skin_diseases": [{"name": "Stale"}]})

        count = import_dataset(store, dataset_file({"diseases": [ECZEMA]}), "skin_diseases")

        assert count == 1
        assert store.find_one("skin_diseases", {"name": "Stale"}) is None

    def test_analysis_returns_imported_fields(self, dataset_file):
        store = InMemoryDocumentStore()
        import_dataset(store, dataset_file({"diseases": [ECZEMA]}), "skin_diseases")
        usecase = SkinAnalysisUseCase(predictor=MockSkinPredictor(), store=store)

        eczema = usecase.analyze("img").predictions[1]

        assert eczema.disease == "Eczema"
        for key, value in ECZEMA.items():
            assert getattr(eczema.details, key) == value


class TestImportCommand:
    def test_main_success(self, dataset_file):
        path = dataset_file({"diseases": [ECZEMA]})
        with patch("healthlens.infrastructure.store.mongo_store.MongoDocumentStore") as store_cls:
            store = store_cls.return_value
            store.replace_all.return_value = 1

            code = main([path, "--collection", "catalog"])

        assert code == 0
        store.connect.assert_called_once()
        store.replace_all.assert_called_once_with("catalog", [ECZEMA])
        store.close.assert_called_once()

    def test_main_connection_failure(self, dataset_file):
        path = dataset_file({"diseases": [ECZEMA]})
        with patch("healthlens.infrastructure.store.mongo_store.MongoDocumentStore") as store_cls:
            store = store_cls.return_value
            store.connect.side_effect = RuntimeError("no server")

            code = main([path])

        assert code == 1
        store.replace_all.assert_not_called()
        store.close.assert_called_once()


class TestSeedMemoryStore:
    def test_seeds_both_bundled_collections(self):
        store = seed_memory_store(Settings())

        assert store.find_one("skin_diseases", {"name": "Acne"})["severity"] == "Moderate"
        assert len(store.find_many("mental_health_data", limit=100)) == 4

    def test_missing_files_leave_collections_empty(self):
        with tempfile.TemporaryDirectory() as data_dir:
            with open(os.path.join(data_dir, "skin_diseases.json"), "w") as f:
                json.dump({"diseases": [ECZEMA]}, f)

            store = seed_memory_store(Settings(), data_dir=data_dir)

        assert store.find_one("skin_diseases", {"name": "Eczema"}) == ECZEMA
        assert store.find_many("mental_health_data", limit=100) == []
