"""
Tests for the JSON document store.
"""

import json

from roommatch.storage import iter_candidates, iter_documents, load_store, save_store


class TestLoadSave:

    def test_missing_file(self, tmp_path):
        assert load_store(tmp_path / "missing.json") == {"listings": {}, "requests": {}}

    def test_empty_and_corrupt_files(self, tmp_path):
        empty = tmp_path / "empty.json"
        empty.write_text("   ")
        corrupt = tmp_path / "corrupt.json"
        corrupt.write_text("{not json")
        assert load_store(empty) == {"listings": {}, "requests": {}}
        assert load_store(corrupt) == {"listings": {}, "requests": {}}

    def test_missing_collection_added(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"listings": {"a": {"city": "Pune"}}}))
        store = load_store(path)
        assert store["requests"] == {}
        assert store["listings"]["a"]["city"] == "Pune"

    def test_save_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "store.json"
        save_store(path, {"listings": {"a": {"city": "Pune"}}, "requests": {}})
        assert load_store(path)["listings"]["a"]["city"] == "Pune"


class TestIteration:

    def test_iter_candidates(self, populated_store):
        candidates = list(iter_candidates(load_store(populated_store)))
        assert [(c.kind, c.candidate_id) for c in candidates] == [("listing", "lst-1"), ("request", "req-1")]
        assert candidates[1].gender_preference == "female"

    def test_iter_documents_yields_stored_dicts(self, populated_store):
        store = load_store(populated_store)
        docs = list(iter_documents(store))
        docs[1]["latitude"] = 18.5
        assert store["requests"]["req-1"]["latitude"] == 18.5
