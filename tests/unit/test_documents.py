"""Unit tests for the document model and corpus loading"""

import json

import pytest

from search_tuner.documents import CorpusLoadError, Document, documents_from_records, load_documents


class TestDocument:
    """Test building documents from plain records"""

    def test_from_dict_full_record(self):
        doc = Document.from_dict({
            "id": 3,
            "name": "Mochi Paradise",
            "category": "dessert",
            "tags": ["mochi", "japanese"],
            "description": "Authentic Japanese mochi",
            "reviews": ["Best mochi ice cream ever!"],
            "rating": 4.9,
            "location": "Little Tokyo",
        })

        assert doc.name == "Mochi Paradise"
        assert doc.tags == ("mochi", "japanese")
        assert doc.reviews == ("Best mochi ice cream ever!",)
        assert doc.rating == 4.9

    def test_from_dict_missing_fields(self):
        """Test missing text becomes empty and missing sequences become empty tuples"""
        doc = Document.from_dict({"id": 7, "name": "Tokyo Garden", "tags": None})

        assert doc.category == ""
        assert doc.tags == ()
        assert doc.reviews == ()
        assert doc.rating is None

    def test_from_dict_ignores_unknown_keys(self):
        doc = Document.from_dict({"id": 1, "name": "Aqua Pool Club", "icon": "pool"})

        assert doc.name == "Aqua Pool Club"

    def test_single_tag_string(self):
        """Test a bare string is one tag, not a sequence of characters"""
        assert Document.from_dict({"id": 1, "tags": "coffee"}).tags == ("coffee",)

    def test_immutable(self):
        doc = Document(id=1, name="Mocha Cafe")

        with pytest.raises(AttributeError):
            doc.name = "Other"

    def test_to_dict(self):
        doc = Document(id=1, name="Mocha Cafe", tags=("coffee",))

        data = doc.to_dict()

        assert data["tags"] == ["coffee"]
        assert Document.from_dict(data) == doc


class TestLoadDocuments:
    """Test JSON corpus loading"""

    def test_load_fixture(self, locations):
        assert len(locations) == 8
        assert locations[0].name == "Mocha Cafe"

    def test_load_wrapped_list(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(json.dumps({"documents": [{"id": 1, "name": "Sushi Master"}]}))

        documents = load_documents(path)

        assert [d.name for d in documents] == ["Sushi Master"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusLoadError):
            load_documents(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text("{not json")

        with pytest.raises(CorpusLoadError):
            load_documents(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(json.dumps({"items": []}))

        with pytest.raises(CorpusLoadError):
            load_documents(path)

    def test_non_object_entry(self):
        with pytest.raises(CorpusLoadError):
            documents_from_records([{"id": 1}, "Mocha Cafe"])

    def test_invalid_rating(self):
        with pytest.raises(CorpusLoadError):
            documents_from_records([{"id": 1, "rating": "five stars"}])
