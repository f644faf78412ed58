"""
Unit tests for the SQLite document store and the MongoDB ID helpers.
"""

import pytest
from bson import ObjectId

from database.errors import DuplicateDocumentError
from database.mongo_adapter import MongoAdapter, to_object_id
from database.nosql_adapter import NoSQLAdapter
from database.schemas import ROOT_PARENT_ID


def make_file(user_id="u1", name="a.txt", parent_id=ROOT_PARENT_ID, **extra):
    document = {
        "userId": user_id,
        "name": name,
        "type": "file",
        "isPublic": False,
        "parentId": parent_id,
        "localPath": "/tmp/files_manager/x",
    }
    document.update(extra)
    return document


class TestNoSQLAdapter:
    """Test NoSQL adapter CRUD operations"""

    def test_connect_marks_adapter_alive(self, tmp_path):
        adapter = NoSQLAdapter(str(tmp_path / "docs.db"))
        assert adapter.is_alive() is False

        adapter.connect()
        assert adapter.is_alive() is True
        assert adapter.count_documents('users') == 0
        assert adapter.count_documents('files') == 0

        adapter.close()
        assert adapter.is_alive() is False

    def test_create_and_get_document(self, metadata_store):
        doc_id = metadata_store.create_document('files', make_file())

        assert ObjectId.is_valid(doc_id)
        document = metadata_store.get_document('files', doc_id)
        assert document["id"] == doc_id
        assert document["name"] == "a.txt"
        assert document["parentId"] == ROOT_PARENT_ID

    def test_get_missing_document_returns_none(self, metadata_store):
        assert metadata_store.get_document('files', str(ObjectId())) is None
        assert metadata_store.get_document('files', "not-an-id") is None

    def test_query_filters_by_owner_and_parent(self, metadata_store):
        metadata_store.create_document('files', make_file("u1", "root.txt"))
        metadata_store.create_document('files', make_file("u1", "nested.txt", parent_id="abc"))
        metadata_store.create_document('files', make_file("u2", "theirs.txt"))

        at_root = metadata_store.query_documents('files', {"userId": "u1", "parentId": ROOT_PARENT_ID})
        nested = metadata_store.query_documents('files', {"userId": "u1", "parentId": "abc"})

        assert [doc["name"] for doc in at_root] == ["root.txt"]
        assert [doc["name"] for doc in nested] == ["nested.txt"]

    def test_query_keeps_insertion_order_with_offset(self, metadata_store):
        for i in range(5):
            metadata_store.create_document('files', make_file(name=f"{i}.txt"))

        page = metadata_store.query_documents('files', {"userId": "u1"}, limit=2, offset=2)
        assert [doc["name"] for doc in page] == ["2.txt", "3.txt"]

    def test_update_fields(self, metadata_store):
        doc_id = metadata_store.create_document('files', make_file())

        assert metadata_store.update_fields('files', doc_id, {"isPublic": True}) is True
        assert metadata_store.get_document('files', doc_id)["isPublic"] is True
        assert metadata_store.update_fields('files', str(ObjectId()), {"isPublic": True}) is False

    def test_find_one_and_count(self, metadata_store):
        metadata_store.create_document('users', {"email": "a@b.c", "password": "hash"})

        assert metadata_store.find_one('users', {"email": "a@b.c"})["password"] == "hash"
        assert metadata_store.find_one('users', {"email": "x@y.z"}) is None
        assert metadata_store.count_documents('users') == 1
        assert metadata_store.count_documents('users', {"email": "x@y.z"}) == 0

    def test_email_is_unique(self, metadata_store):
        metadata_store.create_document('users', {"email": "a@b.c", "password": "hash"})
        with pytest.raises(DuplicateDocumentError):
            metadata_store.create_document('users', {"email": "a@b.c", "password": "other"})

    def test_schema_rejects_folder_with_local_path(self, metadata_store):
        folder = make_file(type="folder")
        with pytest.raises(ValueError, match="Document validation failed"):
            metadata_store.create_document('files', folder)

    def test_schema_rejects_file_without_local_path(self, metadata_store):
        document = make_file()
        del document["localPath"]
        with pytest.raises(ValueError, match="Document validation failed"):
            metadata_store.create_document('files', document)

    def test_unknown_collection(self, metadata_store):
        with pytest.raises(ValueError, match="Unknown collection"):
            metadata_store.count_documents('sessions')


class TestMongoHelpers:
    """MongoDB ID handling that does not need a server"""

    def test_to_object_id(self):
        oid = ObjectId()
        assert to_object_id(str(oid)) == oid
        assert to_object_id(oid) is oid
        assert to_object_id("nope") is None
        assert to_object_id(None) is None

    def test_query_translation(self):
        oid = ObjectId()
        adapter = MongoAdapter()

        assert adapter._to_mongo_query({"id": str(oid), "userId": "u1"}) == {"_id": oid, "userId": "u1"}
        assert adapter._to_mongo_query({"id": "bad"}) is None
        assert MongoAdapter._from_mongo({"_id": oid, "name": "x"}) == {"id": str(oid), "name": "x"}

    def test_unconnected_adapter(self):
        adapter = MongoAdapter()
        assert adapter.is_alive() is False
        with pytest.raises(RuntimeError):
            adapter.count_documents('files')
