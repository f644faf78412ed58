"""
MongoDB adapter for document-based operations.
Provides identical interface to NoSQLAdapter but uses native MongoDB collections.
"""

import logging
from typing import Dict, Any, List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ASCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError
from .errors import DuplicateDocumentError
from .schemas import DOCUMENT_VALIDATORS, COLLECTIONS

logger = logging.getLogger(__name__)


def to_object_id(doc_id: Any) -> Optional[ObjectId]:
    """Convert a string ID to an ObjectId, or None when it is not a valid ID"""
    if isinstance(doc_id, ObjectId):
        return doc_id
    try:
        return ObjectId(str(doc_id))
    except (InvalidId, TypeError):
        return None


class MongoAdapter:
    """MongoDB adapter for document-based database operations"""

    def __init__(self, host: str = "localhost", port: int = 27017, database_name: str = "files_manager",
                 client: Optional[MongoClient] = None):
        self.host = host
        self.port = port
        self.database_name = database_name
        self.client = client
        self.db = None

    def connect(self) -> None:
        """Establish MongoDB connection"""
        try:
            if self.client is None:
                self.client = MongoClient(host=self.host, port=self.port)
            self.db = self.client[self.database_name]

            # Test connection
            self.client.admin.command('ping')
            logger.info(f"Connected to MongoDB database: {self.database_name}")
            self.init_collections()
        except ConnectionFailure as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise
        except Exception as e:
            logger.error(f"MongoDB connection error: {e}")
            raise

    def is_alive(self) -> bool:
        if self.client is None:
            return False
        try:
            self.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB is not reachable: {e}")
            return False

    def _collection(self, collection: str):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        if self.db is None:
            raise RuntimeError("MongoAdapter is not connected; call connect() first")
        return self.db[collection]

    def _validate_document(self, collection: str, document: Dict[str, Any]) -> None:
        """Validate document against schema"""
        if collection in DOCUMENT_VALIDATORS:
            try:
                DOCUMENT_VALIDATORS[collection](document)
            except Exception as e:
                logger.error(f"Document validation failed for {collection}: {e}")
                raise ValueError(f"Document validation failed: {e}")

    def _to_mongo_query(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        mongo_query = {}
        for key, value in query.items():
            if key == 'id':
                object_id = to_object_id(value)
                if object_id is None:
                    return None
                mongo_query['_id'] = object_id
            else:
                mongo_query[key] = value
        return mongo_query

    @staticmethod
    def _from_mongo(document: Dict[str, Any]) -> Dict[str, Any]:
        document['id'] = str(document.pop('_id'))
        return document

    def init_collections(self) -> None:
        """Initialize MongoDB indexes"""
        try:
            self._collection('users').create_index([("email", ASCENDING)], unique=True)
            self._collection('files').create_index([("userId", ASCENDING), ("parentId", ASCENDING)])
            logger.info("MongoDB collections and indexes initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing MongoDB collections: {e}")
            raise

    def create_document(self, collection: str, document: Dict[str, Any]) -> str:
        """Create a new document in the collection and return its generated ID"""
        try:
            self._validate_document(collection, document)
            result = self._collection(collection).insert_one(dict(document))
            doc_id = str(result.inserted_id)
            logger.info(f"Created document in {collection} with ID: {doc_id}")
            return doc_id
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate document rejected in {collection}: {e}")
            raise DuplicateDocumentError(str(e)) from e
        except Exception as e:
            logger.error(f"Error creating document in {collection}: {e}")
            raise

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by ID"""
        object_id = to_object_id(doc_id)
        if object_id is None:
            return None
        try:
            document = self._collection(collection).find_one({"_id": object_id})
            return self._from_mongo(document) if document else None
        except Exception as e:
            logger.error(f"Error getting document from {collection}: {e}")
            raise

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Get the first document matching an equality query"""
        mongo_query = self._to_mongo_query(query)
        if mongo_query is None:
            return None
        try:
            document = self._collection(collection).find_one(mongo_query)
            return self._from_mongo(document) if document else None
        except Exception as e:
            logger.error(f"Error finding document in {collection}: {e}")
            raise

    def query_documents(self, collection: str, query: Dict[str, Any], limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
        """Query documents with filters, in natural order"""
        mongo_query = self._to_mongo_query(query)
        if mongo_query is None:
            return []
        try:
            cursor = self._collection(collection).find(mongo_query).skip(offset).limit(limit)
            return [self._from_mongo(doc) for doc in cursor]
        except Exception as e:
            logger.error(f"Error querying documents from {collection}: {e}")
            raise

    def update_fields(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> bool:
        """Set top-level fields on a document by ID"""
        object_id = to_object_id(doc_id)
        if object_id is None:
            return False
        try:
            result = self._collection(collection).update_one({"_id": object_id}, {"$set": fields})
            if result.matched_count:
                logger.info(f"Updated document in {collection} with ID: {doc_id}")
            else:
                logger.warning(f"No document found to update in {collection} with ID: {doc_id}")
            return result.matched_count > 0
        except Exception as e:
            logger.error(f"Error updating document in {collection}: {e}")
            raise

    def count_documents(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching query"""
        mongo_query = self._to_mongo_query(query or {})
        if mongo_query is None:
            return 0
        try:
            return self._collection(collection).count_documents(mongo_query)
        except Exception as e:
            logger.error(f"Error counting documents in {collection}: {e}")
            raise

    def close(self) -> None:
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
