"""
NoSQL adapter for document-based operations.
Stores JSON documents in SQLite so the files service can run locally and in tests
with the same interface as MongoAdapter.
"""

import sqlite3
import json
import logging
from typing import Dict, Any, List, Optional
from bson import ObjectId
from .errors import DuplicateDocumentError
from .schemas import DOCUMENT_VALIDATORS, COLLECTIONS

logger = logging.getLogger(__name__)


class NoSQLAdapter:
    """SQLite-backed adapter for document-based database operations"""

    def __init__(self, db_path: str = "files_manager.db"):
        self.db_path = db_path
        self.connected = False

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with JSON support"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _table(self, collection: str) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return f"{collection}_docs"

    def _validate_document(self, collection: str, document: Dict[str, Any]) -> None:
        """Validate document against schema"""
        if collection in DOCUMENT_VALIDATORS:
            try:
                DOCUMENT_VALIDATORS[collection](document)
            except Exception as e:
                logger.error(f"Document validation failed for {collection}: {e}")
                raise ValueError(f"Document validation failed: {e}")

    def _serialize_document(self, document: Dict[str, Any]) -> str:
        return json.dumps(document)

    def _deserialize_document(self, doc_id: str, json_str: str) -> Dict[str, Any]:
        document = json.loads(json_str)
        document['id'] = doc_id
        return document

    def _where_clause(self, query: Dict[str, Any]) -> tuple:
        """Translate an equality query into a WHERE clause over the JSON document"""
        clauses = []
        params = []
        for key, value in query.items():
            if key == 'id':
                clauses.append("doc_id = ?")
                params.append(str(value))
                continue
            if not key.replace('_', '').isalnum():
                raise ValueError(f"Invalid query field: {key}")
            clauses.append(f"json_extract(document, '$.{key}') = ?")
            params.append(value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def connect(self) -> None:
        """Create the collections and mark the adapter as usable"""
        self.init_collections()
        self.connected = True
        logger.info(f"Connected to SQLite document store: {self.db_path}")

    def is_alive(self) -> bool:
        if not self.connected:
            return False
        try:
            conn = self._get_connection()
            try:
                conn.execute("SELECT 1")
            finally:
                conn.close()
            return True
        except sqlite3.Error as e:
            logger.warning(f"SQLite document store is not reachable: {e}")
            return False

    def init_collections(self) -> None:
        """Initialize document collections (tables)"""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for collection in COLLECTIONS:
                cursor.execute(f'''
                    CREATE TABLE IF NOT EXISTS {self._table(collection)} (
                        doc_id TEXT PRIMARY KEY,
                        document TEXT NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                ''')

            cursor.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_user_email
                ON users_docs(json_extract(document, '$.email'))
            ''')
            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_file_owner_parent
                ON files_docs(json_extract(document, '$.userId'), json_extract(document, '$.parentId'))
            ''')

            conn.commit()
            logger.info("NoSQL collections initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing collections: {e}")
            raise
        finally:
            conn.close()

    def create_document(self, collection: str, document: Dict[str, Any]) -> str:
        """Create a new document in the collection and return its generated ID"""
        table = self._table(collection)
        self._validate_document(collection, document)
        doc_id = str(ObjectId())

        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO {table} (doc_id, document) VALUES (?, ?)",
                (doc_id, self._serialize_document(document))
            )
            conn.commit()
            logger.info(f"Created document in {collection} with ID: {doc_id}")
            return doc_id
        except sqlite3.IntegrityError as e:
            logger.warning(f"Duplicate document rejected in {collection}: {e}")
            raise DuplicateDocumentError(str(e)) from e
        except Exception as e:
            logger.error(f"Error creating document in {collection}: {e}")
            raise
        finally:
            conn.close()

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by ID"""
        table = self._table(collection)
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT doc_id, document FROM {table} WHERE doc_id = ?", (str(doc_id),)
            ).fetchone()
            if row:
                return self._deserialize_document(row['doc_id'], row['document'])
            return None
        except Exception as e:
            logger.error(f"Error getting document from {collection}: {e}")
            raise
        finally:
            conn.close()

    def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Get the first document matching an equality query"""
        documents = self.query_documents(collection, query, limit=1)
        return documents[0] if documents else None

    def query_documents(self, collection: str, query: Dict[str, Any], limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
        """Query documents with filters, in insertion order"""
        table = self._table(collection)
        where, params = self._where_clause(query)
        conn = self._get_connection()
        try:
            rows = conn.execute(
                f"SELECT doc_id, document FROM {table} {where} ORDER BY rowid LIMIT ? OFFSET ?",
                (*params, limit, offset)
            ).fetchall()
            return [self._deserialize_document(row['doc_id'], row['document']) for row in rows]
        except Exception as e:
            logger.error(f"Error querying documents from {collection}: {e}")
            raise
        finally:
            conn.close()

    def update_fields(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> bool:
        """Set top-level fields on a document by ID"""
        table = self._table(collection)
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT document FROM {table} WHERE doc_id = ?", (str(doc_id),)
            ).fetchone()
            if not row:
                logger.warning(f"No document found to update in {collection} with ID: {doc_id}")
                return False

            document = json.loads(row['document'])
            document.update(fields)
            self._validate_document(collection, document)
            conn.execute(
                f"UPDATE {table} SET document = ?, updated_at = CURRENT_TIMESTAMP WHERE doc_id = ?",
                (self._serialize_document(document), str(doc_id))
            )
            conn.commit()
            logger.info(f"Updated document in {collection} with ID: {doc_id}")
            return True
        except Exception as e:
            logger.error(f"Error updating document in {collection}: {e}")
            raise
        finally:
            conn.close()

    def count_documents(self, collection: str, query: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching query"""
        table = self._table(collection)
        where, params = self._where_clause(query or {})
        conn = self._get_connection()
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {table} {where}", params).fetchone()[0]
        except Exception as e:
            logger.error(f"Error counting documents in {collection}: {e}")
            raise
        finally:
            conn.close()

    def close(self) -> None:
        """Connections are opened per operation; only the flag needs resetting"""
        self.connected = False
