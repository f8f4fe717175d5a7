"""
Document Store
SQLite-backed key/value store of JSON documents addressed by slash-separated paths
"""
import json
import sqlite3
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import PersistenceFailed

logger = logging.getLogger(__name__)


def _split_path(path: str):
    """Split a document path into (collection path, document id)"""
    parts = [p for p in path.strip('/').split('/') if p]
    if len(parts) < 2:
        raise PersistenceFailed(f"Invalid document path: {path!r}")
    return '/'.join(parts[:-1]), parts[-1]


class DocumentStore:
    """
    Stores JSON documents keyed by path.

    A document path such as ``artifacts/app/users/u1/test_cases/PROJ-1`` belongs to the
    collection ``artifacts/app/users/u1/test_cases``. Listing a collection returns only
    its direct documents.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.init_database()

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating directory if needed"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def init_database(self):
        """Initialize database schema"""
        try:
            conn = self.get_connection()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceFailed(f"Failed to open document store at {self.db_path}: {e}") from e

        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (collection, doc_id)
                )
            """)
            conn.commit()
            logger.debug(f"Document store ready at {self.db_path}")
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceFailed(f"Failed to initialize document store: {e}") from e
        finally:
            conn.close()

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        """Read a document, or None if it does not exist"""
        collection, doc_id = _split_path(path)
        conn = None
        try:
            conn = self.get_connection()
            row = conn.execute(
                "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id)
            ).fetchone()
            return json.loads(row['data']) if row else None
        except (sqlite3.Error, ValueError) as e:
            logger.error(f"Failed to read document {path}: {e}")
            raise PersistenceFailed(f"Failed to read document {path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def set(self, path: str, data: Dict[str, Any]) -> None:
        """Create or replace a document"""
        collection, doc_id = _split_path(path)
        try:
            serialized = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise PersistenceFailed(f"Document {path} is not JSON serializable: {e}") from e

        conn = None
        try:
            conn = self.get_connection()
            conn.execute(
                """
                INSERT INTO documents (collection, doc_id, data, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(collection, doc_id)
                DO UPDATE SET data = excluded.data, updated_at = CURRENT_TIMESTAMP
                """,
                (collection, doc_id, serialized)
            )
            conn.commit()
            logger.debug(f"Stored document {path}")
        except sqlite3.Error as e:
            logger.error(f"Failed to write document {path}: {e}")
            raise PersistenceFailed(f"Failed to write document {path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def list(self, collection_path: str) -> Dict[str, Dict[str, Any]]:
        """List the documents of a collection as {doc_id: data}"""
        collection = '/'.join(p for p in collection_path.strip('/').split('/') if p)
        conn = None
        try:
            conn = self.get_connection()
            rows = conn.execute(
                "SELECT doc_id, data FROM documents WHERE collection = ? ORDER BY doc_id",
                (collection,)
            ).fetchall()
            return {row['doc_id']: json.loads(row['data']) for row in rows}
        except (sqlite3.Error, ValueError) as e:
            logger.error(f"Failed to list collection {collection_path}: {e}")
            raise PersistenceFailed(f"Failed to list collection {collection_path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def delete(self, path: str) -> bool:
        """Delete a document; returns False if it did not exist"""
        collection, doc_id = _split_path(path)
        conn = None
        try:
            conn = self.get_connection()
            cursor = conn.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, doc_id)
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Failed to delete document {path}: {e}")
            raise PersistenceFailed(f"Failed to delete document {path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()
