# core/document_store.py
"""
Document-store client backed by the app database.

Collections hold JSON documents keyed by an opaque id assigned on insert.
Each call is a single transaction; there is no cross-call locking, so
concurrent writers follow last-writer-wins.
"""
from __future__ import annotations

import json
import logging
import secrets
import string
from typing import Any, Dict, List

from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger(__name__)

DOC_ID_ALPHABET = string.ascii_letters + string.digits
DOC_ID_LENGTH = 20


class DocumentStoreError(Exception):
    """A store operation could not be completed."""


class DocumentNotFoundError(DocumentStoreError):
    """The addressed document does not exist."""


def new_document_id() -> str:
    return "".join(secrets.choice(DOC_ID_ALPHABET) for _ in range(DOC_ID_LENGTH))


def _loads(raw: str | None) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("Skipping unreadable document payload")
        return {}
    return data if isinstance(data, dict) else {}


class DocumentStore:
    """
    Repository for JSON documents grouped by collection.
    """

    def __init__(self, engine: Engine):
        self.engine: Engine = engine

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """
        Get every document of a collection.

        Args:
            collection (str): Collection name.

        Returns:
            list[dict]: Document payloads with their ``id`` merged in.
        """
        try:
            with self.engine.begin() as conn:
                rows = conn.execute(sa_text("""
                    SELECT doc_id, data_json
                      FROM documents
                     WHERE collection = :c
                     ORDER BY created_at, doc_id
                """), {"c": collection}).fetchall()
        except SQLAlchemyError as e:
            log.error(f"Error reading collection '{collection}': {e}")
            raise DocumentStoreError(f"Could not read collection '{collection}'") from e
        return [{**_loads(r.data_json), "id": r.doc_id} for r in rows]

    def get(self, collection: str, doc_id: str) -> Dict[str, Any] | None:
        """Get one document, or None when it does not exist."""
        try:
            with self.engine.begin() as conn:
                row = conn.execute(sa_text("""
                    SELECT doc_id, data_json FROM documents
                     WHERE collection = :c AND doc_id = :id
                """), {"c": collection, "id": doc_id}).fetchone()
        except SQLAlchemyError as e:
            log.error(f"Error reading document {collection}/{doc_id}: {e}")
            raise DocumentStoreError(f"Could not read document '{doc_id}'") from e
        if not row:
            return None
        return {**_loads(row.data_json), "id": row.doc_id}

    def add(self, collection: str, record: Dict[str, Any]) -> str:
        """
        Insert a new document.

        Args:
            collection (str): Collection name.
            record (dict): Payload; an ``id`` key is not stored.

        Returns:
            str: The id assigned to the document.
        """
        doc_id = new_document_id()
        payload = {k: v for k, v in record.items() if k != "id"}
        try:
            with self.engine.begin() as conn:
                conn.execute(sa_text("""
                    INSERT INTO documents (collection, doc_id, data_json)
                    VALUES (:c, :id, :data)
                """), {"c": collection, "id": doc_id, "data": json.dumps(payload, ensure_ascii=False)})
        except SQLAlchemyError as e:
            log.error(f"Error adding document to '{collection}': {e}")
            raise DocumentStoreError(f"Could not add document to '{collection}'") from e
        return doc_id

    def update(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        """
        Merge ``partial`` into an existing document.

        Raises:
            DocumentNotFoundError: when the document does not exist.
        """
        changes = {k: v for k, v in partial.items() if k != "id"}
        try:
            with self.engine.begin() as conn:
                row = conn.execute(sa_text("""
                    SELECT data_json FROM documents
                     WHERE collection = :c AND doc_id = :id
                """), {"c": collection, "id": doc_id}).fetchone()
                if not row:
                    raise DocumentNotFoundError(f"No document '{doc_id}' in '{collection}'")
                merged = {**_loads(row.data_json), **changes}
                conn.execute(sa_text("""
                    UPDATE documents
                       SET data_json = :data, updated_at = CURRENT_TIMESTAMP
                     WHERE collection = :c AND doc_id = :id
                """), {"c": collection, "id": doc_id, "data": json.dumps(merged, ensure_ascii=False)})
        except SQLAlchemyError as e:
            log.error(f"Error updating document {collection}/{doc_id}: {e}")
            raise DocumentStoreError(f"Could not update document '{doc_id}'") from e

    def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Unknown ids are ignored."""
        try:
            with self.engine.begin() as conn:
                conn.execute(sa_text("""
                    DELETE FROM documents WHERE collection = :c AND doc_id = :id
                """), {"c": collection, "id": doc_id})
        except SQLAlchemyError as e:
            log.error(f"Error deleting document {collection}/{doc_id}: {e}")
            raise DocumentStoreError(f"Could not delete document '{doc_id}'") from e
