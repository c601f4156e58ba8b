# schemas/documents_schema.py
"""
Document collections table.
Every record of every collection is one row; the payload is a JSON object.
Safe to run multiple times.
"""

from __future__ import annotations

import logging

from sqlalchemy import text as sa_text
from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


def _exec(conn, sql: str):
    conn.execute(sa_text(sql))


def install_schema(engine: Engine) -> None:
    """Create (if missing) the documents table and its indexes."""
    with engine.begin() as conn:
        _exec(conn, """
            CREATE TABLE IF NOT EXISTS documents (
                collection TEXT NOT NULL,
                doc_id TEXT NOT NULL,
                data_json TEXT NOT NULL DEFAULT '{}',
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (collection, doc_id)
            )
        """)
        _exec(conn, "CREATE INDEX IF NOT EXISTS ix_documents_collection ON documents(collection)")
    log.debug("documents schema ready")


def run(engine):
    """Entry point for schema registry auto-discovery."""
    install_schema(engine)
