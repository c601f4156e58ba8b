# core/db.py
from __future__ import annotations

import functools
import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from schemas import documents_schema

log = logging.getLogger(__name__)

# Schema modules installed by init_db, in order.
SCHEMA_MODULES = (documents_schema,)


def _ensure_sqlite_dir(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


@functools.lru_cache(maxsize=None)
def get_engine(url: str, echo: bool = False) -> Engine:
    """One engine per database URL for the whole process."""
    _ensure_sqlite_dir(url)
    log.info(f"Creating engine for {make_url(url).render_as_string(hide_password=True)}")
    return create_engine(url, echo=echo)


def init_db(engine: Engine) -> None:
    """Run every schema module against the engine. Idempotent."""
    for module in SCHEMA_MODULES:
        module.run(engine)
