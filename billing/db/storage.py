# billing/db/storage.py
"""
Key-value persistence for the three billing documents.

Reads never fail outward: a missing key or any read/decode error gives back
the caller's default. Writes are best effort: errors are logged and the
in-memory state stays as it is.
"""

import json
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from billing.db.schema import kv_store, metadata

logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        try:
            metadata.create_all(engine)
        except SQLAlchemyError as e:
            # load/save fall back and log until the database is reachable
            logger.error("Error creating storage schema: %r", e)

    def load(self, key: str, default: Any) -> Any:
        try:
            with self.engine.connect() as conn:
                stmt = select(kv_store.c.value).where(kv_store.c.key == key)
                raw = conn.execute(stmt).scalar_one_or_none()
            if raw is None:
                return default
            return json.loads(raw)
        except (SQLAlchemyError, ValueError) as e:
            logger.error("Error reading %s from storage: %r", key, e)
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
            stmt = sqlite_insert(kv_store).values(key=key, value=payload)
            stmt = stmt.on_conflict_do_update(
                index_elements=[kv_store.c.key],
                set_={"value": stmt.excluded.value},
            )
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except (SQLAlchemyError, TypeError, ValueError) as e:
            logger.error("Error writing %s to storage: %r", key, e)
