"""
Document store over DuckDB
Collections of JSON documents keyed by (collection, doc_id), with an audit log table.
Committed writes are published to the subscription hub for real-time readers.
"""

import asyncio
import json
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Generator, List, Optional

import duckdb

from .exceptions import BaseApplicationError, DatabaseError, NotFoundError
from .realtime import DocumentChange, SubscriptionHub


SCHEMA_SQL = r"""
CREATE TABLE IF NOT EXISTS documents (
  collection TEXT NOT NULL,
  doc_id TEXT NOT NULL,
  data TEXT NOT NULL,
  created_at TIMESTAMP DEFAULT now(),
  updated_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_documents_key ON documents(collection, doc_id);

CREATE SEQUENCE IF NOT EXISTS logs_id_seq;
CREATE TABLE IF NOT EXISTS logs (
  log_id INTEGER DEFAULT nextval('logs_id_seq') PRIMARY KEY,
  user_id TEXT,
  actor_id TEXT,
  action TEXT,
  detail_json TEXT,
  created_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_logs_action ON logs(action);
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_doc_id() -> str:
    """Auto id in the style of hosted document databases"""
    return uuid.uuid4().hex[:20]


class DocumentStore:
    """Document store, wraps every DuckDB access behind one re-entrant lock"""

    def __init__(self, db_path: str = ":memory:", hub: Optional[SubscriptionHub] = None):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        self._tx_depth = 0
        self._pending: Optional[List[DocumentChange]] = None
        self.db_path = db_path
        self.hub = hub or SubscriptionHub()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        with self._lock:
            if self._connection is None:
                if self.db_path != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._connection = duckdb.connect(self.db_path)
                self._init_schema()
            return self._connection

    def _init_schema(self):
        try:
            self._connection.execute(SCHEMA_SQL)
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}")

    def init_database(self):
        with self._lock:
            self.connection.execute(SCHEMA_SQL)

    def close(self):
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @contextmanager
    def transaction(self) -> Generator["DocumentStore", None, None]:
        """
        Run a read-check-write sequence atomically.

        Nested calls join the outer transaction. Change events are held back
        until the outermost transaction commits and dropped on rollback.
        Domain errors raised inside the block propagate unchanged.
        """
        with self._lock:
            outermost = self._tx_depth == 0
            if outermost:
                self.connection.execute("BEGIN")
                self._pending = []
            self._tx_depth += 1
            try:
                yield self
            except Exception as e:
                self._tx_depth -= 1
                if outermost:
                    self._pending = None
                    try:
                        self.connection.execute("ROLLBACK")
                    except duckdb.Error:
                        pass  # connection already aborted the transaction
                if isinstance(e, BaseApplicationError):
                    raise
                raise DatabaseError(f"Database operation failed: {e}") from e
            else:
                self._tx_depth -= 1
                if outermost:
                    self.connection.execute("COMMIT")
                    pending, self._pending = self._pending, None
                    for change in pending:
                        self.hub.publish(change)

    def _execute(self, query: str, params: Optional[list] = None):
        try:
            return self.connection.execute(query, params or [])
        except duckdb.Error as e:
            raise DatabaseError(f"Query execution failed: {e}")

    def _emit(self, collection: str, doc_id: str, data: Optional[Dict[str, Any]]):
        change = DocumentChange(collection, doc_id, data)
        if self._pending is not None:
            self._pending.append(change)
        else:
            self.hub.publish(change)

    @staticmethod
    def _decode(doc_id: str, raw: str) -> Dict[str, Any]:
        data = json.loads(raw)
        data["id"] = doc_id
        return data

    @staticmethod
    def _encode(data: Dict[str, Any]) -> str:
        body = {k: v for k, v in data.items() if k != "id"}
        return json.dumps(body, default=str)

    # ---- document operations ----

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._execute(
                "SELECT data FROM documents WHERE collection=? AND doc_id=?",
                [collection, doc_id]
            ).fetchone()
        return self._decode(doc_id, row[0]) if row else None

    def exists(self, collection: str, doc_id: str) -> bool:
        return self.get(collection, doc_id) is not None

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create or fully replace a document"""
        raw = self._encode(data)
        now = utcnow()
        with self._lock:
            found = self._execute(
                "SELECT 1 FROM documents WHERE collection=? AND doc_id=?",
                [collection, doc_id]
            ).fetchone()
            if found:
                self._execute(
                    "UPDATE documents SET data=?, updated_at=? WHERE collection=? AND doc_id=?",
                    [raw, now, collection, doc_id]
                )
            else:
                self._execute(
                    "INSERT INTO documents(collection, doc_id, data, created_at, updated_at) VALUES (?,?,?,?,?)",
                    [collection, doc_id, raw, now, now]
                )
            stored = self._decode(doc_id, raw)
            self._emit(collection, doc_id, stored)
        return stored

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a document under a generated id"""
        doc_id = new_doc_id()
        self.set(collection, doc_id, data)
        return doc_id

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into an existing document"""
        with self._lock:
            current = self.get(collection, doc_id)
            if current is None:
                raise NotFoundError(f"{collection}/{doc_id} not found",
                                    details={"collection": collection, "id": doc_id})
            current.update(fields)
            return self.set(collection, doc_id, current)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            found = self._execute(
                "SELECT 1 FROM documents WHERE collection=? AND doc_id=?",
                [collection, doc_id]
            ).fetchone()
            if not found:
                return False
            self._execute(
                "DELETE FROM documents WHERE collection=? AND doc_id=?",
                [collection, doc_id]
            )
            self._emit(collection, doc_id, None)
        return True

    def query(self, collection: str, where: Optional[Dict[str, Any]] = None,
              order_by: Optional[str] = None, descending: bool = False,
              limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Equality filter plus optional ordering, evaluated over the collection"""
        with self._lock:
            rows = self._execute(
                "SELECT doc_id, data FROM documents WHERE collection=? ORDER BY created_at",
                [collection]
            ).fetchall()

        docs = [self._decode(doc_id, raw) for doc_id, raw in rows]
        if where:
            docs = [d for d in docs if all(d.get(k) == v for k, v in where.items())]
        if order_by:
            present = [d for d in docs if d.get(order_by) is not None]
            missing = [d for d in docs if d.get(order_by) is None]
            present.sort(key=lambda d: d[order_by], reverse=descending)
            docs = present + missing
        if limit is not None:
            docs = docs[:limit]
        return docs

    # ---- real-time reads ----
    # store reads take the lock, so they run in a worker thread off the event loop

    async def watch_document(self, collection: str, doc_id: str) -> AsyncIterator[Optional[Dict[str, Any]]]:
        """Yield the current document, then its state after every write (None once deleted)"""
        async with self.hub.subscribe(collection, doc_id) as subscription:
            yield await asyncio.to_thread(self.get, collection, doc_id)
            async for change in subscription:
                yield change.data

    async def watch_query(self, collection: str, where: Optional[Dict[str, Any]] = None,
                          order_by: Optional[str] = None,
                          descending: bool = False) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield the query result now and again after every write to the collection"""
        async with self.hub.subscribe(collection) as subscription:
            yield await asyncio.to_thread(self.query, collection, where, order_by, descending)
            async for _ in subscription:
                yield await asyncio.to_thread(self.query, collection, where, order_by, descending)

    # ---- audit log ----

    def log(self, action: str, user_id: Optional[str] = None,
            actor_id: Optional[str] = None, detail: Optional[Dict[str, Any]] = None):
        """Append an audit log entry; falls back to the console if the write fails"""
        detail_json = json.dumps(detail or {}, default=str, ensure_ascii=False)
        try:
            with self._lock:
                self._execute(
                    "INSERT INTO logs(user_id, actor_id, action, detail_json, created_at) VALUES (?,?,?,?,?)",
                    [user_id, actor_id, action, detail_json, utcnow()]
                )
        except DatabaseError:
            print(f"Failed to write log {action}: {detail_json}")

    def get_logs(self, action: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        query = "SELECT log_id, user_id, actor_id, action, detail_json, created_at FROM logs"
        params: list = []
        if action:
            query += " WHERE action=?"
            params.append(action)
        query += " ORDER BY log_id DESC LIMIT ?"
        params.append(limit)

        with self._lock:
            rows = self._execute(query, params).fetchall()

        return [
            {
                "log_id": row[0],
                "user_id": row[1],
                "actor_id": row[2],
                "action": row[3],
                "detail": json.loads(row[4]) if row[4] else {},
                "created_at": row[5],
            }
            for row in rows
        ]
