"""SQLModel implementation of the document store with change notifications."""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.repositories.documents import (
    ChangeListener,
    DocumentSnapshot,
    Unsubscribe,
    WriteMode,
)
from ...errors import StoreUnavailable
from ...logging_config import get_logger
from ...models.document import DocumentRecord
from ..database import SessionFactory

logger = get_logger(__name__)

_DocKey = tuple[str, str]


def _snapshot(record: DocumentRecord) -> DocumentSnapshot:
    return DocumentSnapshot(
        collection=record.collection,
        key=record.key,
        data=copy.deepcopy(record.data or {}),
        version=record.version,
    )


class SQLModelDocumentStore:
    """Documents in one SQL table, shared by every client pointed at the database.

    Writes made through this instance are pushed to its subscribers right
    after commit. Writes made by other processes reach subscribers on the
    next :meth:`poll`, which compares per-document versions.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self._lock = threading.RLock()
        self._listeners: dict[_DocKey, list[ChangeListener]] = {}
        self._seen_versions: dict[_DocKey, Optional[int]] = {}

    @staticmethod
    def _find(session: Session, collection: str, key: str) -> Optional[DocumentRecord]:
        return session.exec(
            select(DocumentRecord)
            .where(DocumentRecord.collection == collection)
            .where(DocumentRecord.key == key)
        ).first()

    def get_document(self, collection: str, key: str) -> Optional[DocumentSnapshot]:
        """Return the document or None when it does not exist."""
        try:
            with self.session_factory() as session:
                record = self._find(session, collection, key)
                return _snapshot(record) if record is not None else None
        except SQLAlchemyError as exc:
            logger.error(
                "Document read failed",
                extra={"collection": collection, "key": key},
                exc_info=True,
            )
            raise StoreUnavailable(f"Could not read {collection}/{key}") from exc

    def set_document(
        self,
        collection: str,
        key: str,
        fields: Mapping[str, Any],
        mode: WriteMode = WriteMode.REPLACE,
    ) -> DocumentSnapshot:
        """Write a document; MERGE keeps top-level fields the caller did not name."""
        payload = copy.deepcopy(dict(fields))
        try:
            with self.session_factory() as session:
                record = self._find(session, collection, key)
                if record is None:
                    record = DocumentRecord(collection=collection, key=key, data=payload, version=1)
                else:
                    if mode is WriteMode.MERGE:
                        record.data = {**(record.data or {}), **payload}
                    else:
                        record.data = payload
                    record.version += 1
                    record.updated_at = datetime.now(timezone.utc)
                session.add(record)
                session.commit()
                session.refresh(record)
                snapshot = _snapshot(record)
        except SQLAlchemyError as exc:
            logger.error(
                "Document write failed",
                extra={"collection": collection, "key": key, "mode": mode.value},
                exc_info=True,
            )
            raise StoreUnavailable(f"Could not write {collection}/{key}") from exc

        logger.debug(
            "Document written",
            extra={"collection": collection, "key": key, "version": snapshot.version},
        )
        self._notify((collection, key), snapshot)
        return snapshot

    def subscribe(self, collection: str, key: str, on_change: ChangeListener) -> Unsubscribe:
        """Register ``on_change`` and deliver the current snapshot if the document exists."""
        doc_key = (collection, key)
        with self._lock:
            self._listeners.setdefault(doc_key, []).append(on_change)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(doc_key, [])
                if on_change in listeners:
                    listeners.remove(on_change)
                if not listeners:
                    self._listeners.pop(doc_key, None)
                    self._seen_versions.pop(doc_key, None)

        try:
            current = self.get_document(collection, key)
        except StoreUnavailable:
            # A failed subscribe leaves nothing registered.
            unsubscribe()
            raise
        with self._lock:
            self._seen_versions[doc_key] = current.version if current else None
        if current is not None:
            self._deliver(on_change, current)

        return unsubscribe

    def poll(self) -> int:
        """Push changes written by other clients to subscribers; return how many."""
        with self._lock:
            watched = list(self._listeners.keys())

        pushed = 0
        for collection, key in watched:
            current = self.get_document(collection, key)
            version = current.version if current else None
            with self._lock:
                if (collection, key) not in self._listeners:
                    continue
                if self._seen_versions.get((collection, key)) == version:
                    continue
            self._notify((collection, key), current)
            pushed += 1
        return pushed

    def listener_count(self, collection: str, key: str) -> int:
        with self._lock:
            return len(self._listeners.get((collection, key), []))

    def _notify(self, doc_key: _DocKey, snapshot: Optional[DocumentSnapshot]) -> None:
        with self._lock:
            if doc_key in self._listeners:
                self._seen_versions[doc_key] = snapshot.version if snapshot else None
            listeners = list(self._listeners.get(doc_key, []))
        for listener in listeners:
            self._deliver(listener, snapshot)

    def _deliver(self, listener: ChangeListener, snapshot: Optional[DocumentSnapshot]) -> None:
        # Listener errors are logged and never reach the writer.
        try:
            listener(snapshot)
        except Exception:
            logger.exception(
                "Document listener failed",
                extra={
                    "collection": snapshot.collection if snapshot else None,
                    "key": snapshot.key if snapshot else None,
                },
            )
