from __future__ import annotations

import json
import os
import tempfile
from collections import Counter
from pathlib import Path
from typing import Callable, List, TypeVar

from flask import current_app
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError

from feedback_app.errors import InternalError, NotFoundError, StorageUnavailable
from feedback_app.extensions import db
from feedback_app.models import EntryId, Feedback, FeedbackEntry

T = TypeVar("T")


def _newest_first(entries: List[FeedbackEntry]) -> List[FeedbackEntry]:
    return sorted(entries, key=lambda e: e.sort_key, reverse=True)


def _breakdown(counts: Counter) -> List[dict]:
    # Largest group first; ties by topic name for a stable order
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    return [{"_id": topic, "count": n} for topic, n in ordered]


class FeedbackStore:
    """Common surface of the database store and the file store."""

    name = "base"

    def list_entries(self) -> List[FeedbackEntry]:
        raise NotImplementedError

    def add(self, entry: FeedbackEntry) -> EntryId:
        raise NotImplementedError

    def delete(self, value: str) -> EntryId:
        raise NotImplementedError

    def count(self) -> int:
        return len(self.list_entries())

    def topic_breakdown(self) -> List[dict]:
        return _breakdown(Counter(e.topic for e in self.list_entries()))

    def recent(self, limit: int = 5) -> List[FeedbackEntry]:
        return self.list_entries()[:limit]


class DatabaseStore(FeedbackStore):
    name = "database"

    def probe(self) -> None:
        """Raise StorageUnavailable unless the database answers a trivial query."""
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageUnavailable() from exc

    def list_entries(self) -> List[FeedbackEntry]:
        rows = db.session.execute(
            db.select(Feedback).order_by(Feedback.submitted_at.desc())
        ).scalars().all()
        return [FeedbackEntry.from_model(r) for r in rows]

    def add(self, entry: FeedbackEntry) -> EntryId:
        row = Feedback(
            name=entry.name,
            email=entry.email,
            phone=entry.phone,
            job_title=entry.job_title,
            company_name=entry.company_name,
            topic=entry.topic,
            reason=entry.reason,
            submitted_at=entry.submitted_at,
            ip_address=entry.ip_address,
        )
        db.session.add(row)
        db.session.commit()
        return EntryId.for_database(row.id)

    def delete(self, value: str) -> EntryId:
        row = db.session.get(Feedback, str(value))
        if row is None:
            raise NotFoundError()
        db.session.delete(row)
        db.session.commit()
        return EntryId.for_database(value)

    def count(self) -> int:
        return db.session.scalar(db.select(func.count()).select_from(Feedback)) or 0

    def topic_breakdown(self) -> List[dict]:
        rows = db.session.execute(
            db.select(Feedback.topic, func.count()).group_by(Feedback.topic)
        ).all()
        return _breakdown(Counter({topic: n for topic, n in rows}))

    def recent(self, limit: int = 5) -> List[FeedbackEntry]:
        rows = db.session.execute(
            db.select(Feedback).order_by(Feedback.submitted_at.desc()).limit(limit)
        ).scalars().all()
        return [FeedbackEntry.from_model(r) for r in rows]


class FileStore(FeedbackStore):
    """
    Whole-collection JSON array on disk.

    Writes are read-modify-write of the entire file with no lock, so two
    concurrent writers can lose one another's change. Each rewrite goes
    through a temp file and os.replace so readers never see a partial file.
    """

    name = "file"

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def from_app(cls, app=None) -> "FileStore":
        cfg = (app or current_app).config
        return cls(Path(cfg["FEEDBACK_DATA_DIR"]) / cfg["FEEDBACK_DATA_FILE"])

    def ensure(self) -> None:
        """Create the data directory and an empty collection if absent."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.write_records([])

    def read_records(self, strict: bool = False) -> List[dict]:
        """
        Load the raw records. Missing file reads as empty. A corrupt file
        reads as empty too, unless `strict` (used before a rewrite, so a
        damaged collection is never overwritten with a fresh one).
        """
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            current_app.logger.error("Error reading feedback data from %s: %s", self.path, exc)
            if strict:
                raise InternalError() from exc
            return []
        if not isinstance(data, list):
            current_app.logger.error("Feedback data in %s is not a list; ignoring", self.path)
            if strict:
                raise InternalError()
            return []
        return [r for r in data if isinstance(r, dict)]

    def write_records(self, records: List[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".feedback-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(records, fh, indent=2, ensure_ascii=False)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            current_app.logger.error("Error writing feedback data to %s: %s", self.path, exc)
            raise InternalError() from exc

    def list_entries(self) -> List[FeedbackEntry]:
        return _newest_first([FeedbackEntry.from_record(r) for r in self.read_records()])

    def add(self, entry: FeedbackEntry) -> EntryId:
        records = self.read_records(strict=True)
        if entry.entry_id is None:
            taken = {str(r.get("id")) for r in records if r.get("id") is not None}
            entry.entry_id = EntryId.for_file(taken)
        records.append(entry.to_record())
        self.write_records(records)
        return entry.entry_id

    def delete(self, value: str) -> EntryId:
        records = self.read_records(strict=True)
        for i, rec in enumerate(records):
            eid = EntryId.from_record(rec)
            if eid is not None and eid.matches(value):
                del records[i]
                self.write_records(records)
                return eid
        raise NotFoundError()


def active_store() -> FeedbackStore:
    """Database when it answers the readiness probe, otherwise the file store."""
    primary = DatabaseStore()
    try:
        primary.probe()
    except StorageUnavailable as exc:
        current_app.logger.warning("Database unavailable, using JSON storage: %s", exc.__cause__)
        return FileStore.from_app()
    return primary


def with_fallback(operation: str, fn: Callable[[FeedbackStore], T]) -> T:
    """
    Run `fn` against the active store. A database error during the call is
    logged and the call is repeated once against the file store.
    NotFoundError and other domain errors propagate unchanged.
    """
    store = active_store()
    if isinstance(store, DatabaseStore):
        try:
            return fn(store)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error("Database %s error, falling back to JSON: %s", operation, exc)
            store = FileStore.from_app()
    return fn(store)
