from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

ORIGIN_DATABASE = "database"
ORIGIN_FILE = "file"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Accept datetimes and ISO-8601 strings (including a trailing 'Z').
    Naive values are taken as UTC. Returns None when unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """UTC ISO-8601 with milliseconds and 'Z', e.g. 2024-05-01T09:30:00.000Z."""
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class EntryId:
    """Identifier tagged with the store that minted it.

    `aliases` holds any other value the same record is known by, e.g. the
    generic "id" of a record that also carries a database "_id".
    """

    value: str
    origin: str
    aliases: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def for_database(cls, value) -> "EntryId":
        return cls(str(value), ORIGIN_DATABASE)

    @classmethod
    def for_file(cls, taken: set[str] | None = None) -> "EntryId":
        """Millisecond timestamp; bumped forward while it collides with `taken`."""
        ms = int(time.time() * 1000)
        taken = taken or set()
        while str(ms) in taken:
            ms += 1
        return cls(str(ms), ORIGIN_FILE)

    @classmethod
    def from_record(cls, record: dict) -> Optional["EntryId"]:
        # Records copied from the database carry "_id"; file-minted ones carry "id"
        db_id = record.get("_id")
        file_id = record.get("id")
        if db_id not in (None, ""):
            aliases = (str(file_id),) if file_id not in (None, "") and str(file_id) != str(db_id) else ()
            return cls(str(db_id), ORIGIN_DATABASE, aliases)
        if file_id not in (None, ""):
            return cls(str(file_id), ORIGIN_FILE)
        return None

    def matches(self, value) -> bool:
        value = str(value)
        return self.value == value or value in self.aliases

    def to_fields(self) -> dict:
        if self.origin == ORIGIN_DATABASE:
            return {"_id": self.value, "id": self.aliases[0] if self.aliases else self.value}
        return {"id": self.value}

    def __str__(self) -> str:
        return self.value


@dataclass
class FeedbackEntry:
    name: str
    email: str
    job_title: str
    company_name: str
    topic: str
    phone: Optional[str] = None
    reason: Optional[str] = None
    submitted_at: Optional[datetime] = field(default_factory=utcnow)
    ip_address: Optional[str] = None
    entry_id: Optional[EntryId] = None

    @classmethod
    def from_record(cls, record: dict) -> "FeedbackEntry":
        """Build from a stored JSON record (camelCase keys). Tolerates legacy gaps."""
        return cls(
            name=record.get("name"),
            email=record.get("email"),
            job_title=record.get("jobTitle"),
            company_name=record.get("companyName"),
            topic=record.get("topic"),
            phone=record.get("phone") or None,
            reason=record.get("reason") or None,
            submitted_at=parse_timestamp(record.get("submittedAt")),
            ip_address=record.get("ipAddress") or None,
            entry_id=EntryId.from_record(record),
        )

    @classmethod
    def from_model(cls, row) -> "FeedbackEntry":
        return cls(
            name=row.name,
            email=row.email,
            job_title=row.job_title,
            company_name=row.company_name,
            topic=row.topic,
            phone=row.phone,
            reason=row.reason,
            submitted_at=parse_timestamp(row.submitted_at),
            ip_address=row.ip_address,
            entry_id=EntryId.for_database(row.id) if row.id else None,
        )

    @property
    def sort_key(self) -> datetime:
        return self.submitted_at or _EPOCH

    def summary(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "topic": self.topic,
            "submittedAt": format_timestamp(self.submitted_at),
        }

    def to_record(self) -> dict:
        out = self.entry_id.to_fields() if self.entry_id else {}
        out.update(
            {
                "name": self.name,
                "email": self.email,
                "phone": self.phone,
                "jobTitle": self.job_title,
                "companyName": self.company_name,
                "topic": self.topic,
                "reason": self.reason,
                "submittedAt": format_timestamp(self.submitted_at),
                "ipAddress": self.ip_address,
            }
        )
        return out
