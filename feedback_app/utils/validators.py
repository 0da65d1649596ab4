import re

# Simple, pragmatic pattern: local@domain.tld
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

TOPICS = (
    "AI in HR",
    "People intelligence",
    "Skill Based Organization",
    "All of the above",
)

REQUIRED_FIELDS = ("name", "email", "jobTitle", "companyName", "topic")


def clean_str(val, max_len: int = 1000) -> str | None:
    """
    Trim and enforce max length. Returns None if empty after cleaning.
    Non-strings (numbers from a JSON body) are stringified first.
    """
    if val is None:
        return None
    s = str(val).strip()
    if not s:
        return None
    return s[:max_len]


def is_valid_email(val: str | None) -> bool:
    if not val:
        return False
    return bool(_EMAIL_RE.match(val))


def is_valid_topic(val: str | None) -> bool:
    return val in TOPICS


def missing_fields(data: dict) -> list[str]:
    """Required fields that are absent, empty or whitespace-only."""
    return [f for f in REQUIRED_FIELDS if clean_str(data.get(f)) is None]
