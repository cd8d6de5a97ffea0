from typing import Optional, Set

from .models import Category, IssueStatus


def normalize_text(s: str) -> str:
    # Inner whitespace is kept: edit distance runs on this exact string
    return s.strip().lower()


def tokenize(s: str) -> Set[str]:
    return set(normalize_text(s).split())


CATEGORY_SYNS = {
    "road": "roads",
    "pothole": "roads",
    "potholes": "roads",
    "trash": "garbage",
    "waste": "garbage",
    "sanitation": "garbage",
    "power": "electricity",
    "streetlight": "electricity",
}


def normalize_category(value: str) -> Category:
    key = " ".join(value.strip().lower().split())
    key = CATEGORY_SYNS.get(key, key)
    return Category(key)


STATUS_SYNS = {
    # The reporting app creates every issue as "pending"
    "pending": "open",
    "new": "open",
    "reopened": "open",
    "inprogress": "in_progress",
    "in_review": "in_progress",
    "closed": "resolved",
    "fixed": "resolved",
    "done": "resolved",
}


def normalize_status(value: Optional[str]) -> IssueStatus:
    if not value:
        return IssueStatus.OPEN
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    key = STATUS_SYNS.get(key, key)
    return IssueStatus(key)
