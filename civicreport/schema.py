from typing import Any, Dict, List

from .models import Category, ReportDraft
from .normalize import normalize_category

REQUIRED_STR_FIELDS = ["title", "description", "category"]

TITLE_MIN, TITLE_MAX = 5, 200
DESCRIPTION_MIN, DESCRIPTION_MAX = 10, 5000

VALID_CATEGORIES = [c.value for c in Category]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _check_length(errors: List[str], field: str, value: str, lo: int, hi: int) -> None:
    n = len(value.strip())
    if n < lo:
        errors.append(f"Field '{field}' must be at least {lo} characters")
    elif n > hi:
        errors.append(f"Field '{field}' must be at most {hi} characters")


def validate_report(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Same rules as the report submission form.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if _is_non_empty_str(data.get("title")):
        _check_length(errors, "title", data["title"], TITLE_MIN, TITLE_MAX)
    if _is_non_empty_str(data.get("description")):
        _check_length(errors, "description", data["description"], DESCRIPTION_MIN, DESCRIPTION_MAX)

    if _is_non_empty_str(data.get("category")):
        try:
            normalize_category(data["category"])
        except ValueError:
            errors.append(
                f"Field 'category' must be one of: {', '.join(VALID_CATEGORIES)}"
            )

    lat = data.get("latitude")
    lon = data.get("longitude")
    if lat is not None and not _is_number(lat):
        errors.append("Field 'latitude' must be a number if provided")
    elif lat is not None and not -90 <= lat <= 90:
        errors.append("Field 'latitude' must be between -90 and 90")
    if lon is not None and not _is_number(lon):
        errors.append("Field 'longitude' must be a number if provided")
    elif lon is not None and not -180 <= lon <= 180:
        errors.append("Field 'longitude' must be between -180 and 180")
    if (lat is None) != (lon is None):
        errors.append("Fields 'latitude' and 'longitude' must be provided together")

    return errors


def report_from_dict(data: Dict[str, Any]) -> ReportDraft:
    """
    Validate a submission and build a ReportDraft from it.

    Raises:
        ValueError: With every validation message joined, if invalid
    """
    errors = validate_report(data)
    if errors:
        raise ValueError("; ".join(errors))

    lat = data.get("latitude")
    lon = data.get("longitude")
    return ReportDraft(
        title=data["title"].strip(),
        description=data["description"].strip(),
        category=normalize_category(data["category"]),
        latitude=float(lat) if lat is not None else None,
        longitude=float(lon) if lon is not None else None,
    )
