from datetime import datetime, timezone
from typing import FrozenSet, List, Optional
import os

import requests

from .logger import StructuredLogger, get_logger
from .models import CandidateIssue, Category, IssueStatus

ISSUES_ENDPOINT = "/rest/v1/issues"
CANDIDATE_COLUMNS = "id,title,description,category,latitude,longitude,created_at,status"


def format_since(since: datetime) -> str:
    """ISO-8601 in UTC with an explicit offset; naive values are taken as local time."""
    return since.astimezone(timezone.utc).isoformat()


class SupabaseIssueFetcher:
    """
    Read duplicate-detection candidates from the Supabase issues table.

    Talks to the PostgREST API directly; only reads.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 20,
        logger: Optional[StructuredLogger] = None,
    ):
        self.url = url or os.getenv("SUPABASE_URL")
        self.api_key = api_key or os.getenv("SUPABASE_KEY")
        self.timeout = timeout
        self.logger = logger or get_logger()

        if not self.url:
            raise ValueError("Missing SUPABASE_URL. Set env var or pass url.")
        if not self.api_key:
            raise ValueError("Missing SUPABASE_KEY. Set env var or pass api_key.")

    def _headers(self) -> dict:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def fetch_candidates(
        self,
        category: Category,
        since: datetime,
        exclude_statuses: FrozenSet[IssueStatus],
        limit: int,
    ) -> List[CandidateIssue]:
        """
        Fetch same-category issues created since `since`, skipping excluded statuses.

        Rows that cannot be parsed are logged and left out; the rest of the
        batch is still returned.

        Raises:
            requests.RequestException: On network errors or non-2xx responses
        """
        params = {
            "select": CANDIDATE_COLUMNS,
            "category": f"eq.{category.value}",
            "created_at": f"gte.{format_since(since)}",
            "order": "created_at.desc",
            "limit": limit,
        }
        if exclude_statuses:
            statuses = ",".join(sorted(s.value for s in exclude_statuses))
            params["status"] = f"not.in.({statuses})"

        r = requests.get(
            f"{self.url.rstrip('/')}{ISSUES_ENDPOINT}",
            params=params,
            headers=self._headers(),
            timeout=self.timeout,
        )
        r.raise_for_status()

        candidates = []
        for row in r.json():
            try:
                candidates.append(CandidateIssue.from_row(row))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                self.logger.warning(
                    "Skipping unparseable issue row",
                    issue_id=row.get("id") if isinstance(row, dict) else None,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return candidates
