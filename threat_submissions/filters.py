"""OData ``$filter`` expressions for the submissions list query."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from .models import SubmissionCategory, SubmissionSource


def odata_quote(value: str) -> str:
    """Quote a string literal for an OData filter, doubling single quotes."""
    return "'" + value.replace("'", "''") + "'"


def odata_datetime(dt: datetime) -> str:
    """Render *dt* as an RFC 3339 UTC timestamp with second precision."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_submission_filter(
    days_back: int,
    *,
    category: SubmissionCategory | str | None = None,
    include_admin_submissions: bool = False,
    now: datetime | None = None,
) -> str:
    """Compose the emailThreats ``$filter``.

    Clause order is source, creation-date lower bound, then category; the
    category clause is omitted entirely when no category is requested.
    """
    if days_back < 1:
        raise ValueError("days_back must be a positive number of days")

    user = f"source eq {odata_quote(SubmissionSource.USER.value)}"
    if include_admin_submissions:
        admin = f"source eq {odata_quote(SubmissionSource.ADMINISTRATOR.value)}"
        source_clause = f"({user} or {admin})"
    else:
        source_clause = user

    since = (now or datetime.now(UTC)) - timedelta(days=days_back)
    clauses = [source_clause, f"createdDateTime ge {odata_datetime(since)}"]

    if category:
        value = category.value if isinstance(category, SubmissionCategory) else category
        clauses.append(f"category eq {odata_quote(value)}")

    return " and ".join(clauses)
