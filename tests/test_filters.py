"""Tests for threat_submissions.filters."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from threat_submissions.filters import build_submission_filter, odata_datetime, odata_quote
from threat_submissions.models import SubmissionCategory

NOW = datetime(2025, 6, 30, 12, 0, 0, tzinfo=timezone.utc)


class TestOdataQuote:
    def test_plain(self):
        assert odata_quote("user") == "'user'"

    def test_single_quotes_doubled(self):
        assert odata_quote("O'Brien's") == "'O''Brien''s'"


class TestOdataDatetime:
    def test_utc_z_suffix(self):
        assert odata_datetime(NOW) == "2025-06-30T12:00:00Z"

    def test_converts_offset_to_utc(self):
        from datetime import timedelta

        local = datetime(2025, 6, 30, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert odata_datetime(local) == "2025-06-30T12:00:00Z"


class TestBuildSubmissionFilter:
    def test_user_phishing_thirty_days(self):
        expr = build_submission_filter(
            30,
            category=SubmissionCategory.PHISHING,
            include_admin_submissions=False,
            now=NOW,
        )
        assert expr == (
            "source eq 'user'"
            " and createdDateTime ge 2025-05-31T12:00:00Z"
            " and category eq 'phishing'"
        )

    def test_category_omitted_when_absent(self):
        expr = build_submission_filter(180, now=NOW)
        assert expr == "source eq 'user' and createdDateTime ge 2025-01-01T12:00:00Z"
        assert "category" not in expr

    def test_empty_string_category_omitted(self):
        expr = build_submission_filter(30, category="", now=NOW)
        assert "category" not in expr

    def test_include_admin_submissions(self):
        expr = build_submission_filter(1, include_admin_submissions=True, now=NOW)
        assert expr.startswith("(source eq 'user' or source eq 'administrator') and ")

    def test_category_as_string(self):
        expr = build_submission_filter(1, category="malware", now=NOW)
        assert expr.endswith("and category eq 'malware'")

    def test_rejects_non_positive_days(self):
        with pytest.raises(ValueError):
            build_submission_filter(0, now=NOW)
