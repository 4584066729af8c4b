"""Tests for threat_submissions.cli."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from threat_submissions.cli import NO_RESULTS_HINT, build_parser, load_config, run
from threat_submissions.models import SubmissionCategory

from tests.conftest import (
    GRAPH_BASE,
    ORGANIZATION_URL,
    SUBMISSIONS_URL,
    make_page,
    make_submission,
)


@pytest.fixture(autouse=True)
def graph_env(monkeypatch):
    monkeypatch.setenv("GRAPH_BASE_URL", GRAPH_BASE)
    monkeypatch.setenv("GRAPH_ACCESS_TOKEN", "cli-token")
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "1")
    for var in ("REPORT_DAYS_BACK", "REPORT_CATEGORY", "REPORT_EXPORT_HTML", "REPORT_OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)


def _mock_org() -> respx.Route:
    return respx.get(ORGANIZATION_URL).respond(200, json={"value": [{"displayName": "Contoso"}]})


class TestParser:
    def test_defaults_defer_to_config(self):
        args = build_parser().parse_args([])
        config = load_config(args)
        assert config.days_back == 180
        assert config.category is None
        assert config.include_admin_submissions is False
        assert config.export_html is False

    def test_flags_override(self):
        args = build_parser().parse_args(
            ["-d", "30", "-c", "phishing", "--include-admin-submissions", "--export-html"]
        )
        config = load_config(args)
        assert config.days_back == 30
        assert config.category is SubmissionCategory.PHISHING
        assert config.include_admin_submissions is True
        assert config.export_html is True

    def test_flag_beats_env(self, monkeypatch):
        monkeypatch.setenv("REPORT_DAYS_BACK", "7")
        assert load_config(build_parser().parse_args([])).days_back == 7
        assert load_config(build_parser().parse_args(["-d", "14"])).days_back == 14

    def test_unknown_category_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-c", "bogus"])


class TestRun:
    def test_invalid_days_back_exits_1(self, tmp_path: Path):
        assert run(["-d", "0", "-o", str(tmp_path)]) == 1

    def test_missing_token_exits_1(self, monkeypatch, tmp_path: Path, capsys):
        monkeypatch.delenv("GRAPH_ACCESS_TOKEN")
        assert run(["-o", str(tmp_path)]) == 1
        assert "access token" in capsys.readouterr().err

    @respx.mock
    def test_connection_failure_exits_1(self, tmp_path: Path):
        respx.get(ORGANIZATION_URL).respond(401)
        submissions = respx.get(SUBMISSIONS_URL).respond(200, json=make_page([]))
        assert run(["-o", str(tmp_path)]) == 1
        assert not submissions.called

    @respx.mock
    def test_success_writes_exports(self, tmp_path: Path, capsys):
        _mock_org()
        route = respx.get(SUBMISSIONS_URL).respond(
            200, json=make_page([make_submission(id="a"), make_submission(id="b")])
        )

        assert run(["-d", "30", "-c", "phishing", "-o", str(tmp_path), "--export-html"]) == 0

        sent_filter = route.calls.last.request.url.params["$filter"]
        assert sent_filter.startswith("source eq 'user' and createdDateTime ge ")
        assert sent_filter.endswith(" and category eq 'phishing'")
        assert sorted(p.suffix for p in tmp_path.iterdir()) == [".csv", ".html", ".json"]
        out = capsys.readouterr().out
        assert "Total submissions: 2" in out

    @respx.mock
    def test_progress_printed_per_page(self, tmp_path: Path, capsys):
        _mock_org()
        respx.get(SUBMISSIONS_URL).mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=make_page(
                        [make_submission(id="a"), make_submission(id="b")],
                        f"{SUBMISSIONS_URL}?$skiptoken=p2",
                    ),
                ),
                httpx.Response(200, json=make_page([make_submission(id="c")])),
            ]
        )

        assert run(["-o", str(tmp_path)]) == 0

        err = capsys.readouterr().err
        assert "[progress] retrieved 2 submissions" in err
        assert "[progress] retrieved 3 submissions" in err

    @respx.mock
    def test_html_only_when_requested(self, tmp_path: Path):
        _mock_org()
        respx.get(SUBMISSIONS_URL).respond(200, json=make_page([make_submission()]))
        assert run(["-o", str(tmp_path)]) == 0
        assert sorted(p.suffix for p in tmp_path.iterdir()) == [".csv", ".json"]

    @respx.mock
    def test_zero_results_warns_and_exits_0(self, tmp_path: Path, capsys):
        _mock_org()
        respx.get(SUBMISSIONS_URL).respond(200, json=make_page([]))
        assert run(["-o", str(tmp_path)]) == 0
        captured = capsys.readouterr()
        assert "Total submissions: 0" in captured.out
        assert NO_RESULTS_HINT in captured.err
        assert list(tmp_path.iterdir()) == []

    @respx.mock
    def test_partial_retrieval_exports_then_exits_1(self, tmp_path: Path, capsys):
        _mock_org()
        respx.get(SUBMISSIONS_URL).mock(
            side_effect=[
                httpx.Response(
                    200,
                    json=make_page([make_submission()], f"{SUBMISSIONS_URL}?$skiptoken=p2"),
                ),
                httpx.Response(500),
            ]
        )
        assert run(["-o", str(tmp_path)]) == 1
        assert sorted(p.suffix for p in tmp_path.iterdir()) == [".csv", ".json"]
        assert "retrieval aborted" in capsys.readouterr().err

    @respx.mock
    def test_export_failure_is_a_warning(self, tmp_path: Path):
        _mock_org()
        respx.get(SUBMISSIONS_URL).respond(200, json=make_page([make_submission()]))
        blocker = tmp_path / "blocked"
        blocker.write_text("")
        assert run(["-o", str(blocker)]) == 0

    @respx.mock
    def test_first_page_failure_is_not_reported_as_no_data(self, tmp_path: Path, capsys):
        _mock_org()
        respx.get(SUBMISSIONS_URL).respond(403, json={"error": {"message": "denied"}})
        assert run(["-o", str(tmp_path)]) == 1
        err = capsys.readouterr().err
        assert "retrieval aborted" in err
        assert NO_RESULTS_HINT not in err
