"""Tests for the crawl coordinator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import LocationParseError

from appguard import engine
from appguard.config import default_config
from appguard.engine import Scanner, detect, run_scan, validate_target
from appguard.errors import InvalidTarget
from appguard.models import CrawlRequest, CustomRule, ScanLevel, Severity

SEED = "https://example.com/"


def _links(*paths: str) -> str:
    anchors = "".join(f'<a href="{p}">{p}</a>' for p in paths)
    return f"<html><body>{anchors}</body></html>"


def _request(level=ScanLevel.STANDARD, limit=10, **kwargs) -> CrawlRequest:
    return CrawlRequest(url=SEED, scan_level=level, crawl_limit=limit, **kwargs)


# ---------------------------------------------------------------------------
# Seed validation
# ---------------------------------------------------------------------------

class TestValidateTarget:
    @pytest.mark.parametrize("url", ["", "not a url", "http://", "example.com/path", "https://[::1"])
    def test_rejects_unparsable_seed(self, url: str) -> None:
        with pytest.raises(InvalidTarget):
            validate_target(url)

    def test_returns_origin(self) -> None:
        assert validate_target("HTTPS://Example.com:8443/x") == ("https", "example.com:8443")

    def test_invalid_seed_aborts_before_fetch(self, fake_site) -> None:
        site = fake_site({})
        with pytest.raises(InvalidTarget):
            run_scan(CrawlRequest(url="nope"), fetcher=site)
        assert site.calls == []


# ---------------------------------------------------------------------------
# Budget and breadth
# ---------------------------------------------------------------------------

class TestBudget:
    @pytest.mark.parametrize("limit", [0, -5])
    def test_non_positive_budget_scans_seed(self, make_page, fake_site, limit: int) -> None:
        site = fake_site({SEED: make_page(SEED, _links("/a", "/b"))})
        result = run_scan(_request(limit=limit), fetcher=site)
        assert result.scanned_urls == [SEED]

    def test_quick_scan_visits_only_seed(self, make_page, fake_site) -> None:
        site = fake_site({SEED: make_page(SEED, _links("/a", "/b"))})
        result = run_scan(_request(level=ScanLevel.QUICK, limit=5), fetcher=site)
        assert result.scanned_urls == [SEED]
        assert site.calls == [SEED]

    def test_budget_limits_visits(self, make_page, fake_site) -> None:
        # Scenario C: ten same-origin links, budget of three
        paths = [f"/page{i}" for i in range(10)]
        pages = {SEED: make_page(SEED, _links(*paths))}
        for p in paths:
            pages[f"https://example.com{p}"] = make_page(f"https://example.com{p}", "<p>leaf</p>")
        site = fake_site(pages)

        result = run_scan(_request(limit=3), fetcher=site)

        assert result.scanned_urls == [SEED, "https://example.com/page0", "https://example.com/page1"]
        assert len(site.calls) == 3

    def test_breadth_first_order(self, make_page, fake_site) -> None:
        site = fake_site({
            SEED: make_page(SEED, _links("/a", "/b")),
            "https://example.com/a": make_page("https://example.com/a", _links("/a/deep")),
            "https://example.com/b": make_page("https://example.com/b", ""),
            "https://example.com/a/deep": make_page("https://example.com/a/deep", ""),
        })
        result = run_scan(_request(), fetcher=site)
        assert result.scanned_urls == [
            SEED,
            "https://example.com/a",
            "https://example.com/b",
            "https://example.com/a/deep",
        ]


# ---------------------------------------------------------------------------
# De-duplication
# ---------------------------------------------------------------------------

class TestDeduplication:
    def test_cycles_visit_each_url_once(self, make_page, fake_site) -> None:
        site = fake_site({
            SEED: make_page(SEED, _links("/a", "/b", "/")),
            "https://example.com/a": make_page("https://example.com/a", _links("/", "/b", "/a")),
            "https://example.com/b": make_page("https://example.com/b", _links("/a", "/")),
        })
        result = run_scan(_request(limit=50), fetcher=site)

        assert sorted(result.scanned_urls) == sorted(set(result.scanned_urls))
        assert len(result.scanned_urls) == 3
        assert sorted(site.calls) == sorted(set(site.calls))

    def test_cross_origin_links_are_not_followed(self, make_page, fake_site) -> None:
        site = fake_site({
            SEED: make_page(SEED, _links("https://other.com/", "http://example.com/plain", "/ok")),
            "https://example.com/ok": make_page("https://example.com/ok", ""),
        })
        result = run_scan(_request(), fetcher=site)
        assert result.scanned_urls == [SEED, "https://example.com/ok"]


# ---------------------------------------------------------------------------
# Fetch failures
# ---------------------------------------------------------------------------

class TestFetchFailures:
    def test_unreachable_seed_yields_access_error(self, fake_site) -> None:
        # Scenario A
        result = run_scan(_request(), fetcher=fake_site({}))

        assert result.scanned_urls == [SEED]
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.name == "URL Access Error"
        assert finding.category == "Accessibility"
        assert finding.severity == Severity.LOW
        assert finding.details == {"error": "Connection refused"}
        assert finding.description == f"Could not access {SEED}: Connection refused"
        assert result.summary.low_severity >= 1

    def test_failed_page_does_not_abort_scan(self, make_page, fake_site) -> None:
        site = fake_site({
            SEED: make_page(SEED, _links("/dead", "/alive")),
            "https://example.com/alive": make_page("https://example.com/alive", ""),
        })
        result = run_scan(_request(), fetcher=site)

        assert result.scanned_urls == [SEED, "https://example.com/dead", "https://example.com/alive"]
        errors = [f for f in result.findings if f.category == "Accessibility"]
        assert [f.url for f in errors] == ["https://example.com/dead"]


# ---------------------------------------------------------------------------
# Detection wiring
# ---------------------------------------------------------------------------

class TestDetection:
    def test_quick_scan_without_cookies_or_csp(self, make_page, fake_site) -> None:
        # Scenario B
        headers = {"X-Frame-Options": "DENY"}
        site = fake_site({SEED: make_page(SEED, _links("/a"), headers=headers)})

        result = run_scan(_request(level=ScanLevel.QUICK, limit=5), fetcher=site)

        assert len(result.scanned_urls) == 1
        names = [f.name for f in result.findings]
        assert "Missing Content-Security-Policy Header" in names
        assert not [f for f in result.findings if f.category == "Cookie Security"]

    def test_custom_rule_matches_per_page(self, make_page, fake_site) -> None:
        # Scenario D
        rule = CustomRule(
            id=7, name="Inline password", description="Password literal in page",
            category="Custom Secrets", pattern=r"""password\s*=\s*['"][^'"]+['"]""",
            severity=Severity.HIGH,
        )
        site = fake_site({
            SEED: make_page(SEED, _links("/one", "/two") + "<script>var password = 'abc';</script>"),
            "https://example.com/one": make_page("https://example.com/one", "<p>nothing here</p>"),
            "https://example.com/two": make_page("https://example.com/two", 'PASSWORD="hunter2"'),
        })
        request = _request(include_custom_rules=True, custom_rules=(rule,))

        result = run_scan(request, fetcher=site)

        custom = [f for f in result.findings if f.category == "Custom Secrets"]
        assert len(custom) == 2
        assert {f.url for f in custom} == {SEED, "https://example.com/two"}
        assert all(f.severity == Severity.HIGH and f.name == "Inline password" for f in custom)
        assert custom[0].details == {"rule": 7, "matched": True}

    def test_custom_rules_ignored_when_flag_off(self, make_page, fake_site) -> None:
        rule = CustomRule(id=1, name="Any", description="", category="Custom", pattern=".", severity=Severity.LOW)
        site = fake_site({SEED: make_page(SEED, "x")})
        result = run_scan(_request(custom_rules=(rule,)), fetcher=site)
        assert not [f for f in result.findings if f.category == "Custom"]

    def test_bad_custom_pattern_is_skipped(self, make_page, fake_site) -> None:
        rules = (
            CustomRule(id=1, name="Broken", description="", category="Custom", pattern="([", severity=Severity.HIGH),
            CustomRule(id=2, name="Works", description="", category="Custom", pattern="secret", severity=Severity.LOW),
        )
        site = fake_site({SEED: make_page(SEED, "top SECRET")})
        result = run_scan(_request(include_custom_rules=True, custom_rules=rules), fetcher=site)
        assert [f.name for f in result.findings if f.category == "Custom"] == ["Works"]

    def test_disabled_checks_do_not_run(self, make_page, fake_site) -> None:
        config = default_config()
        config["checks"] = {"security_headers": True}
        site = fake_site({SEED: make_page(SEED, "", headers={}, set_cookies=["sid=1"])})
        result = run_scan(_request(), fetcher=site, config=config)
        assert {f.category for f in result.findings} == {"Security Headers"}

    def test_detect_is_idempotent(self, make_page) -> None:
        page = make_page(
            "http://example.com/item?id=1",
            '<form method="post"><input name="q"></form>',
            headers={"Server": "Apache/2.2.15"},
            set_cookies=["sid=abc; Path=/"],
        )
        first = detect(page.url, page)
        second = detect(page.url, page)
        assert first
        assert first == second

    def test_summary_matches_findings(self, make_page, fake_site) -> None:
        site = fake_site({SEED: make_page(SEED, "", headers={})})
        result = run_scan(_request(), fetcher=site)
        assert result.summary.total_vulnerabilities == len(result.findings)
        assert result.summary.high_severity == result.high_count
        assert result.summary.medium_severity == result.medium_count
        assert result.summary.low_severity == result.low_count

    def test_scanner_owns_independent_state(self, make_page, fake_site) -> None:
        site = fake_site({SEED: make_page(SEED, "")})
        first = Scanner(_request(), fetcher=site)
        second = Scanner(_request(), fetcher=site)
        assert first.state is not second.state
        first.run()
        assert second.state.visited == []


# ---------------------------------------------------------------------------
# Seed normalization
# ---------------------------------------------------------------------------

class TestSeedNormalization:
    def test_bare_host_seed_is_fetched_once(self, make_page, fake_site) -> None:
        site = fake_site({SEED: make_page(SEED, _links("/", "/#top"))})
        result = run_scan(CrawlRequest(url="https://example.com"), fetcher=site)

        assert result.target == SEED
        assert result.scanned_urls == [SEED]
        assert site.calls == [SEED]

    def test_seed_fragment_is_dropped(self, make_page, fake_site) -> None:
        site = fake_site({SEED: make_page(SEED, _links("/"))})
        result = run_scan(CrawlRequest(url="https://example.com/#main"), fetcher=site)
        assert result.scanned_urls == [SEED]


# ---------------------------------------------------------------------------
# Unexpected per-page errors
# ---------------------------------------------------------------------------

class TestUnexpectedErrors:
    @pytest.mark.parametrize("seed", [
        "http://example..com/",
        "http://" + "a" * 64 + ".com/",
    ])
    def test_unparsable_host_yields_access_error(self, seed: str) -> None:
        session = MagicMock(spec=requests.Session)
        session.get.side_effect = LocationParseError(seed)

        result = run_scan(CrawlRequest(url=seed, scan_level=ScanLevel.QUICK, crawl_limit=1), session=session)

        assert result.scanned_urls == [seed]
        assert [f.category for f in result.findings] == ["Accessibility"]
        assert result.findings[0].name == "URL Access Error"

    def test_failing_analysis_does_not_abort_scan(self, make_page, fake_site, monkeypatch) -> None:
        site = fake_site({
            SEED: make_page(SEED, _links("/broken", "/fine")),
            "https://example.com/broken": make_page("https://example.com/broken", ""),
            "https://example.com/fine": make_page("https://example.com/fine", "", headers={}),
        })
        real_detect = engine.detect

        def flaky_detect(url, page, *args):
            if url.endswith("/broken"):
                raise RuntimeError("boom")
            return real_detect(url, page, *args)

        monkeypatch.setattr(engine, "detect", flaky_detect)
        result = run_scan(_request(), fetcher=site)

        assert result.scanned_urls == [SEED, "https://example.com/broken", "https://example.com/fine"]
        assert {f.url for f in result.findings} == {"https://example.com/fine"}
