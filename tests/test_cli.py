"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import patch

import main
from appguard.models import Finding, ScanLevel, ScanResult, Severity
from appguard.summary import summarize


def _result(severity: Severity) -> ScanResult:
    findings = [Finding(name="n", description="d", url="https://example.com/", severity=severity, category="c")]
    return ScanResult(
        target="https://example.com/", scan_level=ScanLevel.QUICK,
        scanned_urls=["https://example.com/"], findings=findings, summary=summarize(findings),
    )


def test_invalid_target_exit_code() -> None:
    assert main.main(["http://", "-q"]) == 2


def test_high_findings_exit_code_and_json(tmp_path) -> None:
    out = tmp_path / "report.json"
    with patch("main.run_scan", return_value=_result(Severity.HIGH)) as run_scan:
        code = main.main(["example.com", "--level", "quick", "--limit", "3", "-q", "-o", str(out)])

    assert code == 1
    request = run_scan.call_args.args[0]
    assert request.url == "https://example.com"
    assert request.scan_level == ScanLevel.QUICK
    assert request.crawl_limit == 3
    assert json.loads(out.read_text())["summary"]["highSeverity"] == 1


def test_rules_file_enables_custom_rules(tmp_path) -> None:
    rules = tmp_path / "rules.yaml"
    rules.write_text("- name: R\n  pattern: x\n  severity: low\n")
    with patch("main.run_scan", return_value=_result(Severity.LOW)) as run_scan:
        code = main.main(["https://example.com/", "--rules", str(rules), "-q"])

    assert code == 0
    request = run_scan.call_args.args[0]
    assert request.include_custom_rules is True
    assert [r.name for r in request.custom_rules] == ["R"]
