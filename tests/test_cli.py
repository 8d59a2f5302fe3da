import json
from pathlib import Path

import pytest

from psstyle import cli

ROOT = Path(__file__).resolve().parents[1]
SCRIPT_RULES = {
    "avoid_aliases",
    "null_comparison",
    "empty_catch",
    "hardcoded_computer_name",
    "global_variables",
    "write_host",
    "invoke_expression",
    "wmi_cmdlets",
    "plaintext_password",
    "parameter_declarations",
    "approved_verbs",
    "dsc_resource_functions",
    "whitespace",
}


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_cli_reports_noncompliant_samples(tmp_path, capsys):
    output_path = tmp_path / "lint.json"

    exit_code = cli.main([str(ROOT / "samples/noncompliant"), "--out", str(output_path)])

    captured = capsys.readouterr()
    assert "Lint Summary" in captured.out
    assert exit_code == 2
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert {finding["rule"] for finding in data["findings"]} == SCRIPT_RULES
    assert data["suppressed"] >= 1
    assert data["files_scanned"] == 3
    assert data["passed"] is False


def test_cli_passes_on_compliant_samples_and_guide(tmp_path, capsys):
    output_path = tmp_path / "lint.json"

    exit_code = cli.main(
        [
            str(ROOT / "samples/compliant"),
            "--guide",
            str(ROOT / "docs/BestPractices.md"),
            "--out",
            str(output_path),
        ]
    )

    captured = capsys.readouterr()
    assert "Status    : PASS" in captured.out
    assert exit_code == 0
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["findings"] == []
    assert data["files_scanned"] == 3


def test_cli_text_format_prints_findings(capsys):
    exit_code = cli.main(
        [str(ROOT / "samples/noncompliant/Format-Greeting.ps1"), "--format", "text", "--quiet"]
    )

    lines = capsys.readouterr().out.strip().splitlines()
    assert exit_code == 0
    assert len(lines) == 4
    assert all("(whitespace)" in line for line in lines)


def test_cli_select_limits_rules(capsys):
    cli.main([str(ROOT / "samples/noncompliant"), "--select", "write_host", "--quiet"])

    data = json.loads(capsys.readouterr().out)
    assert {finding["rule"] for finding in data["findings"]} == {"write_host"}


def test_cli_lists_rules(capsys):
    assert cli.main(["--list-rules"]) == 0

    out = capsys.readouterr().out
    assert "guide_document" in out
    assert "avoid_aliases" in out


def test_cli_rejects_unknown_rule():
    with pytest.raises(SystemExit, match="unknown rule"):
        cli.main([str(ROOT / "samples/compliant"), "--select", "nope"])


def test_cli_rejects_bad_config(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("severity: [high]\n", encoding="utf-8")

    with pytest.raises(SystemExit, match="Invalid configuration"):
        cli.main([str(ROOT / "samples/compliant"), "--config", str(config)])


def test_cli_fail_on_empty(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()

    with pytest.raises(SystemExit, match="No PowerShell scripts"):
        cli.main([str(empty), "--fail-on-empty"])
