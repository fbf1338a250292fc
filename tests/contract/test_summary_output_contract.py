from __future__ import annotations

import re
from pathlib import Path

from excel2sql.cli import main as cli_main
from excel2sql.models.processing_result import RunSummary
from excel2sql.services.summary import render_summary_line

"""SUMMARY line and per-table line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+tables=([0-9]+)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)\s+throughput_rps=([0-9]+\.?[0-9]*)$"
)
TABLE_LINE_PATTERN = re.compile(r"^(Import [0-9]+ rows for \S+|ERROR:> .+)$")


def test_summary_pattern_example_line():
    line = "SUMMARY tables=2 success=2 failed=0 rows=4 elapsed_sec=0.84 throughput_rps=4761.9"
    assert SUMMARY_PATTERN.match(line)


def test_rendered_summary_matches_pattern():
    line = render_summary_line(RunSummary(3, 1, 12345, 0.004321, 2857142.857))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    tables, success, failed = (int(m.group(i)) for i in (1, 2, 3))
    assert tables == success + failed


def test_cli_output_lines(sample_workbook: Path, monkeypatch, fake_pool_cls, capsys):
    monkeypatch.setattr(
        "excel2sql.cli.__main__.create_pool",
        lambda db, pool_size=5: fake_pool_cls(existing={"Video"}),
    )
    cli_main(
        ["-e", str(sample_workbook), "-d", "appdb", "-H", "h", "-p", "3306", "-U", "u", "-P", "p", "-s", "1"]
    )
    lines = capsys.readouterr().out.strip().splitlines()

    summary_lines = [line for line in lines if line.startswith("SUMMARY")]
    assert len(summary_lines) == 1
    assert SUMMARY_PATTERN.match(summary_lines[0])
    assert lines[-1] == summary_lines[0]

    table_lines = [line for line in lines if TABLE_LINE_PATTERN.match(line)]
    assert len(table_lines) == 2
