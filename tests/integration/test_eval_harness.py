"""
Integration tests -- the golden-prompt evaluation harness.
"""
from __future__ import annotations

from analytics.eval import run_eval


def test_every_golden_prompt_passes():
    cases = run_eval._load_prompts()
    assert len(cases) >= 15
    failures = [r["prompt"] for r in map(run_eval._run_one, cases) if not r["success"]]
    assert failures == []


def test_run_writes_report(tmp_path, monkeypatch):
    report = tmp_path / "reports" / "eval_report.md"
    monkeypatch.setattr(run_eval, "REPORT_PATH", report)
    assert run_eval.run() == 0
    text = report.read_text(encoding="utf-8")
    assert text.startswith("# Evaluation Report")
    assert "None -- all prompts handled correctly." in text
