"""
Evaluation harness -- runs eval_prompts.jsonl through the rule-based
interpreter and generates analytics/reports/eval_report.md.

Checks (each only when the prompt's record names an expectation):
  - Datasets      (detected dataset set, order-independent)
  - Component     (componentType of every interpretation)
  - Chart type    (chartType of every interpretation)
  - Filters       (expected filters all present on the first interpretation)
  - Sort / limit  (exact match on the first interpretation)
  - Latency       (microseconds per prompt)

Exits non-zero when the pass rate drops below PASS_THRESHOLD.
"""
from __future__ import annotations

import datetime
import json
import sys
from pathlib import Path
from typing import Any

EVAL_PATH = Path(__file__).resolve().parent / "eval_prompts.jsonl"
REPORT_PATH = Path(__file__).resolve().parents[1] / "reports" / "eval_report.md"
PASS_THRESHOLD = 0.9

_CHECKS = ("datasets", "component", "chart", "filters", "sort", "limit")


def _load_prompts(path: Path = EVAL_PATH) -> list[dict[str, Any]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines if line.strip()]


def _run_one(case: dict[str, Any]) -> dict[str, Any]:
    """Interpret one prompt and score it against its expectations."""
    from src.core.utils import timer
    from src.interpreter.planner import interpret_multiple

    prompt = case["prompt"]
    with timer() as t:
        interpretations = [i.to_wire() for i in interpret_multiple(prompt)]
    latency_us = t.elapsed_us
    first = interpretations[0]

    checks: dict[str, bool | None] = dict.fromkeys(_CHECKS)
    if "expected_datasets" in case:
        checks["datasets"] = {i["datasetType"] for i in interpretations} == set(case["expected_datasets"])
    if "expected_component" in case:
        checks["component"] = all(i["componentType"] == case["expected_component"] for i in interpretations)
    if "expected_chart" in case:
        checks["chart"] = all(i.get("chartType") == case["expected_chart"] for i in interpretations)
    if "expected_filters" in case:
        actual = first.get("filters", [])
        expected = case["expected_filters"]
        checks["filters"] = all(f in actual for f in expected) if expected else not actual
    if "expected_sort" in case:
        checks["sort"] = first.get("sort") == case["expected_sort"]
    if "expected_limit" in case:
        checks["limit"] = first.get("limit") == case["expected_limit"]

    return {
        "prompt": prompt,
        "checks": checks,
        "interpretations": interpretations,
        "latency_us": latency_us,
        "success": all(v is not False for v in checks.values()),
    }


def _rate(ok: int, total: int) -> str:
    return f"**{ok / total * 100:.0f}%** ({ok}/{total})" if total else "n/a"


def _generate_report(results: list[dict[str, Any]]) -> str:
    """Generate the Markdown eval report."""
    total = len(results)
    now = datetime.datetime.now().strftime("%Y-%m-%d %H:%M")
    successes = sum(1 for r in results if r["success"])

    lines: list[str] = []
    lines.append("# Evaluation Report")
    lines.append("")
    lines.append(f"> Generated: {now}  |  Prompts: **{total}**  |  Mode: `mock` (rule-based interpreter)")
    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append("## Summary")
    lines.append("")
    lines.append("| Check | Value |")
    lines.append("|-------|-------|")
    lines.append(f"| Overall success rate | {_rate(successes, total)} |")
    for name in _CHECKS:
        scored = [r["checks"][name] for r in results if r["checks"][name] is not None]
        lines.append(f"| {name.capitalize()} correctness | {_rate(sum(scored), len(scored))} |")
    lines.append("")

    latencies = sorted(r["latency_us"] for r in results)
    if latencies:
        lines.append("## Latency")
        lines.append("")
        lines.append("| Stat | µs |")
        lines.append("|------|-----|")
        lines.append(f"| Mean | {sum(latencies) / len(latencies):.0f} |")
        lines.append(f"| p50 | {latencies[len(latencies) // 2]} |")
        lines.append(f"| Max | {latencies[-1]} |")
        lines.append("")
    lines.append("---")
    lines.append("")

    lines.append("## Per-Prompt Results")
    lines.append("")
    lines.append("| # | Prompt | " + " | ".join(c.capitalize() for c in _CHECKS) + " | Pass |")
    lines.append("|---|--------|" + "|".join("---" for _ in _CHECKS) + "|------|")
    for i, r in enumerate(results, 1):
        marks = ["--" if v is None else ("OK" if v else "ERROR") for v in r["checks"].values()]
        text = r["prompt"][:55] + ("..." if len(r["prompt"]) > 55 else "")
        lines.append(f"| {i} | {text or '(empty)'} | " + " | ".join(marks) + f" | {'OK' if r['success'] else 'ERROR'} |")
    lines.append("")

    failures = [(i, r) for i, r in enumerate(results, 1) if not r["success"]]
    lines.append("## Failures")
    lines.append("")
    if failures:
        for i, r in failures:
            lines.append(f"### #{i}: {r['prompt']}")
            lines.append("")
            lines.append("```json")
            lines.append(json.dumps(r["interpretations"], indent=2))
            lines.append("```")
            lines.append("")
    else:
        lines.append("None -- all prompts handled correctly.")
        lines.append("")

    return "\n".join(lines)


def run() -> int:
    cases = _load_prompts()
    print(f"Loaded {len(cases)} eval prompts.")
    print("Running evaluation...\n")

    results = []
    for i, case in enumerate(cases, 1):
        r = _run_one(case)
        status = "PASS" if r["success"] else "FAIL"
        print(f"  [{i:2d}/{len(cases)}] {status}  {r['prompt'][:60]:<60}  {r['latency_us']:>6d}us")
        results.append(r)

    REPORT_PATH.parent.mkdir(parents=True, exist_ok=True)
    REPORT_PATH.write_text(_generate_report(results), encoding="utf-8")
    print(f"\nReport written to {REPORT_PATH}")

    total = len(results)
    successes = sum(1 for r in results if r["success"])
    rate = successes / total if total else 0.0
    print(f"\n{'='*50}")
    print(f"  Success: {successes}/{total} ({rate * 100:.0f}%)")
    print(f"{'='*50}")
    return 0 if rate >= PASS_THRESHOLD else 1


if __name__ == "__main__":
    sys.exit(run())
