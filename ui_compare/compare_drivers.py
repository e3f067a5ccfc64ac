#!/usr/bin/env python3
"""
Cross-driver UI test comparison tool.

Reconciles the per-dashboard findings of two UI automation drivers (default:
Playwright vs Selenium) that tested the same set of dashboards:
- Issues found by both drivers (syntactic match after normalization)
- Issues found by only one driver
- Severity tier per dashboard (deduplicated issue count)
- Recommendation per dashboard (driver availability + raw issue counts)
- Per-driver summary (passed / failed / redirected / not tested / load time)

Outputs:
- Markdown report
- JSON report

Exit codes:
0 pass
1 gate failed (--fail-on-severity / --fail-on-not-tested)
2 tool or configuration error
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ui_compare.compare_config import (  # noqa: E402
    DEFAULT_CONFIG_PATH,
    CompareConfig,
    ConfigError,
    load_config,
)
from ui_compare.driver_results import is_not_tested, load_driver_results  # noqa: E402
from ui_compare.reconcile import (  # noqa: E402
    SEVERITY_ORDER,
    ComparisonReport,
    compile_report,
    report_to_dict,
    severity_rank,
)
from ui_compare.report_markdown import build_report_markdown, summary_lines  # noqa: E402

EXIT_PASS = 0
EXIT_GATE_FAILED = 1
EXIT_TOOL_ERROR = 2


def write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n", encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def run_comparison(
    config: CompareConfig,
    results_a: Optional[Path] = None,
    results_b: Optional[Path] = None,
    generated_utc: Optional[str] = None,
) -> ComparisonReport:
    """Load both drivers' result files and reconcile them over the configured dashboards.

    Explicit result paths win over the ones named in the config. Unusable
    result files never abort the run; they surface as warnings and not-tested
    dashboards.
    """
    warnings: List[str] = []
    path_a = results_a or config.driver_a.results
    path_b = results_b or config.driver_b.results

    driver_warnings: List[str] = []
    loaded_a = load_driver_results(path_a, driver_warnings)
    warnings.extend(f"[{config.driver_a.name}] {w}" for w in driver_warnings)

    driver_warnings = []
    loaded_b = load_driver_results(path_b, driver_warnings)
    warnings.extend(f"[{config.driver_b.name}] {w}" for w in driver_warnings)

    for name, loaded in ((config.driver_a.name, loaded_a), (config.driver_b.name, loaded_b)):
        unexpected = sorted(set(loaded) - set(config.dashboards))
        if unexpected:
            warnings.append(f"[{name}] ignoring results for unlisted dashboards: {', '.join(unexpected)}")

    return compile_report(
        config.dashboards,
        loaded_a,
        loaded_b,
        label_a=config.driver_a.label,
        label_b=config.driver_b.label,
        warnings=warnings,
        generated_utc=generated_utc,
    )


def gate_failures(
    report: ComparisonReport,
    fail_on_severity: Optional[str] = None,
    fail_on_not_tested: bool = False,
) -> List[str]:
    failures: List[str] = []
    for record in report.records:
        if fail_on_severity and severity_rank(record.severity) >= severity_rank(fail_on_severity):
            failures.append(
                f"{record.dashboard_name}: severity {record.severity} reaches threshold {fail_on_severity}"
            )
        if fail_on_not_tested:
            missing = [
                label
                for label, result in ((report.label_a, record.driver_a), (report.label_b, record.driver_b))
                if is_not_tested(result)
            ]
            if missing:
                failures.append(f"{record.dashboard_name}: not tested by {', '.join(missing)}")
    return failures


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile UI test findings from two automation drivers into one comparison report.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to comparison config YAML (default: %(default)s).",
    )
    parser.add_argument(
        "--dashboard",
        action="append",
        default=[],
        help="Dashboard to reconcile; repeat to list several. Replaces the config's dashboard list.",
    )
    parser.add_argument(
        "--driver-a-results",
        default="",
        help="Result JSON written by driver A (overrides config).",
    )
    parser.add_argument(
        "--driver-b-results",
        default="",
        help="Result JSON written by driver B (overrides config).",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Output markdown report path (default: artifacts/ui_compare/<run_id>/report.md).",
    )
    parser.add_argument(
        "--fail-on-severity",
        choices=SEVERITY_ORDER,
        default=None,
        help="Exit 1 when any dashboard's severity is at or above this tier.",
    )
    parser.add_argument(
        "--fail-on-not-tested",
        action="store_true",
        help="Exit 1 when any dashboard is missing a result from either driver.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print errors and gate failures.",
    )
    return parser.parse_args(argv)


def default_run_dir() -> Path:
    run_id = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return Path("artifacts") / "ui_compare" / run_id


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_TOOL_ERROR

    if args.dashboard:
        if len(set(args.dashboard)) != len(args.dashboard):
            print("ERROR: --dashboard values must be unique", file=sys.stderr)
            return EXIT_TOOL_ERROR
        config.dashboards = list(args.dashboard)

    run_dir = default_run_dir()
    if args.output:
        out_md = Path(args.output).resolve()
        run_dir = out_md.parent
    else:
        out_md = (run_dir / "report.md").resolve()
    out_json = (run_dir / "report.json").resolve()
    run_id = run_dir.name

    report = run_comparison(
        config,
        results_a=Path(args.driver_a_results) if args.driver_a_results else None,
        results_b=Path(args.driver_b_results) if args.driver_b_results else None,
    )

    write_text(out_md, build_report_markdown(report, run_id=run_id))
    write_json(out_json, report_to_dict(report, run_id=run_id, driver_names=(config.driver_a.name, config.driver_b.name)))

    if not args.quiet:
        print(f"Wrote report: {out_md}")
        print(f"Wrote json:   {out_json}")
        for warning in report.warnings:
            print(f"WARNING: {warning}")
        for line in summary_lines(report):
            print(line)

    failures = gate_failures(report, args.fail_on_severity, args.fail_on_not_tested)
    if failures:
        print("GATE FAILED:", file=sys.stderr)
        for failure in failures:
            print(f"  - {failure}", file=sys.stderr)
        return EXIT_GATE_FAILED
    return EXIT_PASS


if __name__ == "__main__":
    raise SystemExit(main())
