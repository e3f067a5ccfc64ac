#!/usr/bin/env python3
"""
ui_compare/validate_comparison_report.py

Contract check for a written comparison report.json.

Validates:
  - JSONSchema (Draft 2020-12)
  - dashboard_order matches the dashboards object
  - issue totals and severity tiers agree with the issue lists
  - every reconciled issue traces back to the driver that reported it
  - optionally, the dashboard set equals the configured list (--config)

Usage:
  python ui_compare/validate_comparison_report.py --file artifacts/ui_compare/<run_id>/report.json
  python ui_compare/validate_comparison_report.py --file report.json --config config/ui_compare.yaml --quiet

Exit codes:
  0 = OK
  1 = Validation failed
  2 = Setup error (missing files, bad args, unreadable config)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from jsonschema import Draft202012Validator

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ui_compare.compare_config import ConfigError, load_config  # noqa: E402
from ui_compare.driver_results import STATUS_NOT_TESTED  # noqa: E402
from ui_compare.reconcile import classify_severity  # noqa: E402

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "comparison_report.schema.json"


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def load_json_file(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def validate_schema(instance: Any, schema: dict[str, Any]) -> list[str]:
    """Validate against JSONSchema. Returns list of errors (empty = OK)."""
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])

    out: list[str] = []
    for err in errors:
        path = "$" + ("." + ".".join(str(p) for p in err.path) if err.path else "")
        out.append(f"[SCHEMA] {path}: {err.message}")
    return out


def _side_issues(side: dict[str, Any]) -> list[str]:
    if side.get("status") == STATUS_NOT_TESTED:
        return []
    return list(side.get("issues", []))


def check_report_invariants(report: dict[str, Any], expected_dashboards: Optional[Sequence[str]] = None) -> list[str]:
    """
    Check report invariants that JSONSchema cannot express. Assumes the report
    already passed schema validation.
    """
    errs: list[str] = []
    dashboards = report["dashboards"]
    order = report["dashboard_order"]

    # 1. Order list and dashboards object describe the same set
    if len(set(order)) != len(order):
        errs.append("[ORDER] dashboard_order contains duplicates")
    if set(order) != set(dashboards):
        errs.append(
            f"[ORDER] dashboard_order {sorted(set(order))} does not match dashboards {sorted(dashboards)}"
        )

    # 2. Configured dashboard list
    if expected_dashboards is not None and list(order) != list(expected_dashboards):
        errs.append(f"[CONFIG] dashboards {list(order)} do not match configured list {list(expected_dashboards)}")

    for name in order:
        record = dashboards.get(name)
        if record is None:
            continue
        issues = record["issues"]
        common = issues["common"]
        a_only = issues["driver_a_only"]
        b_only = issues["driver_b_only"]
        total = len(common) + len(a_only) + len(b_only)

        # 3. Totals and severity
        if issues["total"] != total:
            errs.append(f"[TOTAL] {name}: total={issues['total']} but issue lists hold {total}")
        expected_severity = classify_severity(total)
        if issues["severity"] != expected_severity:
            errs.append(
                f"[SEVERITY] {name}: severity '{issues['severity']}' should be '{expected_severity}' for {total} issue(s)"
            )

        # 4. Provenance
        reported_a = _side_issues(record["driver_a"])
        reported_b = _side_issues(record["driver_b"])
        if common and (not reported_a or not reported_b):
            errs.append(f"[NOT-TESTED] {name}: common issues present while a driver has no result")
        stray_a = [i for i in common + a_only if i not in reported_a]
        if stray_a:
            errs.append(f"[PROVENANCE] {name}: issues not reported by driver A: {stray_a}")
        stray_b = [i for i in b_only if i not in reported_b]
        if stray_b:
            errs.append(f"[PROVENANCE] {name}: issues not reported by driver B: {stray_b}")
        if len(common) + len(a_only) != len(reported_a):
            errs.append(f"[PARTITION] {name}: driver A issues are not fully partitioned into common/driver_a_only")

    return errs


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Validate a UI driver comparison report.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --file artifacts/ui_compare/20260101_120000/report.json
  %(prog)s --file report.json --config config/ui_compare.yaml --quiet
""",
    )
    ap.add_argument("--file", required=True, help="Comparison report JSON to validate")
    ap.add_argument(
        "--schema",
        default=str(SCHEMA_PATH),
        help="Path to JSONSchema (default: bundled comparison_report schema)",
    )
    ap.add_argument("--config", default="", help="Optional comparison config; require its dashboard list")
    ap.add_argument("--quiet", action="store_true", help="Quiet mode: no output, exit code only")
    args = ap.parse_args(argv)

    schema_path = Path(args.schema)
    report_path = Path(args.file)
    if not schema_path.exists():
        if not args.quiet:
            eprint(f"Error: schema not found: {schema_path}")
        return 2
    if not report_path.exists():
        if not args.quiet:
            eprint(f"Error: report not found: {report_path}")
        return 2

    expected: Optional[List[str]] = None
    if args.config:
        try:
            expected = load_config(Path(args.config)).dashboards
        except ConfigError as ex:
            if not args.quiet:
                eprint(f"Error loading config: {ex}")
            return 2

    try:
        schema = load_json_file(schema_path)
        report = load_json_file(report_path)
    except Exception as ex:  # noqa: BLE001
        if not args.quiet:
            eprint(f"Error loading schema/report: {ex}")
        return 2

    errors = validate_schema(report, schema)
    if not errors:
        errors.extend(check_report_invariants(report, expected))

    if errors:
        if not args.quiet:
            eprint(f"VALIDATION FAILED: {report_path}")
            eprint(f"  {len(errors)} error(s):")
            for msg in errors:
                eprint(f"  - {msg}")
        return 1

    if not args.quiet:
        print(f"VALIDATION OK: {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
