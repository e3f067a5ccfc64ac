#!/usr/bin/env python3
"""Human-readable rendering of a ComparisonReport (Markdown + console summary)."""

from __future__ import annotations

from typing import List, Optional

from ui_compare.driver_results import STATUS_NOT_TESTED, DashboardResult
from ui_compare.reconcile import ComparisonReport, ReconciliationRecord

MARKER_OK = "OK"
MARKER_WARN = "WARN"
MARKER_FIX = "FIX"
MARKER_CRITICAL = "CRITICAL"


def summary_marker(total_issues: int) -> str:
    if total_issues == 0:
        return MARKER_OK
    if total_issues < 3:
        return MARKER_WARN
    if total_issues < 6:
        return MARKER_FIX
    return MARKER_CRITICAL


def summary_lines(report: ComparisonReport) -> List[str]:
    return [
        f"{summary_marker(record.total_issues)} {record.dashboard_name}: {record.total_issues} issues found"
        for record in report.records
    ]


def side_status(result: Optional[DashboardResult]) -> str:
    return result.status if result is not None else STATUS_NOT_TESTED


def side_load_time(result: Optional[DashboardResult]) -> str:
    if result is None or result.load_time_ms is None:
        return "n/a"
    return f"{result.load_time_ms:g}ms"


def _issue_list(lines: List[str], title: str, issues) -> None:
    lines.append(f"**{title}** ({len(issues)})")
    lines.append("")
    if issues:
        for issue in issues:
            lines.append(f"- {issue}")
    else:
        lines.append("- none")
    lines.append("")


def _dashboard_section(lines: List[str], report: ComparisonReport, record: ReconciliationRecord) -> None:
    a, b = report.label_a, report.label_b
    lines.append(f"### {record.dashboard_name}")
    lines.append("")
    lines.append(f"- Severity: `{record.severity}`")
    lines.append(f"- Recommendation: {record.recommendation}")
    lines.append("")
    lines.append(f"| Metric | {a} | {b} |")
    lines.append("|---|---:|---:|")
    lines.append(f"| status | `{side_status(record.driver_a)}` | `{side_status(record.driver_b)}` |")
    lines.append(f"| load time | `{side_load_time(record.driver_a)}` | `{side_load_time(record.driver_b)}` |")
    raw_a = len(record.driver_a.issues) if record.driver_a is not None else 0
    raw_b = len(record.driver_b.issues) if record.driver_b is not None else 0
    lines.append(f"| reported issues | `{raw_a}` | `{raw_b}` |")
    lines.append("")
    _issue_list(lines, f"Found by both {a} and {b}", record.common_issues)
    _issue_list(lines, f"Only {a}", record.driver_a_only_issues)
    _issue_list(lines, f"Only {b}", record.driver_b_only_issues)


def build_report_markdown(report: ComparisonReport, run_id: str = "") -> str:
    a, b = report.label_a, report.label_b
    lines: List[str] = []
    lines.append("# UI Driver Comparison")
    lines.append("")
    if run_id:
        lines.append(f"- Run ID: `{run_id}`")
    lines.append(f"- Generated (UTC): `{report.generated_utc}`")
    lines.append(f"- Driver A: `{a}`")
    lines.append(f"- Driver B: `{b}`")
    lines.append(f"- Dashboards: `{len(report.records)}`")
    lines.append("")
    lines.append("## Overview")
    lines.append("")
    lines.append(f"| Dashboard | {a} status | {b} status | both | {a} only | {b} only | severity | recommendation |")
    lines.append("|---|---|---|---:|---:|---:|---|---|")
    for record in report.records:
        lines.append(
            f"| {record.dashboard_name} | `{side_status(record.driver_a)}` | `{side_status(record.driver_b)}` "
            f"| `{len(record.common_issues)}` | `{len(record.driver_a_only_issues)}` "
            f"| `{len(record.driver_b_only_issues)}` | `{record.severity}` | {record.recommendation} |"
        )
    lines.append("")
    lines.append("## Driver Summary")
    lines.append("")
    lines.append(f"| Metric | {a} | {b} |")
    lines.append("|---|---:|---:|")
    sa, sb = report.summary_a, report.summary_b
    lines.append(f"| dashboards expected | `{sa.total}` | `{sb.total}` |")
    lines.append(f"| passed (loaded, no issues) | `{sa.passed}` | `{sb.passed}` |")
    lines.append(f"| failed (error) | `{sa.failed}` | `{sb.failed}` |")
    lines.append(f"| redirected | `{sa.redirected}` | `{sb.redirected}` |")
    lines.append(f"| with issues | `{sa.with_issues}` | `{sb.with_issues}` |")
    lines.append(f"| not tested | `{sa.not_tested}` | `{sb.not_tested}` |")
    avg_a = f"{sa.avg_load_time_ms:g}ms" if sa.avg_load_time_ms is not None else "n/a"
    avg_b = f"{sb.avg_load_time_ms:g}ms" if sb.avg_load_time_ms is not None else "n/a"
    lines.append(f"| average load time | `{avg_a}` | `{avg_b}` |")
    lines.append("")
    lines.append("## Dashboards")
    lines.append("")
    for record in report.records:
        _dashboard_section(lines, report, record)

    lines.append("## Warnings")
    lines.append("")
    if report.warnings:
        for warning in report.warnings:
            lines.append(f"- {warning}")
    else:
        lines.append("- none")
    lines.append("")
    lines.append("## Reading This Report")
    lines.append("")
    lines.append(
        "Issues found by both drivers are the most reliable signal; fix those first. Severity counts "
        "distinct issues after matching, while the recommendation counts every issue each driver "
        "reported, so the two can disagree."
    )
    return "\n".join(lines) + "\n"
