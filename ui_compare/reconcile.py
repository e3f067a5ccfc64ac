#!/usr/bin/env python3
"""Reconcile two drivers' findings per dashboard into one comparison report.

For every expected dashboard:
- partition the issue lists into found-by-both / driver-A-only / driver-B-only
- classify severity from the deduplicated total of those three lists
- derive a recommendation from driver availability and the raw issue counts

Severity and recommendation count differently (deduplicated vs raw
sum) and may disagree for the same dashboard. Keep both calculations separate.

Matching is many-to-one: a single driver-B issue can satisfy several driver-A
issues, each of which lands in ``common_issues``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ui_compare.driver_results import (
    STATUS_NOT_TESTED,
    DashboardResult,
    DriverSummary,
    is_not_tested,
    pair_dashboard_results,
    summarize_driver,
)
from ui_compare.issue_matcher import issues_similar

SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_ORDER = (SEVERITY_LOW, SEVERITY_MEDIUM, SEVERITY_HIGH)

DEFAULT_LABEL_A = "driver A"
DEFAULT_LABEL_B = "driver B"

RECOMMEND_BOTH_FAILED = "both tests failed — server or configuration issue."
RECOMMEND_A_FAILED = "{label} test failed — check its configuration."
RECOMMEND_B_FAILED = "{label} test failed — check its setup."
RECOMMEND_WORKING = "working correctly"
RECOMMEND_MINOR = "minor issues — needs attention"
RECOMMEND_MODERATE = "moderate issues — requires fixes"
RECOMMEND_MAJOR = "major issues — needs complete revamp"


@dataclass(frozen=True)
class IssueComparison:
    common: Tuple[str, ...]
    driver_a_only: Tuple[str, ...]
    driver_b_only: Tuple[str, ...]

    @property
    def total(self) -> int:
        return len(self.common) + len(self.driver_a_only) + len(self.driver_b_only)


@dataclass(frozen=True)
class ReconciliationRecord:
    dashboard_name: str
    driver_a: Optional[DashboardResult]
    driver_b: Optional[DashboardResult]
    common_issues: Tuple[str, ...]
    driver_a_only_issues: Tuple[str, ...]
    driver_b_only_issues: Tuple[str, ...]
    severity: str
    recommendation: str

    @property
    def total_issues(self) -> int:
        return len(self.common_issues) + len(self.driver_a_only_issues) + len(self.driver_b_only_issues)


@dataclass(frozen=True)
class ComparisonReport:
    generated_utc: str
    label_a: str
    label_b: str
    records: Tuple[ReconciliationRecord, ...]
    summary_a: DriverSummary
    summary_b: DriverSummary
    warnings: Tuple[str, ...] = ()

    @property
    def dashboards(self) -> Dict[str, ReconciliationRecord]:
        return {record.dashboard_name: record for record in self.records}


def _issues_of(result: Optional[DashboardResult]) -> Sequence[str]:
    if result is None or result.status == STATUS_NOT_TESTED:
        return ()
    return result.issues


def reconcile_issues(issues_a: Sequence[str], issues_b: Sequence[str]) -> IssueComparison:
    common: List[str] = []
    a_only: List[str] = []
    for issue_a in issues_a:
        if any(issues_similar(issue_a, issue_b) for issue_b in issues_b):
            common.append(issue_a)
        else:
            a_only.append(issue_a)

    b_only = [
        issue_b
        for issue_b in issues_b
        if not any(issues_similar(issue_a, issue_b) for issue_a in issues_a)
    ]
    return IssueComparison(common=tuple(common), driver_a_only=tuple(a_only), driver_b_only=tuple(b_only))


def classify_severity(total_issues: int) -> str:
    if total_issues > 5:
        return SEVERITY_HIGH
    if total_issues > 2:
        return SEVERITY_MEDIUM
    return SEVERITY_LOW


def severity_rank(severity: str) -> int:
    return SEVERITY_ORDER.index(severity)


def generate_recommendation(
    result_a: Optional[DashboardResult],
    result_b: Optional[DashboardResult],
    label_a: str = DEFAULT_LABEL_A,
    label_b: str = DEFAULT_LABEL_B,
) -> str:
    missing_a = is_not_tested(result_a)
    missing_b = is_not_tested(result_b)
    if missing_a and missing_b:
        return RECOMMEND_BOTH_FAILED
    if missing_a:
        return RECOMMEND_A_FAILED.format(label=label_a)
    if missing_b:
        return RECOMMEND_B_FAILED.format(label=label_b)

    # Raw counts, not the deduplicated total used for severity.
    total_issues = len(_issues_of(result_a)) + len(_issues_of(result_b))
    if total_issues == 0:
        return RECOMMEND_WORKING
    if total_issues < 3:
        return RECOMMEND_MINOR
    if total_issues < 6:
        return RECOMMEND_MODERATE
    return RECOMMEND_MAJOR


def reconcile_dashboard(
    name: str,
    result_a: Optional[DashboardResult],
    result_b: Optional[DashboardResult],
    label_a: str = DEFAULT_LABEL_A,
    label_b: str = DEFAULT_LABEL_B,
) -> ReconciliationRecord:
    comparison = reconcile_issues(_issues_of(result_a), _issues_of(result_b))
    return ReconciliationRecord(
        dashboard_name=name,
        driver_a=result_a,
        driver_b=result_b,
        common_issues=comparison.common,
        driver_a_only_issues=comparison.driver_a_only,
        driver_b_only_issues=comparison.driver_b_only,
        severity=classify_severity(comparison.total),
        recommendation=generate_recommendation(result_a, result_b, label_a, label_b),
    )


def compile_report(
    dashboards: Sequence[str],
    results_a: Dict[str, DashboardResult],
    results_b: Dict[str, DashboardResult],
    label_a: str = DEFAULT_LABEL_A,
    label_b: str = DEFAULT_LABEL_B,
    warnings: Sequence[str] = (),
    generated_utc: Optional[str] = None,
) -> ComparisonReport:
    """Reconcile every expected dashboard, in list order, into one report.

    The dashboard set comes from ``dashboards`` only; a name missing from both
    result collections still gets a record with both sides not tested, and
    result records for names outside the list are ignored.
    """
    records = tuple(
        reconcile_dashboard(name, result_a, result_b, label_a, label_b)
        for name, result_a, result_b in pair_dashboard_results(dashboards, results_a, results_b)
    )
    return ComparisonReport(
        generated_utc=generated_utc or datetime.now(timezone.utc).isoformat(),
        label_a=label_a,
        label_b=label_b,
        records=records,
        summary_a=summarize_driver(dashboards, results_a),
        summary_b=summarize_driver(dashboards, results_b),
        warnings=tuple(warnings),
    )


def side_to_dict(result: Optional[DashboardResult]) -> Dict[str, Any]:
    if result is None:
        return {"status": STATUS_NOT_TESTED}
    return result.to_dict()


def record_to_dict(record: ReconciliationRecord) -> Dict[str, Any]:
    return {
        "driver_a": side_to_dict(record.driver_a),
        "driver_b": side_to_dict(record.driver_b),
        "issues": {
            "common": list(record.common_issues),
            "driver_a_only": list(record.driver_a_only_issues),
            "driver_b_only": list(record.driver_b_only_issues),
            "severity": record.severity,
            "total": record.total_issues,
        },
        "recommendation": record.recommendation,
    }


def report_to_dict(
    report: ComparisonReport,
    run_id: str = "",
    driver_names: Tuple[str, str] = ("a", "b"),
) -> Dict[str, Any]:
    return {
        "generated_utc": report.generated_utc,
        "run_id": run_id,
        "drivers": {
            "a": {"name": driver_names[0], "label": report.label_a},
            "b": {"name": driver_names[1], "label": report.label_b},
        },
        "dashboard_order": [record.dashboard_name for record in report.records],
        "dashboards": {record.dashboard_name: record_to_dict(record) for record in report.records},
        "driver_summaries": {
            "a": report.summary_a.to_dict(),
            "b": report.summary_b.to_dict(),
        },
        "warnings": list(report.warnings),
    }
