#!/usr/bin/env python3
"""Ingestion of per-dashboard results written by the UI automation drivers.

Each driver (e.g. the Playwright suite and the Selenium suite) writes one JSON
file after it has visited every dashboard:

    {"timestamp": "...", "summary": {...},
     "results": [{"name": "Admin", "status": "loaded", "issues": [...], "loadTime": 812}]}

A plain ``{dashboard name: record}`` mapping is accepted as well. A driver that
crashed writes ``{"error": "..."}`` instead.

Nothing here is fatal. A missing or malformed collection degrades to "no
results for any dashboard" and a record that fails the structural schema is
dropped; every such decision is appended to the caller's ``warnings`` list so
the report can explain why a dashboard shows up as not tested.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jsonschema import Draft202012Validator

STATUS_LOADED = "loaded"
STATUS_REDIRECTED = "redirected"
STATUS_ERROR = "error"
STATUS_NOT_TESTED = "not_tested"

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
DRIVER_RESULT_SCHEMA = SCHEMA_DIR / "driver_result.schema.json"

# Top-level keys of a driver report that never name a dashboard.
REPORT_METADATA_KEYS = {"timestamp", "summary"}


@dataclass(frozen=True)
class DashboardResult:
    name: str
    status: str
    issues: Tuple[str, ...] = ()
    load_time_ms: Optional[float] = None
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["issues"] = list(self.issues)
        return payload


@dataclass
class DriverSummary:
    total: int = 0
    passed: int = 0
    failed: int = 0
    redirected: int = 0
    with_issues: int = 0
    not_tested: int = 0
    avg_load_time_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "redirected": self.redirected,
            "with_issues": self.with_issues,
            "not_tested": self.not_tested,
            "avg_load_time_ms": self.avg_load_time_ms,
        }


def is_not_tested(result: Optional[DashboardResult]) -> bool:
    return result is None or result.status == STATUS_NOT_TESTED


@lru_cache(maxsize=None)
def record_validator() -> Draft202012Validator:
    schema = json.loads(DRIVER_RESULT_SCHEMA.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def record_errors(record: object) -> List[str]:
    """Structural schema errors for one driver record, formatted as ``$.path: message``."""
    errors = sorted(record_validator().iter_errors(record), key=lambda e: [str(p) for p in e.path])
    out: List[str] = []
    for err in errors:
        path = "$" + ("." + ".".join(str(p) for p in err.path) if err.path else "")
        out.append(f"{path}: {err.message}")
    return out


def parse_load_time(raw: object) -> Optional[float]:
    """Convert a schema-valid ``loadTime`` to milliseconds; ValueError if it is not finite."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except OverflowError as exc:
        raise ValueError(f"loadTime {raw!r} is too large") from exc
    if not math.isfinite(value):
        raise ValueError(f"loadTime must be a finite number (got {raw!r})")
    return value


def build_result(record: Dict[str, Any]) -> DashboardResult:
    return DashboardResult(
        name=record["name"],
        status=record["status"],
        issues=tuple(record["issues"]),
        load_time_ms=parse_load_time(record.get("loadTime")),
        url=str(record.get("url", "")),
    )


def _iter_records(payload: Dict[str, Any], source: str, warnings: List[str]) -> List[Tuple[str, object]]:
    if "results" in payload:
        results = payload["results"]
        if not isinstance(results, list):
            warnings.append(f"{source}: 'results' must be a list (got {type(results).__name__}); no results used")
            return []
        items: List[Tuple[str, object]] = []
        for idx, record in enumerate(results):
            key = record.get("name") if isinstance(record, dict) else None
            items.append((key if isinstance(key, str) and key else f"results[{idx}]", record))
        return items

    if "error" in payload:
        warnings.append(f"{source}: driver reported failure: {payload['error']}")
        return []

    items = []
    for key, record in payload.items():
        if key in REPORT_METADATA_KEYS:
            continue
        if isinstance(record, dict):
            if record.get("name", key) != key:
                warnings.append(f"{source}: record under {key!r} names {record['name']!r}; filing it under the key")
            record = {**record, "name": key}
        items.append((str(key), record))
    return items


def parse_driver_payload(payload: object, source: str, warnings: List[str]) -> Dict[str, DashboardResult]:
    """Index one driver's decoded result payload by dashboard name."""
    if not isinstance(payload, dict):
        warnings.append(f"{source}: result root must be an object (got {type(payload).__name__}); no results used")
        return {}

    collected: Dict[str, DashboardResult] = {}
    for key, record in _iter_records(payload, source, warnings):
        errors = record_errors(record)
        if errors:
            warnings.append(f"{source}: skipping malformed record {key!r}: {'; '.join(errors)}")
            continue
        try:
            result = build_result(record)
        except ValueError as exc:
            warnings.append(f"{source}: skipping malformed record {key!r}: {exc}")
            continue
        if result.name in collected:
            warnings.append(f"{source}: duplicate record for {result.name!r}; keeping the first one")
            continue
        collected[result.name] = result
    return collected


def load_driver_results(path: Optional[Path], warnings: List[str]) -> Dict[str, DashboardResult]:
    if path is None:
        warnings.append("no result file configured for driver; no results used")
        return {}
    if not path.exists() or not path.is_file():
        warnings.append(f"{path}: result file not found; no results used")
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        warnings.append(f"{path}: unreadable result file ({exc}); no results used")
        return {}
    return parse_driver_payload(payload, str(path), warnings)


def pair_dashboard_results(
    dashboards: Sequence[str],
    results_a: Dict[str, DashboardResult],
    results_b: Dict[str, DashboardResult],
) -> List[Tuple[str, Optional[DashboardResult], Optional[DashboardResult]]]:
    """Line both drivers up against the expected dashboard list; absent means not tested."""
    return [(name, results_a.get(name), results_b.get(name)) for name in dashboards]


def summarize_driver(dashboards: Sequence[str], results: Dict[str, DashboardResult]) -> DriverSummary:
    summary = DriverSummary(total=len(dashboards))
    load_times: List[float] = []
    for name in dashboards:
        result = results.get(name)
        if result is None or result.status == STATUS_NOT_TESTED:
            summary.not_tested += 1
            continue
        if result.status == STATUS_LOADED and not result.issues:
            summary.passed += 1
        elif result.status == STATUS_ERROR:
            summary.failed += 1
        elif result.status == STATUS_REDIRECTED:
            summary.redirected += 1
        if result.issues:
            summary.with_issues += 1
        if result.load_time_ms is not None:
            load_times.append(result.load_time_ms)
    if load_times:
        summary.avg_load_time_ms = round(sum(load_times) / len(load_times), 1)
    return summary
