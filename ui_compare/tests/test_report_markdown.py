import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ui_compare.driver_results import DashboardResult  # noqa: E402
from ui_compare.reconcile import compile_report  # noqa: E402
from ui_compare.report_markdown import build_report_markdown, summary_lines, summary_marker  # noqa: E402


def sample_report(warnings=()):
    results_a = {
        "Admin": DashboardResult("Admin", "loaded", ("Missing Sidebar element", "No CSS stylesheets found"), 812.0),
        "Reception": DashboardResult("Reception", "loaded", (), 95.0),
    }
    results_b = {
        "Admin": DashboardResult("Admin", "loaded", ("missing sidebar", "Page title is empty"), 640.0),
        "Reception": DashboardResult("Reception", "loaded", ()),
    }
    return compile_report(
        ["Admin", "Reception", "Phlebotomy"],
        results_a,
        results_b,
        label_a="Playwright",
        label_b="Selenium",
        warnings=warnings,
        generated_utc="2026-01-01T00:00:00+00:00",
    )


class SummaryTests(unittest.TestCase):
    def test_marker_tiers(self):
        self.assertEqual(summary_marker(0), "OK")
        self.assertEqual([summary_marker(n) for n in (1, 2)], ["WARN", "WARN"])
        self.assertEqual([summary_marker(n) for n in (3, 5)], ["FIX", "FIX"])
        self.assertEqual(summary_marker(6), "CRITICAL")

    def test_summary_lines_use_deduplicated_totals(self):
        self.assertEqual(
            summary_lines(sample_report()),
            [
                "FIX Admin: 3 issues found",
                "OK Reception: 0 issues found",
                "OK Phlebotomy: 0 issues found",
            ],
        )


class BuildReportMarkdownTests(unittest.TestCase):
    def test_report_sections(self):
        text = build_report_markdown(sample_report(), run_id="20260101_000000")
        self.assertTrue(text.startswith("# UI Driver Comparison\n"))
        self.assertIn("- Run ID: `20260101_000000`", text)
        self.assertIn("- Generated (UTC): `2026-01-01T00:00:00+00:00`", text)
        self.assertIn("| Dashboard | Playwright status | Selenium status |", text)
        self.assertIn("### Admin", text)
        self.assertIn("**Found by both Playwright and Selenium** (1)", text)
        self.assertIn("- Missing Sidebar element", text)
        self.assertIn("**Only Selenium** (1)", text)
        self.assertIn("- Page title is empty", text)
        self.assertIn("| load time | `812ms` | `640ms` |", text)
        self.assertIn("| load time | `95ms` | `n/a` |", text)
        self.assertIn("| status | `not_tested` | `not_tested` |", text)
        self.assertIn("| average load time | `453.5ms` | `640ms` |", text)
        self.assertIn("| with issues | `1` | `1` |", text)
        self.assertIn("## Warnings\n\n- none\n", text)

    def test_warnings_are_listed(self):
        text = build_report_markdown(sample_report(warnings=["[selenium] selenium-test-report.json: result file not found"]))
        self.assertIn("- [selenium] selenium-test-report.json: result file not found", text)
        self.assertNotIn("Run ID", text)


if __name__ == "__main__":
    unittest.main()
