import io
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ui_compare import compare_config  # noqa: E402
from ui_compare.compare_config import ConfigError, load_config, parse_config, semantic_checks  # noqa: E402

VALID_YAML = """\
dashboards:
  - Admin
  - Reception
drivers:
  a:
    name: playwright
    label: Playwright
    results: out/ui-test-report.json
  b:
    name: selenium
"""


class LoadConfigTests(unittest.TestCase):
    def write_config(self, text):
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "ui_compare.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_valid_config(self):
        config = load_config(self.write_config(VALID_YAML))
        self.assertEqual(config.dashboards, ["Admin", "Reception"])
        self.assertEqual(config.driver_a.name, "playwright")
        self.assertEqual(config.driver_a.label, "Playwright")
        self.assertEqual(config.driver_a.results, Path("out/ui-test-report.json"))
        self.assertEqual(config.driver_b.label, "driver B")
        self.assertIsNone(config.driver_b.results)

    def test_shipped_default_config(self):
        config = load_config(REPO_ROOT / "config" / "ui_compare.yaml")
        self.assertEqual(config.dashboards, ["Admin", "Reception", "Phlebotomy", "Lab-Technician"])
        self.assertEqual((config.driver_a.label, config.driver_b.label), ("Playwright", "Selenium"))

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(Path("/nonexistent/ui_compare.yaml"))

    def test_yaml_root_must_be_object(self):
        with self.assertRaisesRegex(ConfigError, "YAML root must be an object"):
            load_config(self.write_config("- Admin\n- Reception\n"))

    def test_empty_dashboard_list_fails_schema(self):
        text = VALID_YAML.replace("  - Admin\n  - Reception\n", "").replace("dashboards:\n", "dashboards: []\n")
        with self.assertRaisesRegex(ConfigError, "schema validation failed"):
            load_config(self.write_config(text))

    def test_unknown_driver_key_fails_schema(self):
        raw = {
            "dashboards": ["Admin"],
            "drivers": {"a": {"name": "playwright", "browser": "chromium"}, "b": {"name": "selenium"}},
        }
        with self.assertRaises(ConfigError):
            parse_config(raw)

    def test_duplicate_dashboards_fail_semantics(self):
        raw = {
            "dashboards": ["Admin", "Admin"],
            "drivers": {"a": {"name": "playwright"}, "b": {"name": "selenium"}},
        }
        with self.assertRaisesRegex(ConfigError, "duplicate entry: Admin"):
            parse_config(raw)

    def test_semantic_checks_flag_shared_driver_name(self):
        raw = {
            "dashboards": ["Admin"],
            "drivers": {"a": {"name": "selenium"}, "b": {"name": "selenium"}},
        }
        self.assertEqual(semantic_checks(raw), ["drivers a and b share the same name: selenium"])


class ConfigMainTests(unittest.TestCase):
    def test_main_ok_and_errors(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            good = Path(tmpdir) / "good.yaml"
            good.write_text(VALID_YAML, encoding="utf-8")
            bad = Path(tmpdir) / "bad.yaml"
            bad.write_text(VALID_YAML.replace("name: selenium", "name: playwright"), encoding="utf-8")

            with mock.patch.object(sys, "argv", ["compare_config.py", "--config", str(good)]), \
                    mock.patch("sys.stdout", new_callable=io.StringIO) as out:
                self.assertEqual(compare_config.main(), compare_config.EXIT_PASS)
            self.assertIn("2 dashboard(s)", out.getvalue())

            with mock.patch.object(sys, "argv", ["compare_config.py", "--config", str(bad)]), \
                    mock.patch("sys.stderr", new_callable=io.StringIO) as err:
                self.assertEqual(compare_config.main(), compare_config.EXIT_SEMANTIC)
            self.assertIn("share the same name", err.getvalue())

            missing = Path(tmpdir) / "missing.yaml"
            with mock.patch.object(sys, "argv", ["compare_config.py", "--config", str(missing)]), \
                    mock.patch("sys.stderr", new_callable=io.StringIO):
                self.assertEqual(compare_config.main(), compare_config.EXIT_SCHEMA_OR_PARSE)


if __name__ == "__main__":
    unittest.main()
