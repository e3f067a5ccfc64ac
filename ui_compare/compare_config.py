#!/usr/bin/env python3
"""Comparison run configuration: which dashboards to reconcile and which drivers to read.

config/ui_compare.yaml:

    dashboards: [Admin, Reception, Phlebotomy, Lab-Technician]
    drivers:
      a: {name: playwright, label: Playwright, results: ui-test-report.json}
      b: {name: selenium, label: Selenium, results: selenium-test-report.json}

Unlike driver results, a bad config is fatal: ``load_config`` raises
``ConfigError`` after YAML parsing, schema validation and semantic checks.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ui_compare.reconcile import DEFAULT_LABEL_A, DEFAULT_LABEL_B  # noqa: E402

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "compare_config.schema.json"
DEFAULT_CONFIG_PATH = "config/ui_compare.yaml"

EXIT_PASS = 0
EXIT_SCHEMA_OR_PARSE = 2
EXIT_SEMANTIC = 3


class ConfigError(RuntimeError):
    """Unusable comparison configuration."""


@dataclass
class DriverConfig:
    name: str
    label: str
    results: Optional[Path] = None


@dataclass
class CompareConfig:
    dashboards: List[str]
    driver_a: DriverConfig
    driver_b: DriverConfig


def load_yaml(path: Path) -> dict:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"failed to parse YAML {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"YAML root must be an object: {path}")

    return payload


def load_schema(path: Path = SCHEMA_PATH) -> dict:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"failed to parse schema JSON {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"schema root must be an object: {path}")

    return payload


def semantic_checks(raw: Dict[str, Any]) -> List[str]:
    findings: List[str] = []

    seen = set()
    for name in raw["dashboards"]:
        if name in seen:
            findings.append(f"dashboards contains duplicate entry: {name}")
        seen.add(name)

    drivers = raw["drivers"]
    if drivers["a"]["name"] == drivers["b"]["name"]:
        findings.append(f"drivers a and b share the same name: {drivers['a']['name']}")

    return sorted(findings)


def _driver_config(raw: Dict[str, Any], default_label: str) -> DriverConfig:
    results = raw.get("results")
    return DriverConfig(
        name=raw["name"],
        label=raw.get("label", default_label),
        results=Path(results) if results else None,
    )


def parse_config(raw: Dict[str, Any]) -> CompareConfig:
    try:
        jsonschema.validate(instance=raw, schema=load_schema())
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"config schema validation failed: {exc.message}") from exc

    findings = semantic_checks(raw)
    if findings:
        raise ConfigError("config semantic checks failed: " + "; ".join(findings))

    return CompareConfig(
        dashboards=list(raw["dashboards"]),
        driver_a=_driver_config(raw["drivers"]["a"], DEFAULT_LABEL_A),
        driver_b=_driver_config(raw["drivers"]["b"], DEFAULT_LABEL_B),
    )


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    return parse_config(load_yaml(path))


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a UI driver comparison config")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to comparison config YAML")
    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"ERROR: config file not found: {config_path}", file=sys.stderr)
        return EXIT_SCHEMA_OR_PARSE

    try:
        raw = load_yaml(config_path)
        jsonschema.validate(instance=raw, schema=load_schema())
    except Exception as exc:  # noqa: BLE001
        print(f"ERROR: config schema validation failed: {exc}", file=sys.stderr)
        return EXIT_SCHEMA_OR_PARSE

    findings = semantic_checks(raw)
    if findings:
        print("ERROR: config semantic checks failed:", file=sys.stderr)
        for finding in findings:
            print(f"  - {finding}", file=sys.stderr)
        return EXIT_SEMANTIC

    print(f"OK: {config_path} lists {len(raw['dashboards'])} dashboard(s) for drivers "
          f"{raw['drivers']['a']['name']} and {raw['drivers']['b']['name']}.")
    return EXIT_PASS


if __name__ == "__main__":
    raise SystemExit(main())
