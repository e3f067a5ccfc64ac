# ui_compare -- reconciliation of two UI automation drivers' dashboard findings.
#
# ENTRY POINTS:
#   python -m ui_compare.compare_drivers --config config/ui_compare.yaml
#   python -m ui_compare.validate_comparison_report --file <run_dir>/report.json
#   python -m ui_compare.compare_config --config config/ui_compare.yaml
