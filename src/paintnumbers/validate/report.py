"""
Validation report generation for Paint Numbers.

Writes JSON and a human-readable summary of validation results.
"""

import os

from paintnumbers.io.save_artifacts import ensure_dir, save_json
from paintnumbers.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(report, out_dir):
    """
    Generate validation report files.

    Creates:
    - validation_report.json: Full check results
    - validation_summary.txt: Human-readable summary

    Returns (report_path, summary_path).
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report, report_path)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    ensure_dir(out_dir)
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write(format_summary(report))

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")

    return report_path, summary_path


def format_summary(report):
    """Render a ValidationReport as plain text."""
    passed = [c for c in report.checks if c.passed]
    failed = [c for c in report.checks if not c.passed]

    lines = ["Paint Numbers Validation Report", "=" * 40, ""]
    lines.append(f"Total checks: {len(report.checks)}")
    lines.append(f"Passed: {len(passed)}")
    lines.append(f"Failed: {len(failed)}")
    lines.append("")

    if failed:
        lines.append("ISSUES:")
        lines.append("-" * 40)
        for check in failed:
            lines.append(f"[{check.severity.value.upper()}] {check.rule_id}: {check.message}")
        lines.append("")

    lines.append("ALL CHECKS:")
    lines.append("-" * 40)
    for check in report.checks:
        lines.append(format_check_result(check))

    return "\n".join(lines) + "\n"


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
