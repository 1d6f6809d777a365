"""
Reporter - Render interface discrepancies in various formats.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .comparator import CheckResult, Discrepancy, DiscrepancyType


@dataclass
class ReportConfig:
    """Configuration for report generation."""
    include_trace: bool = False


class TextReporter:
    """Plain Actual/Readme pairs, one block per discrepancy."""

    def generate(self, check: CheckResult) -> str:
        lines: List[str] = []
        for d in check.result.discrepancies:
            actual = d.actual.render() if d.actual else ""
            documented = d.documented.render() if d.documented else ""
            lines.append(f"Actual: {actual}")
            lines.append(f"Readme: {documented}")
            lines.append("")
        return "\n".join(lines) + ("\n" if lines else "")


class JSONReporter:
    """Generate JSON reports."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def generate(self, check: CheckResult) -> str:
        data = check.result.to_dict()
        report = {
            'interface': check.interface_name,
            'source': check.source_path,
            'readme': check.doc_path,
            'ok': check.ok,
            'summary': data['summary'],
            'discrepancies': data['discrepancies'],
        }
        report['stats'] = data['stats']
        if self.config.include_trace:
            report['trace'] = check.trace.to_dict()
        return json.dumps(report, indent=2) + "\n"


class GithubActionsReporter:
    """Generate GitHub Actions annotations."""

    MESSAGES = {
        DiscrepancyType.MISMATCH: "{name}: README shows {documented}, code declares {actual}",
        DiscrepancyType.MISSING_FROM_DOCS: "{name}: {actual} is missing from the README",
        DiscrepancyType.MISSING_FROM_SOURCE: "{name}: README documents {documented}, which is not in the code",
    }

    def generate(self, check: CheckResult) -> str:
        lines = []

        for d in check.result.discrepancies:
            file, line = self._location(check, d)
            message = self.MESSAGES[d.kind].format(
                name=d.method,
                actual=d.actual.render() if d.actual else "",
                documented=d.documented.render() if d.documented else "",
            )
            lines.append(f"::error file={file},line={line}::{message.replace(chr(10), '%0A')}")

        summary = check.result.to_dict()['summary']
        lines.append("")
        lines.append(f"::group::Interface {check.interface_name} Summary")
        lines.append(f"Total discrepancies: {summary['total']}")
        lines.append(f"Mismatched: {summary['mismatch']}")
        lines.append(f"Missing from README: {summary['missing_from_docs']}")
        lines.append(f"Missing from code: {summary['missing_from_source']}")
        lines.append("::endgroup::")

        return "\n".join(lines) + "\n"

    def _location(self, check: CheckResult, d: Discrepancy):
        if d.kind == DiscrepancyType.MISSING_FROM_SOURCE:
            return check.doc_path, (d.documented.line if d.documented else 0) or 1
        return check.source_path, (d.actual.line if d.actual else 0) or 1


class Reporter:
    """Main reporter that dispatches to format-specific reporters."""

    FORMATS = ("text", "json", "github")

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()
        self.text = TextReporter()
        self.json = JSONReporter(self.config)
        self.github = GithubActionsReporter()

    def generate(self, check: CheckResult, format: str = "text") -> str:
        """Generate a report in the specified format."""
        if format == "text":
            return self.text.generate(check)
        elif format == "json":
            return self.json.generate(check)
        elif format == "github":
            return self.github.generate(check)
        else:
            raise ValueError(f"Unknown format: {format}")

    def write(self, check: CheckResult, output: Path, format: str = "text") -> None:
        """Write report to a file."""
        output.write_text(self.generate(check, format), encoding='utf-8')
