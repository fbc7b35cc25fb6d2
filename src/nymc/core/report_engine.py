"""Report generation for malware scan results"""

import json
import os
from pathlib import Path
from typing import List, Optional

import click

from .models import ScanRecord


class ReportEngine:
    """
    Collects scan records and renders them

    Supports:
    - Console output with colored formatting, one line per identifier
    - JSON export with optional relative paths
    - Exit status derived from the records
    """

    def __init__(self, project_root: Optional[str] = None, package_manager: Optional[str] = None):
        """
        Initialize report engine

        Args:
            project_root: Root directory that was scanned
            package_manager: Detected package manager name, shown in the report
        """
        self.project_root = Path(project_root) if project_root else None
        self.package_manager = package_manager
        # "." gives relative paths in saved reports, any other value replaces the root
        self.path_prefix = os.environ.get('SCAN_PATH_PREFIX', None)
        self.records: List[ScanRecord] = []

    def add_record(self, record: ScanRecord):
        """Add a single record"""
        self.records.append(record)

    def add_records(self, records: List[ScanRecord]):
        """Add multiple records"""
        self.records.extend(records)

    def get_positive_records(self) -> List[ScanRecord]:
        return [r for r in self.records if r.is_positive]

    def malware_found(self) -> bool:
        return any(r.is_positive for r in self.records)

    def exit_code(self) -> int:
        """0 when every record is clean, 1 otherwise"""
        return 1 if self.malware_found() else 0

    @staticmethod
    def format_record(record: ScanRecord) -> str:
        """Plain one-line verdict for a record"""
        if record.is_positive:
            return f"{record.identifier}: MALWARE DETECTED — found in {', '.join(record.sources())}"
        return f"{record.identifier}: clean"

    def format_summary(self) -> str:
        outcome = "malware found" if self.malware_found() else "all clean"
        return f"Scanned {len(self.records)} package(s): {outcome}"

    def _format_path(self, path: Path) -> str:
        """
        Format the project root for the JSON report using SCAN_PATH_PREFIX

        If SCAN_PATH_PREFIX is set:
        - "." -> relative path (".")
        - any other value -> that value replaces the root
        - not set -> absolute path as-is
        """
        if not self.path_prefix:
            return str(path)

        if self.path_prefix == ".":
            return "."

        return str(Path(self.path_prefix))

    def print_report(self):
        """Print formatted console report"""
        click.echo("\n" + click.style("=" * 80, fg='white', bold=True))
        click.echo(click.style("SCAN RESULTS", fg='white', bold=True))
        click.echo(click.style("=" * 80, fg='white', bold=True))

        if self.package_manager:
            click.echo(click.style(f"Package manager: {self.package_manager}", fg='cyan'))
        click.echo()

        for record in self.records:
            if record.is_positive:
                click.echo(click.style(self.format_record(record), fg='red', bold=True))
            else:
                click.echo(click.style(self.format_record(record), fg='green'))

            for caveat in record.caveats:
                click.echo(click.style(f"  note: {caveat}", fg='yellow', dim=True))

        click.echo()
        summary_color = 'red' if self.malware_found() else 'green'
        click.echo(click.style(self.format_summary(), fg=summary_color, bold=True))

        if self.malware_found():
            click.echo("\n" + click.style("Next Steps:", fg='cyan', bold=True))
            click.echo(click.style("   1.", fg='cyan') + " Remove or replace the packages listed above")
            click.echo(click.style("   2.", fg='cyan') + " Regenerate the lock file and reinstall node_modules")
            click.echo(click.style("   3.", fg='cyan') + " Rotate any credentials the affected machines could reach")

        click.echo()

    def save_report(self, output_file: str) -> bool:
        """
        Save records to JSON file

        Args:
            output_file: Path to output file

        Returns:
            True if saved successfully, False otherwise
        """
        report = {
            'project_root': self._format_path(self.project_root) if self.project_root else None,
            'package_manager': self.package_manager,
            'total_packages': len(self.records),
            'detected': len(self.get_positive_records()),
            'malware_found': self.malware_found(),
            'results': [record.to_dict() for record in self.records],
        }

        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2)
            return True

        except OSError as e:
            click.echo(click.style(f"✗ Error saving report: {e}", fg='red', bold=True), err=True)
            return False
