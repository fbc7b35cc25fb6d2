#!/usr/bin/env python3
"""
npm malware checker

Checks a project for known-malicious package versions listed in
.nymc/config.json (or fetched from the configured URL)

CLI usage:
    nymc --init                # create .nymc/config.json
    nymc                       # scan using the local package list
    nymc --network             # scan using the remote package list
    nymc --dir path/to/project --output report.json
"""

import os
import sys
from typing import Optional

import click

from nymc.core import NymcError, ReportEngine, validate_packages
from nymc.core.config import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    config_exists,
    create_config,
    load_packages,
    read_config,
)
from nymc.detectors.dependency_tree import DEFAULT_TIMEOUT
from nymc.project import detect_package_manager, find_project_root
from nymc.scanner import ScanProgress, Scanner


CONFIG_DISPLAY_PATH = f"{CONFIG_DIR_NAME}/{CONFIG_FILE_NAME}"


def fail(message: str):
    """Print a fatal diagnostic and exit with status 1"""
    click.echo(click.style(f"✗ Error: {message}", fg='red', bold=True))
    sys.exit(1)


@click.command(name="nymc", help="Scan an npm/yarn project for known-malicious package versions")
@click.option(
    "--init",
    "init",
    is_flag=True,
    help=f"(Re)create {CONFIG_DISPLAY_PATH} and exit",
)
@click.option(
    "--network",
    is_flag=True,
    help="Fetch the package list from the configured url instead of using the local list",
)
@click.option(
    "--dir",
    "start_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=str),
    default=lambda: os.getcwd(),
    show_default="current working directory",
    help="Directory to start project root discovery from",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    envvar="NYMC_TIMEOUT",
    show_default=True,
    help="Seconds to wait for the dependency tree command",
)
@click.option(
    "--parallel",
    is_flag=True,
    help="Run the dependency tree checks for all packages concurrently",
)
@click.option(
    "--semver-ranges",
    is_flag=True,
    help="Also flag package.json ranges that include a malicious version",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(writable=True, dir_okay=False, path_type=str),
    default=None,
    help="Also write the results as JSON to this file",
)
def cli(
    init: bool,
    network: bool,
    start_dir: str,
    timeout: float,
    parallel: bool,
    semver_ranges: bool,
    output_file: Optional[str],
):
    """npm malware checker CLI"""
    project_root = find_project_root(start_dir)

    if init:
        try:
            create_config(project_root, force=True)
        except (NymcError, OSError) as e:
            fail(str(e))
        click.echo(f"Please add your packages to the packages array in {CONFIG_DISPLAY_PATH}")
        sys.exit(0)

    if not config_exists(project_root):
        click.echo(click.style(
            "Config not found. Run 'nymc --init' to create it.", fg='red', bold=True))
        sys.exit(1)

    click.echo(click.style("=" * 80, fg='cyan', bold=True))
    click.echo(click.style("🛡️  npm malware checker", fg='cyan', bold=True))
    click.echo(click.style("=" * 80, fg='cyan', bold=True))
    click.echo(f"\n{click.style('Project Root:', bold=True)} {project_root}")

    try:
        config = read_config(project_root)
        identifiers = validate_packages(load_packages(config, use_network=network))

        source = config.url if network else CONFIG_DISPLAY_PATH
        click.echo(f"{click.style('Package List:', bold=True)} {source} ({len(identifiers)} package(s))")

        if not identifiers:
            click.echo(click.style(
                f"⚠️  Warning: No packages configured. Add entries to the packages array in {CONFIG_DISPLAY_PATH}",
                fg='yellow'), err=True)

        package_manager = detect_package_manager(project_root)
        click.echo(f"{click.style('Package Manager:', bold=True)} {package_manager.value}\n")

        scanner = Scanner(
            project_root,
            package_manager,
            parallel=parallel,
            progress=ScanProgress(),
            timeout=timeout,
            semver_ranges=semver_ranges,
        )
        records = scanner.run(identifiers)

    except NymcError as e:
        fail(str(e))

    report_engine = ReportEngine(project_root=str(project_root), package_manager=package_manager.value)
    report_engine.add_records(records)
    report_engine.print_report()

    if output_file:
        absolute_output = os.path.abspath(output_file)
        if report_engine.save_report(absolute_output):
            click.echo(click.style(f"✓ Report saved to: {absolute_output}", fg='green', bold=True))

    sys.exit(report_engine.exit_code())


if __name__ == "__main__":
    cli()
