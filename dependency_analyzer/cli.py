"""CLI entry point: dep-analyze.

Subcommands:
    dep-analyze analyze -i /path/to/project -o out/    # Analyze and write all-dependencies.yml
    dep-analyze list-managers                          # Show supported package managers
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from dependency_analyzer.analyzer import Analyzer
from dependency_analyzer.config import AnalyzerConfiguration, AnalyzerSettings
from dependency_analyzer.core.logging import LOG_FORMATS, setup_logging
from dependency_analyzer.curation.provider import (
    NoCurationProvider,
    PackageCurationProvider,
    YamlFilePackageCurationProvider,
)
from dependency_analyzer.exceptions import AnalyzerError
from dependency_analyzer.managers.registry import create_default_registry
from dependency_analyzer.output import OutputFormat, write_result

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "running": "~",
}


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format", type=click.Choice(LOG_FORMATS), default=None,
    help="Log output format (default: DEP_ANALYZER_LOG_FORMAT or console).",
)
def main(verbose: bool, log_format: str | None) -> None:
    """Dependency analyzer: resolve the dependencies of a project tree."""
    try:
        setup_logging("DEBUG" if verbose else None, log_format)
    except ValueError as e:
        raise click.UsageError(str(e))


@main.command("analyze")
@click.option(
    "-i", "--input-dir", required=True, type=click.Path(exists=True, path_type=Path),
    help="The project directory to scan (or a single definition file with one package manager).",
)
@click.option(
    "-o", "--output-dir", required=True, type=click.Path(path_type=Path),
    help="The directory to write dependency information to. Must not exist yet.",
)
@click.option(
    "-f", "--output-formats", multiple=True, default=("yaml",),
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    help="Output formats for the result file(s).",
)
@click.option(
    "-m", "--package-managers", multiple=True,
    help="Package managers to activate (default: all). Repeat for several.",
)
@click.option(
    "--package-curations-file", default=None, type=click.Path(exists=True, path_type=Path),
    help="A YAML file that contains package curation data.",
)
@click.option(
    "--allow-dynamic-versions", is_flag=True,
    help="Allow dependencies that are not pinned to an exact version.",
)
@click.option(
    "--ignore-tool-versions", is_flag=True,
    help="Ignore versions of required tools. NOTE: This may lead to erroneous results.",
)
@click.option("--timeout", type=float, default=None, help="Timeout per package manager in seconds.")
@click.option("--max-workers", type=int, default=None, help="Package managers resolved in parallel.")
def analyze(
    input_dir: Path,
    output_dir: Path,
    output_formats: tuple[str, ...],
    package_managers: tuple[str, ...],
    package_curations_file: Path | None,
    allow_dynamic_versions: bool,
    ignore_tool_versions: bool,
    timeout: float | None,
    max_workers: int | None,
) -> None:
    """Analyze the dependencies of the project in the input directory."""
    absolute_output = output_dir.absolute()
    if absolute_output.exists():
        click.echo(f"Error: The output directory '{absolute_output}' must not exist yet.", err=True)
        sys.exit(1)

    registry = create_default_registry()
    try:
        managers = (
            [registry.require(name) for name in package_managers]
            if package_managers
            else registry.list_all()
        )
    except AnalyzerError as e:
        raise click.BadParameter(str(e), param_hint="'--package-managers'")

    env_config = AnalyzerConfiguration.from_env()
    config = AnalyzerConfiguration(
        ignore_tool_versions=ignore_tool_versions or env_config.ignore_tool_versions,
        allow_dynamic_versions=allow_dynamic_versions or env_config.allow_dynamic_versions,
    )
    env_settings = AnalyzerSettings.from_env()
    settings = AnalyzerSettings(
        resolution_timeout=timeout if timeout is not None else env_settings.resolution_timeout,
        max_workers=max_workers if max_workers is not None else env_settings.max_workers,
    )

    click.echo("The following package managers are activated:")
    click.echo("\t" + ", ".join(m.name for m in managers))
    absolute_input = input_dir.absolute()
    click.echo(f"Scanning project path:\n\t{absolute_input}")

    try:
        provider: PackageCurationProvider = (
            YamlFilePackageCurationProvider(package_curations_file)
            if package_curations_file
            else NoCurationProvider()
        )
        analyzer = Analyzer(
            config=config, registry=registry, curation_provider=provider, settings=settings
        )
        result = analyzer.analyze(absolute_input, managers)
    except AnalyzerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    formats = [OutputFormat(f.lower()) for f in output_formats]
    try:
        written = write_result(result, absolute_output, formats)
    except AnalyzerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    for output_file in written:
        click.echo(f"Writing analyzer result to '{output_file}'.")

    summary = analyzer.progress.summary()
    click.echo(f"\nAnalysis summary (total: {summary['total_duration']}s):")
    for p in summary["phases"]:
        status_icon = _STATUS_ICONS.get(p["status"], "?")
        duration = f" ({p['duration']}s)" if p["duration"] else ""
        detail = f" - {p['detail']}" if p["detail"] else ""
        error = f" ERROR: {p['error']}" if p["error"] else ""
        click.echo(f"  [{status_icon}] {p['phase']}{duration}{detail}{error}")

    errors = result.collect_errors()
    if errors:
        click.echo(f"\nFound errors for {len(errors)} identifier(s):")
        for pkg_id, messages in errors.items():
            click.echo(f"  {pkg_id}")
            for message in messages:
                click.echo(f"    - {message}")


@main.command("list-managers")
def list_managers() -> None:
    """Show the supported package managers and their definition files."""
    for desc in create_default_registry().list_all():
        click.echo(f"  {desc.name:10s}  {desc.primary_language:12s}  {', '.join(desc.definition_files)}")


if __name__ == "__main__":
    main()
