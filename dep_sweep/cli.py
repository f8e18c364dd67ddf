"""Click CLI with the scan subcommand."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from dep_sweep import __version__
from dep_sweep.manifest import ManifestError
from dep_sweep.models import AnalysisConfig, AnalysisResult, relative_path
from dep_sweep.pipeline import run_analysis


@click.group()
@click.version_option(version=__version__)
def cli():
    """dep-sweep: Find declared dependencies nothing in the project uses."""


@cli.command()
@click.argument("project_dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.option("--verbose", "-v", is_flag=True, help="Show per-dependency usage and debug logging")
@click.option("--safe", "safe_packages", multiple=True, help="Never propose this package for removal")
@click.option("--aggressive", "-a", is_flag=True, help="Allow removing normally protected packages")
@click.option("--ignore", "-i", "ignore_patterns", multiple=True, help="Glob pattern of files to ignore")
@click.option("--progress/--no-progress", default=True, help="Show analysis progress")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def scan(
    project_dir: Path,
    verbose: bool,
    safe_packages: tuple[str, ...],
    aggressive: bool,
    ignore_patterns: tuple[str, ...],
    progress: bool,
    as_json: bool,
):
    """Analyze a project and list unused dependencies."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = AnalysisConfig(
        project_root=project_dir,
        ignore_patterns=list(ignore_patterns),
        safe_packages=list(safe_packages),
        aggressive=aggressive,
        check_sub_dependencies=verbose,
    )

    def on_progress(stage: str, dep: str, current: int, total: int):
        if total > 0:
            click.echo(f"\r  {stage}: {current}/{total} {dep}".ljust(70), nl=(current == total), err=True)

    try:
        result = run_analysis(config, progress=on_progress if progress and not as_json else None)
    except ManifestError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if verbose:
        _print_usage_table(result)

    for warning in result.warnings:
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)

    if not result.removable:
        click.echo(click.style("No unused dependencies found", fg="green"))
        return

    click.echo(click.style("\nUnused dependencies found:\n", bold=True))
    for dep in result.removable:
        click.echo(click.style(f"- {dep}", fg="yellow"))


def _print_usage_table(result: AnalysisResult) -> None:
    width = max((len(d) for d in result.dependencies), default=10) + 2
    click.echo()
    for dep in result.dependencies:
        files = result.usage.get(dep, [])
        if files:
            first, *rest = [relative_path(f, result.project_root) for f in files]
            click.echo(f"{dep:<{width}}{first}")
            for f in rest:
                click.echo(f"{'':<{width}}{f}")
            continue
        note = "Not used" if dep in result.unused else "Required by other packages"
        if dep in result.supported_by:
            note += f' (supports "{result.supported_by[dep]}")'
        if result.sub_dependency_usage.get(dep):
            note += ", sub-dependency in use"
        click.echo(f"{dep:<{width}}{click.style(note, fg='yellow')}")
    click.echo()


if __name__ == "__main__":
    cli()
