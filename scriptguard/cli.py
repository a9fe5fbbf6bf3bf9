"""
cli.py - Command-line interface for scriptguard

This module provides the command-line interface for scanning GitHub Actions
workflows for script injections and printing the patches that fix them.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .core import ConfigurationError, Finding, generate_default_config, load_config, scan_repository
from .patch import generate_patch_result, list_patterns, remediate
from .reports import (
    format_console_report,
    generate_json_report,
    print_console_report,
    save_json_report,
)
from .utils.file_handler import patch_file_name, read_text, write_text
from .utils.version import __version__

OUTPUT_FORMATS = ["text", "json"]


def _configure_logging(config: Dict[str, Any], verbose: bool) -> None:
    level = "DEBUG" if verbose else str(config.get("log_level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config_or_exit(config: Optional[str]) -> Dict[str, Any]:
    if config and not Path(config).exists():
        click.echo(f"Error loading config file: {config} not found", err=True)
        sys.exit(1)
    try:
        return load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config file: {e}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """scriptguard - GitHub Actions script injection fixer

    Finds untrusted ${{ }} expressions used directly in run: commands and
    generates patches that move them into environment variables.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("repo_path", type=click.Path())
@click.option("--config", type=click.Path(), help="Path to YAML config file")
@click.option(
    "--output",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    help="Output format for results",
)
@click.option(
    "--output-file",
    type=click.Path(dir_okay=False),
    help="Write output to file instead of stdout",
)
@click.option(
    "--patch-dir",
    type=click.Path(file_okay=False),
    help="Also write every patch to its own .diff file in this directory",
)
@click.option("--no-patches", is_flag=True, help="List findings without printing diffs")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", is_flag=True, help="Log why patches could not be generated")
def scan(
    repo_path: str,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    patch_dir: Optional[str],
    no_patches: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Scan workflows for script injections and print patches

    REPO_PATH: Path to the repository root or a specific workflow file
    """
    config_data = _load_config_or_exit(config)
    _configure_logging(config_data, verbose)

    if no_color:
        os.environ["NO_COLOR"] = "1"

    path = Path(repo_path)
    if not path.is_file() and not (path / ".github" / "workflows").is_dir():
        click.echo(f"No workflows found at {path / '.github' / 'workflows'}", err=True)
        sys.exit(1)

    result = scan_repository(repo_path, config=config_data)
    remediations = remediate(result.findings, result.contents, config=config_data)

    if patch_dir:
        for remediation in remediations:
            if not remediation.can_fix:
                continue
            finding = remediation.finding
            name = patch_file_name(finding.path, finding.offset, remediation.envvar_name or "")
            write_text(os.path.join(patch_dir, name), remediation.patch)

    if output_file:
        if output == "json":
            save_json_report(remediations, result.stats, output_file)
        else:
            report = format_console_report(
                remediations, result.stats, show_patches=not no_patches
            )
            write_text(output_file, click.unstyle(report))
        click.echo(f"Results written to {output_file}")
    elif output == "json":
        click.echo(generate_json_report(remediations, result.stats))
    else:
        print_console_report(remediations, result.stats, show_patches=not no_patches)

    if patch_dir and output == "text":
        click.echo(f"Patches written to {patch_dir}")

    if result.findings:
        sys.exit(1)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--snippet", required=True, help="Dangerous expression, without ${{ }}")
@click.option("--line", "line", type=int, required=True, help="Line of the run: command")
@click.option("--path", "display_path", help="Path to use in the diff headers")
@click.option("--context-lines", type=click.IntRange(min=0), default=3, show_default=True)
@click.option("--verbose", is_flag=True, help="Log why the patch could not be generated")
def patch(
    file_path: str,
    snippet: str,
    line: int,
    display_path: Optional[str],
    context_lines: int,
    verbose: bool,
) -> None:
    """Generate the patch for a single script injection

    FILE_PATH: Workflow file containing the injection
    """
    _configure_logging({}, verbose)

    finding = Finding(path=display_path or file_path, snippet=snippet, offset=line)
    result = generate_patch_result(finding, read_text(file_path), context_lines=context_lines)

    if not result.ok or not result.value:
        reason = result.reason.value if result.reason else "NO_CHANGE"
        click.echo(f"No patch available ({reason})", err=True)
        sys.exit(1)

    click.echo(result.value, nl=False)


@cli.command()
@click.option(
    "--format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def patterns(format: str) -> None:
    """List the expressions that can be patched automatically"""
    rows = list_patterns()

    if format == "json":
        click.echo(json.dumps([{"envvar_name": n, "pattern": p} for n, p in rows], indent=2))
        return

    click.echo("scriptguard can patch the following expressions:")
    for envvar_name, pattern in rows:
        click.echo(f" - {click.style(envvar_name, bold=True)}: {pattern}")


@cli.command()
@click.option("--config", type=click.Path(exists=True), help="Path to YAML config file to validate")
@click.option("--generate", is_flag=True, help="Generate a default config file")
@click.option("--output", type=click.Path(), help="Output path for generated config")
def config(config: Optional[str], generate: bool, output: Optional[str]) -> None:
    """View or validate current config"""
    if generate:
        try:
            config_str = generate_default_config(output_path=output)
        except ConfigurationError as e:
            click.echo(f"❌ {e}", err=True)
            sys.exit(1)

        if output:
            click.echo(f"Default config written to {output}")
        else:
            click.echo(config_str)
        return

    try:
        config_data = load_config(config)
    except ConfigurationError as e:
        click.echo(f"❌ Config validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("✅ Config loaded and valid.")
    click.echo(f" - diff.context_lines: {config_data['diff']['context_lines']}")
    click.echo(f" - concurrency.max_workers: {config_data['concurrency']['max_workers']}")
    click.echo(f" - concurrency.timeout_seconds: {config_data['concurrency']['timeout_seconds']}")
    click.echo(f" - log_level: {config_data['log_level']}")


if __name__ == "__main__":
    cli()
