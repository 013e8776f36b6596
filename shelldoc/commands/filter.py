"""Filter a recorded terminal history down to documentation-worthy commands."""

import json
import sys
from datetime import UTC, datetime
from pathlib import Path

import click
from rich.table import Table

from shelldoc.config_runtime import build_filter_criteria, load_runtime_config
from shelldoc.filter import CommandEntry, CommandFilter, LocalEnvironmentProber, load_history
from shelldoc.ui import console, print_header, print_success, print_warning, stats_table
from shelldoc.utils.error_handler import handle_exceptions
from shelldoc.utils.exit_codes import ExitCodes
from shelldoc.utils.logging import configure_file_logging, logger


def _build_filter(root: str, probe_host: bool = False) -> CommandFilter:
    cfg = load_runtime_config(root)
    criteria = build_filter_criteria(cfg)
    prober = LocalEnvironmentProber() if (probe_host or cfg["validation"]["probe_host"]) else None
    return CommandFilter(criteria, prober)


@click.group(name="filter")
def filter_group():
    """Classify, deduplicate, sanitize and validate command histories."""
    pass


@filter_group.command(name="process")
@click.argument("history", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--privacy", is_flag=True, help="Redact credentials and personal data in kept commands")
@click.option("--validate", is_flag=True, help="Check command sequences and dependencies (implies --privacy)")
@click.option("--probe-host", is_flag=True, help="Check files, PATH and environment on this machine")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--root", default=".", help="Project root holding .shelldoc/config.json")
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), help="Also write a rotating log here")
@handle_exceptions
def process(history, privacy, validate, probe_host, as_json, root, log_dir):
    """Run the full filtering pipeline over a JSONL history.

    \b
    Pipeline:
      1. Deduplicate repeats inside the configured time window
      2. Drop failed, mistyped and suspicious commands
      3. Mine workflow optimizations over what is left
      4. (--privacy) Redact secrets from kept commands
      5. (--validate) Report broken command sequences

    Exits with code 1 when --validate finds problems.
    """
    if log_dir:
        configure_file_logging(log_dir)

    command_filter = _build_filter(root, probe_host)
    entries = load_history(history)
    logger.info(f"Processing {len(entries)} commands from {history}")

    if validate:
        processed = command_filter.process_commands_with_validation(entries)
    elif privacy:
        processed = command_filter.process_commands_with_privacy(entries)
    else:
        processed = command_filter.process_commands(entries)

    if as_json:
        click.echo(json.dumps(processed.to_dict(), indent=2))
    else:
        print_header("KEPT COMMANDS")
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Command")
        table.add_column("Directory", style="path")
        for i, entry in enumerate(processed.filtered_commands, 1):
            table.add_row(str(i), entry.command, entry.working_directory)
        console.print(table)

        if processed.optimizations:
            print_header("SUGGESTIONS")
            for opt in processed.optimizations:
                console.print(
                    f"[cmd]{opt.optimization_type.value}[/cmd] {opt.description}", highlight=False
                )
                console.print(f"    -> {opt.suggested_replacement}", highlight=False)

        console.print(stats_table(processed.stats.to_dict()))
        print_success(f"Kept {len(processed.filtered_commands)} of {processed.original_count} commands")

    if validate and processed.stats.validation_errors:
        if not as_json:
            print_warning(
                f"{processed.stats.validation_errors} validation error(s) found - "
                f"{ExitCodes.get_description(ExitCodes.VALIDATION_ERRORS)}"
            )
        sys.exit(ExitCodes.VALIDATION_ERRORS)


@filter_group.command(name="stats")
@click.argument("history", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the statistics as JSON")
@click.option("--root", default=".", help="Project root holding .shelldoc/config.json")
@handle_exceptions
def stats(history, as_json, root):
    """Show filtering statistics without writing anything."""
    command_filter = _build_filter(root)
    result = command_filter.get_filtering_stats(load_history(history)).to_dict()

    if as_json:
        click.echo(json.dumps(result, indent=2))
    else:
        console.print(stats_table(result))


@filter_group.command(name="check")
@click.argument("commands", nargs=-1, required=True)
@click.option("--exit-code", type=int, default=None, help="Exit code to assume for every command")
@click.option("--root", default=".", help="Project root holding .shelldoc/config.json")
@handle_exceptions
def check(commands, exit_code, root):
    """Explain the include/exclude decision for ad-hoc command strings.

    \b
    Example:
      shelldoc filter check "gti status" "ls -la" --exit-code 0
    """
    command_filter = _build_filter(root)
    now = datetime.now(UTC)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Command", style="cmd")
    table.add_column("Decision")
    table.add_column("Reason")
    table.add_column("Confidence", justify="right")

    for text in commands:
        result = command_filter.filter_command(CommandEntry(command=text, timestamp=now, exit_code=exit_code))
        decision = "[success]include[/success]" if result.should_include else "[error]exclude[/error]"
        table.add_row(text, decision, result.reason, f"{result.confidence:.1f}")

    console.print(table)
