"""
minipatch v1.0.0 — apply unified diffs with exact matching.

Command: minipatch apply PATCH ORIGINAL
"""

import shutil
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import CONFIG_FIELDS, Config
from .errors import PatchError
from .line_operation import Operation
from .logger import setup_logger
from .patcher import apply as apply_patch
from .patcher import check as check_patch
from .patcher import parse as parse_patch

_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


def _make_console(color: str, stderr: bool = False) -> Console:
    if color == "always":
        return Console(stderr=stderr, force_terminal=True)
    if color == "never":
        return Console(stderr=stderr, no_color=True)
    return Console(stderr=stderr)


def _read_text(path: Path, config: Config) -> str:
    size = path.stat().st_size
    if size > config.max_input_bytes:
        raise click.ClickException(
            f"{path} is {size} bytes, over the max-input-bytes limit of {config.max_input_bytes}"
        )
    # newline="" keeps line endings byte-exact
    with open(path, encoding=config.encoding, newline="") as f:
        return f.read()


def _write_text(path: Path, text: str, config: Config):
    with open(path, "w", encoding=config.encoding, newline="") as f:
        f.write(text)


def _fail(console: Console, error: Exception):
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if error.__cause__ is not None:
        console.print(f"  [dim]caused by:[/dim] {escape(str(error.__cause__))}")
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="minipatch")
@click.option("--project-dir", "-d", default=".", help="Directory to load .minipatch.yml from")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, project_dir, verbose):
    """minipatch — apply unified diffs with exact matching."""
    config = Config.load(project_dir)
    if verbose:
        config.verbose = True
    setup_logger("minipatch", verbose=config.verbose, log_file=config.log_file or False)
    ctx.obj = {
        "config": config,
        "console": _make_console(config.color),
        "err": _make_console(config.color, stderr=True),
    }


@cli.command("apply")
@click.argument("patch_file", type=_PATH)
@click.argument("original_file", type=_PATH)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the patched text here instead of stdout")
@click.option("--in-place", "-i", is_flag=True, help="Overwrite ORIGINAL_FILE")
@click.option("--dry-run", "-n", is_flag=True, help="Only check that the patch applies")
@click.pass_obj
def apply_command(obj, patch_file, original_file, output, in_place, dry_run):
    """Apply PATCH_FILE to ORIGINAL_FILE."""
    config: Config = obj["config"]
    err: Console = obj["err"]
    if output and in_place:
        raise click.UsageError("--output and --in-place are mutually exclusive")

    patch = _read_text(patch_file, config)
    original = _read_text(original_file, config)

    if dry_run:
        try:
            diff = check_patch(patch, original)
        except PatchError as e:
            _fail(err, e)
        err.print(
            f"[green]✓[/green] {escape(str(patch_file))} applies cleanly "
            f"({len(diff.hunks)} hunk(s), {diff.total_character_count_delta:+d} chars)"
        )
        return

    try:
        new_text = apply_patch(patch, original)
    except PatchError as e:
        _fail(err, e)

    if in_place:
        if config.backup_suffix:
            backup = original_file.with_name(original_file.name + config.backup_suffix)
            shutil.copy2(original_file, backup)
        _write_text(original_file, new_text, config)
        err.print(f"[green]✓[/green] Patched {escape(str(original_file))}")
    elif output:
        _write_text(output, new_text, config)
        err.print(f"[green]✓[/green] Wrote {escape(str(output))}")
    else:
        click.echo(new_text, nl=False)


@cli.command("inspect")
@click.argument("patch_file", type=_PATH)
@click.pass_obj
def inspect_command(obj, patch_file):
    """Summarize the hunks in PATCH_FILE."""
    config: Config = obj["config"]
    console: Console = obj["console"]
    try:
        diff = parse_patch(_read_text(patch_file, config))
    except PatchError as e:
        _fail(obj["err"], e)

    table = Table(title=escape(str(patch_file)))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Original", justify="right")
    table.add_column("Output", justify="right")
    table.add_column("Removed", justify="right", style="red")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Δ chars", justify="right")
    for index, hunk in enumerate(diff.hunks, start=1):
        kinds = [op.kind for op in hunk.operations()]
        table.add_row(
            str(index),
            f"{hunk.start_a},{hunk.length_a}",
            f"{hunk.start_b},{hunk.length_b}",
            str(kinds.count(Operation.DELETE)),
            str(kinds.count(Operation.INSERT)),
            f"{hunk.character_count_delta:+d}",
        )
    console.print(table)
    console.print(f"Total character delta: [bold]{diff.total_character_count_delta:+d}[/bold]")


@cli.group("config")
def config_group():
    """Show or change settings."""


@config_group.command("show")
@click.pass_obj
def config_show(obj):
    """Print effective settings and where they came from."""
    config: Config = obj["config"]
    console: Console = obj["console"]
    table = Table(title="minipatch configuration")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="dim")
    for row in config.summary():
        table.add_row(
            row["key"], escape(repr(row["current"])), escape(repr(row["default"])), row["description"]
        )
    console.print(table)
    console.print(f"[dim]Source:[/dim] {escape(config.config_source or '(defaults)')}")


@config_group.command("set")
@click.argument("key", type=click.Choice(sorted(CONFIG_FIELDS)))
@click.argument("value")
@click.pass_obj
def config_set(obj, key, value):
    """Persist KEY=VALUE to the active config file."""
    config: Config = obj["config"]
    ok, error = config.set_config_value(key, value)
    if not ok:
        obj["err"].print(f"[red]Invalid {key}:[/red] {escape(error)}")
        sys.exit(1)
    obj["console"].print(f"[green]✓[/green] {key} = {escape(repr(config.get_config_value(key)))}")


def main():
    cli()


if __name__ == "__main__":
    main()
