"""CLI entry point for hashsnap."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.tree import Tree

from hashsnap.config import HashsnapConfig, SnapshotConfig, load_config
from hashsnap.config.loader import DEFAULT_CONFIG_TEMPLATE, PROJECT_CONFIG
from hashsnap.log import configure_logging
from hashsnap.snapshot import (
    Contents,
    Leaf,
    SnapshotDecodeError,
    build_snapshot,
    compute_file_digest,
    dumps,
    load,
)
from hashsnap.snapshot.codec import format_for

app = typer.Typer(
    name="hashsnap",
    help="Content-addressed snapshots of directory trees.",
)

config_app = typer.Typer(help="Manage hashsnap configuration.")
app.add_typer(config_app, name="config")

_FORMATS = ("yaml", "json")

# Global state
_config: HashsnapConfig | None = None


def _get_config() -> HashsnapConfig:
    if _config is None:
        return load_config()
    return _config


def _fail(message: str) -> typer.Exit:
    rprint(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to hashsnap.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        raise _fail(str(e))
    configure_logging(_config.log_level, _config.log_format)


def _resolve_format(fmt: str | None, output: Path | None, cfg: HashsnapConfig) -> str:
    """--format wins, then the output file's suffix, then the config."""
    if fmt is not None:
        if fmt not in _FORMATS:
            raise _fail(f"Unknown format '{fmt}': expected one of {', '.join(_FORMATS)}")
        return fmt
    if output is not None and output.suffix:
        return format_for(output)
    return cfg.output.format


@app.command()
def scan(
    path: Annotated[Path, typer.Argument(help="Directory to snapshot")] = Path("."),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the snapshot to a file")
    ] = None,
    fmt: Annotated[
        str | None, typer.Option("--format", "-f", help="Document format: yaml | json")
    ] = None,
    algorithm: Annotated[
        str | None, typer.Option("--algorithm", "-a", help="Hash algorithm")
    ] = None,
    ignore: Annotated[
        list[str] | None, typer.Option("--ignore", help="Extra ignore pattern (repeatable)")
    ] = None,
    hidden: Annotated[bool, typer.Option("--hidden", help="Include hidden entries")] = False,
    no_gitignore: Annotated[
        bool, typer.Option("--no-gitignore", help="Do not skip paths git ignores")
    ] = False,
    fail_on_error: Annotated[
        bool, typer.Option("--fail-on-error", help="Exit 1 if any file could not be read")
    ] = False,
) -> None:
    """Hash every file under PATH and print the nested snapshot."""
    cfg = _get_config()
    doc_format = _resolve_format(fmt, output, cfg)

    overrides: dict[str, object] = {}
    if algorithm:
        overrides["algorithm"] = algorithm
    if ignore:
        overrides["ignore_patterns"] = [*cfg.snapshot.ignore_patterns, *ignore]
    if hidden:
        overrides["include_hidden"] = True
    if no_gitignore:
        overrides["respect_gitignore"] = False
    try:
        snap_cfg = SnapshotConfig.model_validate({**cfg.snapshot.model_dump(), **overrides})
    except ValidationError as e:
        raise _fail(f"Invalid option: {e.errors()[0]['msg']}")

    try:
        result = build_snapshot(path, snap_cfg)
    except OSError as e:
        raise _fail(str(e))

    for err in result.errors:
        typer.echo(f"Error: {err.path}: {err.message}", err=True)

    document = dumps(result.contents, doc_format)
    if output is not None:
        try:
            output.write_text(document, encoding="utf-8")
        except OSError as e:
            raise _fail(f"Cannot write {output}: {e}")
        rprint(
            f"[green]Wrote[/green] {escape(str(output))} "
            f"({result.contents.file_count()} files, "
            f"{result.contents.dir_count()} directories)"
        )
    else:
        typer.echo(document, nl=False)

    if fail_on_error and result.errors:
        raise typer.Exit(code=1)


def _add_branch(tree: Tree, contents: Contents) -> None:
    for name in sorted(contents.items):
        node = contents.items[name]
        if isinstance(node, Leaf):
            tree.add(f"[green]{escape(name)}[/green] [dim]{node.digest.to_hex()[:12]}[/dim]")
        else:
            branch = tree.add(f"[bold blue]{escape(name)}/[/bold blue]")
            _add_branch(branch, node.contents)


@app.command()
def show(
    snapshot: Annotated[Path, typer.Argument(help="Snapshot document (.yaml or .json)")],
    fmt: Annotated[
        str | None, typer.Option("--format", "-f", help="Document format: yaml | json")
    ] = None,
) -> None:
    """Render a saved snapshot as a tree."""
    if fmt is not None and fmt not in _FORMATS:
        raise _fail(f"Unknown format '{fmt}': expected one of {', '.join(_FORMATS)}")
    try:
        contents = load(snapshot, fmt)
    except OSError as e:
        raise _fail(f"Cannot read {snapshot}: {e}")
    except SnapshotDecodeError as e:
        raise _fail(f"Malformed snapshot {snapshot}: {e}")

    tree = Tree(f"[bold]{escape(snapshot.name)}[/bold]")
    _add_branch(tree, contents)
    rprint(tree)
    rprint(
        f"\n[dim]{contents.file_count()} files, {contents.dir_count()} directories[/dim]"
    )


@app.command(name="hash")
def hash_file(
    file: Annotated[Path, typer.Argument(help="File to hash")],
    algorithm: Annotated[
        str | None, typer.Option("--algorithm", "-a", help="Hash algorithm")
    ] = None,
) -> None:
    """Print the hex digest of a single file."""
    cfg = _get_config()
    try:
        digest = compute_file_digest(file, algorithm or cfg.snapshot.algorithm)
    except (OSError, ValueError) as e:
        raise _fail(str(e))
    typer.echo(f"{digest}  {file}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default hashsnap.yaml in current directory."""
    target = Path(PROJECT_CONFIG)
    if target.exists() and not force:
        rprint(f"[yellow]{PROJECT_CONFIG} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
