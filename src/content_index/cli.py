"""CLI for Content Index."""

import logging
import os
import sys
from pathlib import Path
from typing import Literal, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import CIX_DIR, __version__
from .codec import load_file
from .config import (
    ContentIndexConfig,
    get_cix_dir,
    get_commit_index_path,
    get_index_path,
    load_config,
    save_config,
)
from .dirops import remove_directory
from .errors import ContentIndexError, PathOutsideProject
from .handle import IndexHandle
from .hasher import compute_file_hash
from .index import ContentIndex, Orientation
from .status import compute_status

console = Console()
error_console = Console(stderr=True)


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def is_initialized(project_root: Path) -> bool:
    """Check if cix is initialized in the project."""
    return get_cix_dir(project_root).exists()


def require_initialized(project_root: Path) -> None:
    """Exit with an error if cix is not initialized."""
    if not is_initialized(project_root):
        error_console.print(
            "[red]Error:[/red] Not initialized. Run [bold]cix init[/bold] first."
        )
        sys.exit(1)


def fail(error: ContentIndexError) -> NoReturn:
    """Report a library error and exit."""
    error_console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


def get_config(project_root: Path) -> ContentIndexConfig:
    """Load the project config, exiting with an error if it is invalid."""
    try:
        return load_config(project_root)
    except ContentIndexError as e:
        fail(e)


def project_relative(project_root: Path, raw: str) -> Path:
    """
    Express a command-line path relative to the project root.

    Index keys are root-relative, matching what status scans.

    Raises:
        PathOutsideProject: the path is not below the root
    """
    absolute = Path(os.path.abspath(raw))
    try:
        return absolute.relative_to(project_root)
    except ValueError:
        raise PathOutsideProject(raw, str(project_root)) from None


def read_index(
    project_root: Path,
    config: ContentIndexConfig,
    orientation: Orientation = Orientation.FILENAME,
) -> ContentIndex:
    """Load a project index without taking ownership of it."""
    if orientation is Orientation.FILENAME:
        path = get_index_path(project_root, config)
    else:
        path = get_commit_index_path(project_root, config)
    return load_file(path, orientation, config.strict_records, config.hash_algorithm)


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="cix")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(verbose: bool) -> None:
    """Content Index - track files by content hash."""
    setup_logging(verbose)


@main.command()
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing configuration and indexes",
)
def init(force: bool) -> None:
    """Initialize cix in the current project."""
    project_root = get_project_root()
    cix_dir = get_cix_dir(project_root)

    if cix_dir.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {CIX_DIR}/ already exists. Use --force to reinitialize."
        )
        sys.exit(1)

    cix_dir.mkdir(parents=True, exist_ok=True)

    config = ContentIndexConfig()
    save_config(config, project_root)

    # Empty index files
    for path in (get_index_path(project_root, config), get_commit_index_path(project_root, config)):
        path.write_text("")

    console.print(
        Panel(
            f"[green]Initialized Content Index[/green]\n\n"
            f"Hash algorithm: [bold]{config.hash_algorithm}[/bold]\n"
            f"Index directory: [dim]{cix_dir}[/dim]\n\n"
            f"Next steps:\n"
            f"  1. Run [bold]cix add <files>[/bold] to track files\n"
            f"  2. Run [bold]cix status[/bold] to see what changed",
            title="cix init",
        )
    )


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
def add(paths: tuple[str, ...]) -> None:
    """Hash files and record them in the index.

    Directories add the regular files directly inside them. Paths are
    recorded relative to the project root.
    """
    project_root = get_project_root()
    require_initialized(project_root)
    config = get_config(project_root)

    try:
        relative_paths = [project_relative(project_root, raw) for raw in paths]
        with IndexHandle.from_config(project_root, config) as handle:
            added = []
            for path in relative_paths:
                if path.is_dir():
                    added.extend(handle.index.add_directory(path, config.exclude_patterns))
                else:
                    added.append(handle.index.add(path.as_posix()))
    except ContentIndexError as e:
        fail(e)

    for entry in added:
        console.print(f"[green]added[/green] {escape(entry.filename)} [dim]{entry.hash[:12]}[/dim]")
    console.print(f"[bold]{len(added)}[/bold] file(s) indexed.")


@main.command()
def snapshot() -> None:
    """Record the current index in the hash-keyed commit index."""
    project_root = get_project_root()
    require_initialized(project_root)
    config = get_config(project_root)

    try:
        converted = read_index(project_root, config).convert_orientation(config.on_hash_collision)
        with IndexHandle.from_config(project_root, config, Orientation.HASH) as commit:
            for entry in converted:
                commit.index.set(entry.filename, entry.hash)
    except ContentIndexError as e:
        fail(e)

    console.print(
        f"[green]Snapshot recorded:[/green] {len(converted)} content hash(es), "
        f"{len(commit.index)} total in commit index."
    )


@main.command()
def status() -> None:
    """Show new, modified and deleted files."""
    project_root = get_project_root()
    require_initialized(project_root)
    config = get_config(project_root)

    try:
        diff = compute_status(project_root, read_index(project_root, config), config)
    except ContentIndexError as e:
        fail(e)

    if not diff.has_changes:
        console.print("[green]Working tree matches the index.[/green]")
        return

    table = Table(title="Changes")
    table.add_column("Status", style="cyan")
    table.add_column("File")

    for name in diff.new:
        table.add_row("[green]new[/green]", name)
    for name in diff.modified:
        table.add_row("[yellow]modified[/yellow]", name)
    for name in diff.deleted:
        table.add_row("[red]deleted[/red]", name)

    console.print(table)
    console.print(f"{diff.total_changes} change(s).")


@main.command("hash")
@click.argument("path", type=click.Path())
def hash_command(path: str) -> None:
    """Print the content hash of a file."""
    config = get_config(get_project_root())
    try:
        file_hash = compute_file_hash(path, config.hash_algorithm)
    except ContentIndexError as e:
        fail(e)
    click.echo(file_hash)


@main.command()
@click.argument("key")
@click.option(
    "--by",
    type=click.Choice(["filename", "hash"]),
    default="filename",
    help="Which attribute KEY is",
)
@click.option("--commit", is_flag=True, help="Look up in the commit index")
def lookup(key: str, by: Literal["filename", "hash"], commit: bool) -> None:
    """Print the hash for a filename, or the filename for a hash."""
    project_root = get_project_root()
    require_initialized(project_root)
    config = get_config(project_root)
    orientation = Orientation.HASH if commit else Orientation.FILENAME

    try:
        index = read_index(project_root, config, orientation)
        value = index.get_hash(key) if by == "filename" else index.get_file(key)
    except ContentIndexError as e:
        fail(e)
    click.echo(value)


@main.command("ls")
@click.option("--commit", is_flag=True, help="List the commit index")
def list_entries(commit: bool) -> None:
    """List index entries."""
    project_root = get_project_root()
    require_initialized(project_root)
    config = get_config(project_root)
    orientation = Orientation.HASH if commit else Orientation.FILENAME

    try:
        index = read_index(project_root, config, orientation)
    except ContentIndexError as e:
        fail(e)

    table = Table(title="Commit index" if commit else "Index")
    if commit:
        table.add_column("Hash", style="cyan")
        table.add_column("Filename")
        for entry in index:
            table.add_row(entry.hash, entry.filename)
    else:
        table.add_column("Filename", style="cyan")
        table.add_column("Hash")
        for entry in index:
            table.add_row(entry.filename, entry.hash)

    console.print(table)
    console.print(f"{len(index)} entries.")


@main.command()
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def clean(force: bool) -> None:
    """Remove the .content-index directory."""
    project_root = get_project_root()
    cix_dir = get_cix_dir(project_root)

    if not cix_dir.exists():
        console.print(f"[dim]Nothing to clean - {CIX_DIR}/ does not exist.[/dim]")
        return

    if not force:
        if not click.confirm(f"Remove {cix_dir}?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    try:
        remove_directory(cix_dir)
    except ContentIndexError as e:
        fail(e)
    console.print(f"[green]Removed {CIX_DIR}/[/green]")


if __name__ == "__main__":
    main()
