"""
Command-line interface for spotify-private-api.

This module implements the `spfolders` CLI using Click, with rich-click
for colored help output.

Commands:
    spfolders list                              Show playlists and folders as a tree
    spfolders add-folder <name> --start N       Create an empty folder at N
    spfolders add-folder <name> --start N --end M
                                                Create a folder enclosing items
    spfolders remove <start> <length>           Remove a run of items
    spfolders move <from> <to> <length>         Move a run of items

Options:
    --config <path>                             Explicit config.yaml
    --verbose                                   Show debug output
    --dry-run (mutating commands)               Print the payload, don't submit

Configuration:
    Credentials come from config.yaml in the current directory and/or the
    SPOTIFY_DC, SPOTIFY_KEY and SPOTIFY_USER_ID environment variables
    (a .env file is honoured). See spotify_private_api.core.config.
"""

import json
import sys
from pathlib import Path
from typing import Callable, Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

from spotify_private_api import __version__
from spotify_private_api.core import (
    Config,
    ConfigError,
    SpotifyPrivateApiError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from spotify_private_api.folders import Changes, Folder, FolderRequest, RootList
from spotify_private_api.folders.models import TreeNode
from spotify_private_api.session import Session

logger = get_logger(__name__)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug output"
)
@click.version_option(__version__, prog_name="spfolders")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """
    spfolders: Organize your Spotify playlists into folders.

    Reads the root list of your library and edits it with the same
    endpoints the web player uses. Authentication relies on the sp_dc
    and sp_key cookies of a logged-in browser session.

    \b
    EXAMPLES:
        spfolders list
        spfolders add-folder "Workout" --start 0
        spfolders add-folder "Road Trip" --start 3 --end 6 --dry-run
        spfolders move 8 1 2
        spfolders remove 4 1
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Print the changes payload instead of submitting it"
)


@cli.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """Show the root list as a folder tree with flat indices."""
    def action(session: Session) -> None:
        root_list = session.fetch_root_list()
        click.echo(f"Revision {root_list.revision} ({len(root_list)} items)")
        for line in render_tree(root_list.folder_tree()):
            click.echo(line)

    _run(ctx, action)


@cli.command("add-folder")
@click.argument("name")
@click.option("--start", "start_index", type=click.IntRange(min=0), required=True,
              help="Index of the folder start marker")
@click.option("--end", "end_index", type=click.IntRange(min=0), default=None,
              help="Index of the end marker once the start marker is in place (default: start + 1)")
@dry_run_option
@click.pass_context
def add_folder_command(
    ctx: click.Context,
    name: str,
    start_index: int,
    end_index: Optional[int],
    dry_run: bool
) -> None:
    """Create a folder named NAME."""
    if end_index is None:
        end_index = start_index + 1
    if end_index <= start_index:
        raise click.UsageError("--end must be greater than --start")

    def build(root_list: RootList, request: FolderRequest) -> None:
        folder_id = root_list.generate_folder_uri()
        logger.info(f"New folder id: {folder_id}")
        request.add(name, folder_id, start_index, end_index)

    _run(ctx, lambda session: _edit(session, build, dry_run))


@cli.command("remove")
@click.argument("start_index", type=click.IntRange(min=0))
@click.argument("length", type=click.IntRange(min=1))
@dry_run_option
@click.pass_context
def remove_command(ctx: click.Context, start_index: int, length: int, dry_run: bool) -> None:
    """Remove LENGTH items starting at START_INDEX."""
    _run(ctx, lambda session: _edit(
        session, lambda root_list, request: request.remove(start_index, length), dry_run
    ))


@cli.command("move")
@click.argument("from_index", type=click.IntRange(min=0))
@click.argument("to_index", type=click.IntRange(min=0))
@click.argument("length", type=click.IntRange(min=1))
@dry_run_option
@click.pass_context
def move_command(
    ctx: click.Context,
    from_index: int,
    to_index: int,
    length: int,
    dry_run: bool
) -> None:
    """Move LENGTH items from FROM_INDEX to TO_INDEX."""
    _run(ctx, lambda session: _edit(
        session, lambda root_list, request: request.move(from_index, to_index, length), dry_run
    ))


def _edit(
    session: Session,
    build: Callable[[RootList, FolderRequest], object],
    dry_run: bool
) -> None:
    """Fetch the latest snapshot, let `build` queue operations, then submit or print."""
    root_list = session.fetch_root_list()
    request = root_list.new_request()
    build(root_list, request)
    changes = request.build()

    if dry_run:
        click.echo(format_changes(changes))
        return

    session.submit_changes(changes)
    logger.info(f"Submitted {len(changes.operations)} operation(s)")


def _run(ctx: click.Context, action: Callable[[Session], None]) -> None:
    """
    Load configuration, set up logging, open a session and run `action`.

    Library errors are reported on stderr and end the process with exit
    status 1. Logging is always shut down.
    """
    try:
        config = load_config(ctx.obj["config_path"])
        try:
            setup_logging(config.logging.directory, verbose=ctx.obj["verbose"])
        except OSError as e:
            raise ConfigError(
                f"Cannot write log files to {config.logging.directory}: {e}",
                details={"directory": str(config.logging.directory), "original_error": str(e)}
            ) from e
        action(_open_session(config))
    except SpotifyPrivateApiError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"Details: {e.details}")
        sys.exit(1)
    finally:
        shutdown_logging()


def _open_session(config: Config) -> Session:
    return Session.from_config(config)


def format_changes(changes: Changes) -> str:
    return json.dumps(changes.to_api(), indent=2, ensure_ascii=False)


def render_tree(nodes: list[TreeNode], depth: int = 0) -> list[str]:
    """Render folder tree nodes as indented lines, prefixed by flat index."""
    lines = []
    indent = "    " * depth
    for node in nodes:
        if isinstance(node, Folder):
            lines.append(f"[{node.start_index:>3}] {indent}{node.name}/  ({node.folder_id})")
            lines.extend(render_tree(node.children, depth + 1))
        else:
            lines.append(f"[{node.index:>3}] {indent}{node.name}")
    return lines


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `spfolders` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
