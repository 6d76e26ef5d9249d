"""Click-based CLI entrypoint for offline-bundle.

Takes exactly one positional argument, the output archive path. Any
argument starting with ``-`` is ignored when counting positionals, so
unknown flags are tolerated rather than rejected.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from offline_bundle import __version__
from offline_bundle.constants import get_kill_on_failure
from offline_bundle.errors import BundleError
from offline_bundle.export import export_bundle, format_instructions
from offline_bundle.utils import log_debug, log_error, log_section, log_step, set_debug

PROG_NAME = "offline-bundle"
USAGE = f"Usage:\n  {PROG_NAME} <output-file>"


@click.command(
    context_settings={"ignore_unknown_options": True},
    help="Package the first remote's tracking refs into an encrypted git bundle.",
)
@click.option(
    "--remote", "remote_name", default=None, metavar="NAME",
    help="Export this remote instead of the first configured one.",
)
@click.option(
    "--kill-on-failure/--no-kill-on-failure", default=None,
    help="Terminate the other pipeline processes as soon as one fails.",
)
@click.option("--debug", is_flag=True, help="Print debug output.")
@click.version_option(__version__, prog_name=PROG_NAME)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    args: tuple[str, ...],
    remote_name: Optional[str],
    kill_on_failure: Optional[bool],
    debug: bool,
) -> None:
    """Export a repository's remote history for offline transfer."""
    if debug:
        set_debug(True)

    positionals = [arg for arg in args if not arg.startswith("-")]
    if len(positionals) != 1:
        click.echo(USAGE)
        sys.exit(1)

    ignored = [arg for arg in args if arg.startswith("-")]
    if ignored:
        log_debug(f"Ignoring arguments: {' '.join(ignored)}")

    if kill_on_failure is None:
        kill_on_failure = get_kill_on_failure()

    try:
        result = asyncio.run(
            export_bundle(
                Path(positionals[0]),
                remote_name=remote_name,
                kill_on_failure=kill_on_failure,
            )
        )
    except (BundleError, OSError) as exc:
        log_error(str(exc))
        sys.exit(1)

    for heading, detail in format_instructions(result):
        log_section(heading)
        log_step(detail)


def main() -> None:
    """Entry point for the CLI.

    Usage errors (e.g. ``--remote`` without a value) are normalised to
    exit code 1, matching the wrong-argument-count behaviour.
    """
    try:
        cli(standalone_mode=False)
    except click.UsageError as exc:
        click.echo(f"Error: {exc.format_message()}", err=True)
        sys.exit(1)
    except click.Abort:
        sys.exit(1)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        sys.exit(1 if code == 2 else code)


if __name__ == "__main__":
    main()
