"""Click CLI: list the packages affected by changes on a branch."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from gta.core import GTA
from gta.differ import FileDiffer, GitDiffer, read_changed_files
from gta.errors import GtaError
from gta.loader import GoListLoader, SnapshotLoader
from gta.models import GtaConfig
from gta.result import unique_package_paths


def parse_string_slice(value: str) -> list[str]:
    """Split a comma separated flag value, dropping blanks."""
    return [v.strip() for v in value.split(",") if v.strip()]


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


@click.command()
@click.version_option(version="0.1.0")
@click.option("--base", default="origin/master", show_default=True, help="Branch to diff against")
@click.option("--merge", is_flag=True, help="Diff using the latest merge commit")
@click.option("--changed-files", type=click.Path(path_type=Path),
              help="File containing a newline separated list of changed files")
@click.option("--include", default="", help="Comma separated import path prefixes to load")
@click.option("--tags", default="", help="Comma separated build tags to consider")
@click.option("--graph", "graph_file", type=click.Path(path_type=Path),
              help="Load the unit graph from a JSON snapshot instead of `go list`")
@click.option("--json", "as_json", is_flag=True, help="Output the changes as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
def cli(
    base: str,
    merge: bool,
    changed_files: Path | None,
    include: str,
    tags: str,
    graph_file: Path | None,
    as_json: bool,
    verbose: bool,
):
    """gta: list the packages affected by a change, including everything that depends on them."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(levelname)s %(name)s: %(message)s")

    if merge and changed_files:
        _fail("changed files must not be provided when using the latest merge commit")

    if changed_files:
        try:
            differ = FileDiffer(read_changed_files(changed_files))
        except GtaError as e:
            _fail(str(e))
    else:
        differ = GitDiffer(base_branch=base, use_merge_commit=merge)

    loader = SnapshotLoader(graph_file) if graph_file else GoListLoader()
    config = GtaConfig(
        prefixes=parse_string_slice(include),
        tags=parse_string_slice(tags),
        differ=differ,
        loader=loader,
    )

    try:
        gt = GTA(config)
    except GtaError as e:
        _fail(f"can't prepare gta: {e}")

    try:
        packages = gt.changed_packages()
    except GtaError as e:
        _fail(f"can't list dirty packages: {e}")

    if as_json:
        click.echo(packages.to_json())
        return

    paths = unique_package_paths(packages.all_changes)
    if sys.stdin.isatty():
        for p in paths:
            click.echo(p)
        return
    click.echo(" ".join(paths))


if __name__ == "__main__":
    cli()
