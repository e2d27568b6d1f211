"""SCS Toolkit CLI."""

import logging
import sys
from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log per-file details")
def main(verbose: bool):
    """SCS Toolkit - Build HashFS v2 (.scs) archives.

    \b
    pack: directory tree -> .scs archive
    hash: print the HashFS hash of archive paths
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@main.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--level",
    type=click.IntRange(0, 9),
    default=9,
    show_default=True,
    help="zlib compression level",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of files compressed in parallel",
)
@click.option("-q", "--quiet", is_flag=True, help="Only print errors")
def pack(source: Path, output: Path, level: int, jobs: int, quiet: bool):
    """Pack every file under SOURCE into the archive OUTPUT.

    Paths are stored as hashes of their location relative to SOURCE, so
    SOURCE should be the root of the mod or game folder.
    """
    from .hashfs import HashFSWriter

    if not quiet:
        click.echo(f"Source: {source}")
        click.echo(f"Output: {output}")
        click.echo()

    try:
        with HashFSWriter(output, compression_level=level, workers=jobs) as writer:
            file_count = writer.add_directory(source)

            if quiet or file_count == 0:
                result = writer.finalize()
            else:
                with click.progressbar(length=file_count, label="Packing") as bar:
                    result = writer.finalize(lambda index, total, name: bar.update(1))

        if not quiet:
            click.echo()
            click.echo(f"Files:        {result.file_count}")
            click.echo(f"Uncompressed: {result.uncompressed_total} bytes")
            click.echo(f"Compressed:   {result.compressed_total} bytes")
            click.echo(f"Created: {output}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("hash")
@click.argument("paths", nargs=-1, required=True)
def hash_command(paths):
    """Print the HashFS hash of each archive PATH.

    Hashing ignores case, separator style and a leading slash.
    """
    from .hashfs import hash_path

    for path in paths:
        click.echo(f"{hash_path(path):016x}  {path}")


if __name__ == "__main__":
    main()
