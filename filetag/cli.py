"""
cli.py
Command-line interface for filetag.
Parses arguments, loads settings, and runs exactly one operation.
"""
from __future__ import annotations

import argparse
import logging
import sys
from functools import partial

import anyio

from .__meta__ import __summary__, __version__
from .copy_strategies import TagStrategy
from .errors import DigestMismatchError, TagError
from .filetag import Tagger
from .reporting import Reporter
from .settings import Settings

logger = logging.getLogger(__name__)

NOSYNC_SUFFIX = "-nosync"

TAG_OPERATIONS = {
    "file": "copy a file to its tagged name",
    "file-inplace": "rename a file to its tagged name",
    "folder": "zip a folder and rename the archive to its tagged name",
}


class TagArgumentParser(argparse.ArgumentParser):
    """Reports usage errors on stdout with the `E:` prefix."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"E: {message}", file=sys.stdout, flush=True)
        self.exit(2)


def build_parser() -> argparse.ArgumentParser:
    ap = TagArgumentParser(
        prog="tag",
        description=f"tag: {__summary__}",
        epilog="Append -nosync to file, file-inplace or folder to skip syncing.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="operation", metavar="operation", required=True)

    for name, help_text in TAG_OPERATIONS.items():
        for op in (name, name + NOSYNC_SUFFIX):
            sp = sub.add_parser(op, help=help_text if op == name else argparse.SUPPRESS)
            sp.add_argument("path", help="file or folder to tag")

    sp = sub.add_parser("verify", help="check a tagged file's name against its content")
    sp.add_argument("path", help="tagged file")

    sp = sub.add_parser("fetch", help="copy matching files from a location here")
    sp.add_argument("pattern", help="substring of the file names to fetch")
    sp.add_argument("location", help="location name from the sync manifest")

    sp = sub.add_parser("seek", help="list matching files in every location")
    sp.add_argument("pattern", help="substring of the file names to look for")

    sub.add_parser("balance", help="reconcile sync locations (not implemented)")
    return ap


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


async def dispatch(args: argparse.Namespace, reporter: Reporter) -> int:
    operation = args.operation
    nosync = operation.endswith(NOSYNC_SUFFIX)
    if nosync:
        operation = operation[: -len(NOSYNC_SUFFIX)]

    settings = Settings.load(nosync=nosync)
    configure_logging(settings.log_level)
    tagger = Tagger(settings, reporter)

    match operation:
        case "file":
            await tagger.tag(args.path, TagStrategy.COPY)
        case "file-inplace":
            await tagger.tag(args.path, TagStrategy.IN_PLACE)
        case "folder":
            await tagger.tag_folder(args.path)
        case "verify":
            if not await tagger.verify(args.path):
                reporter.line(f"FAIL: {args.path}")
                return 1
            reporter.line(f"OK: {args.path}")
        case "fetch":
            await tagger.fetch(args.pattern, args.location)
        case "seek":
            await tagger.seek(args.pattern)
        case "balance":
            await tagger.balance()
    return 0


def report_error(reporter: Reporter, exc: TagError) -> None:
    reporter.error(str(exc))
    if isinstance(exc, DigestMismatchError):
        if exc.removed:
            reporter.warning(f"Removed corrupt copy {exc.dest}")
        else:
            reporter.warning(f"Could not remove corrupt copy {exc.dest}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    reporter = Reporter()

    try:
        return anyio.run(partial(dispatch, args, reporter))
    except TagError as exc:
        report_error(reporter, exc)
        return 1
    except KeyboardInterrupt:
        reporter.warning("Interrupted")
        return 130
    except Exception as exc:
        logger.debug("unexpected error", exc_info=True)
        reporter.error(f"Unexpected error: {exc}")
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
