# classy/cli.py
"""
mdbook-classy: mdBook preprocessor for kramdown style paragraph class annotations.

Usage:
  mdbook-classy                     Read [context, book] JSON from stdin and
                                    write the processed book to stdout.
  mdbook-classy supports <renderer> Exit 0 if the renderer is supported, 1 if not.

Enable it in book.toml:

  [preprocessor.classy]
"""

import argparse
import logging
import sys

from classy import __version__
from classy.book import dump_book, load_request
from classy.errors import ClassyError
from classy.log import configure_logging
from classy.markdown.config import MDBOOK_VERSION
from classy.preprocessor import Classy

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbook-classy",
        description="A mdbook preprocessor that recognizes kramdown style "
        "paragraph class annotation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    supports = subparsers.add_parser(
        "supports", help="Check whether a renderer is supported by this preprocessor"
    )
    supports.add_argument("renderer", help="Renderer name, e.g. html")
    return parser


def handle_preprocessing(preprocessor, stdin=None, stdout=None) -> None:
    """
    Check compatibility with the calling mdBook, then transform the book.

    A version mismatch is only a warning; the book is processed regardless.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    ctx, book = load_request(stdin)

    if ctx.mdbook_version != MDBOOK_VERSION:
        logger.warning(
            f"The {preprocessor.name} plugin was built against version "
            f"{MDBOOK_VERSION} of mdbook, but we're being called from version "
            f"{ctx.mdbook_version or 'unknown'}"
        )

    processed_book = preprocessor.run(ctx, book)
    dump_book(processed_book, stdout)


def handle_supports(preprocessor, renderer: str) -> int:
    """Exit status for ``supports``: 0 when the renderer is supported."""
    return 0 if preprocessor.supports_renderer(renderer) else 1


def main(argv=None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    preprocessor = Classy()

    if args.command == "supports":
        return handle_supports(preprocessor, args.renderer)

    try:
        handle_preprocessing(preprocessor)
    except (ClassyError, ValueError, OSError) as exc:
        # ValueError covers undecodable stdin as well
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
