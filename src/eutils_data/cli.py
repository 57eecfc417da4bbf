"""
CLI commands for inspecting saved E-utility responses.
"""

import argparse
import sys
import logging
import xml.etree.ElementTree as ET

from .config import EUtil, ParserConfig
from .errors import EUtilsError
from .info import Info
from .link import Link
from .loader import load_eutil

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _load(args):
    config = ParserConfig(wrap_width=args.width) if getattr(args, "width", None) else None
    result = load_eutil(args.eutil, file=args.file, database=getattr(args, "db", None), config=config)
    result.parse()
    return result


def cmd_render(args):
    """Render a saved response as a text table."""
    setup_logging(args.verbose)

    try:
        result = _load(args)
    except (EUtilsError, ET.ParseError, OSError) as e:
        print(f"✗ Failed to read {args.file}: {e}")
        return 1
    print(result.to_string(), end="")
    return 0


def cmd_ids(args):
    """Print the IDs in a saved response, one per line (database names for einfo)."""
    setup_logging(args.verbose)

    try:
        result = _load(args)
    except (EUtilsError, ET.ParseError, OSError) as e:
        print(f"✗ Failed to read {args.file}: {e}")
        return 1

    if isinstance(result, Link):
        ids = result.get_ids(database=args.db)
    elif isinstance(result, Info):
        ids = result.get_databases()
    else:
        ids = result.get_ids()
    logger.debug(f"{len(ids)} IDs in {args.file}")
    for record_id in ids:
        print(record_id)
    return 0


def build_parser():
    """Build the argument parser (exposed for tests)."""
    parser = argparse.ArgumentParser(
        description="NCBI E-utilities response inspection CLI",
        prog="eutils-data"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )
    eutils = [kind.value for kind in EUtil]

    # Render command
    render_parser = subparsers.add_parser(
        "render",
        help="Print a saved response as a text table"
    )
    render_parser.add_argument("eutil", choices=eutils, help="E-utility that produced the file")
    render_parser.add_argument("file", help="Path to the saved XML response")
    render_parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Wrap width for values (default: 80)"
    )
    render_parser.set_defaults(func=cmd_render)

    # IDs command
    ids_parser = subparsers.add_parser(
        "ids",
        help="Print the IDs of a saved response, one per line"
    )
    ids_parser.add_argument("eutil", choices=eutils, help="E-utility that produced the file")
    ids_parser.add_argument("file", help="Path to the saved XML response")
    ids_parser.add_argument(
        "--db",
        default=None,
        help="Only print IDs linked to this database (elink)"
    )
    ids_parser.set_defaults(func=cmd_ids)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
