"""
MapDraw CLI - Main entry point.

Inspect and query stored MapDraw feature payloads from the command line.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from mapdraw_features.config import MapDrawConfig, load_config
from mapdraw_features.logging import configure_logging
from mapdraw_features.query import FeatureQuery
from mapdraw_features.schemas import BoundsRecord, normalize


def read_payload(source: str) -> str:
    """
    Read a feature payload from a file, or stdin when source is "-".

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if source == "-":
        return sys.stdin.read()

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Features file not found: {source}")
    return path.read_text(encoding="utf-8")


def emit(data: Any, indent: Optional[int] = None) -> None:
    print(json.dumps(data, indent=indent))


def command_normalize(args: argparse.Namespace, config: MapDrawConfig) -> None:
    collection = normalize(read_payload(args.file))
    emit(collection.to_dict(), args.indent)


def command_query(args: argparse.Namespace, config: MapDrawConfig) -> None:
    query = FeatureQuery(normalize(read_payload(args.file)))
    type_filter = args.type or None

    if args.index is not None:
        feature = query.get_feature(type_filter, args.index, args.lnglat)
        emit(feature.to_dict() if feature is not None else None, args.indent)
        return

    emit(query.query_features(type_filter, args.lnglat).to_dict(), args.indent)


def command_bounds(args: argparse.Namespace, config: MapDrawConfig) -> None:
    collection = normalize(read_payload(args.file))
    extent = BoundsRecord.from_features(collection, zoom=config.default_zoom)
    if extent is None:
        emit(None, args.indent)
        return

    emit({
        'bounds': extent.bounds,
        'center': extent.center,
        'zoom': extent.zoom,
        'has_bounds': extent.has_bounds(),
    }, args.indent)


COMMANDS = {
    'normalize': command_normalize,
    'query': command_query,
    'bounds': command_bounds,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mapdraw",
        description="MapDraw CLI - Inspect and query drawn map features",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Re-emit a stored payload as a FeatureCollection
  mapdraw normalize features.json

  # Polygons containing a coordinate
  mapdraw query features.json --type Polygon --type MultiPolygon --lnglat 10.0,50.0

  # First point feature
  mapdraw query features.json --type Point --index 0

  # Extent of all features
  mapdraw bounds features.json
"""
    )

    parser.add_argument(
        "--config",
        help="Path to YAML config (default: built-in defaults)"
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)"
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent JSON output by N spaces"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    normalize_cmd = subparsers.add_parser('normalize', help='Print the normalized FeatureCollection')
    normalize_cmd.add_argument('file', help='Features JSON file ("-" for stdin)')

    query_cmd = subparsers.add_parser('query', help='Filter features by type and/or coordinate')
    query_cmd.add_argument('file', help='Features JSON file ("-" for stdin)')
    query_cmd.add_argument(
        '--type',
        action='append',
        help='Geometry type to keep (repeatable, or "Point|MultiPoint")'
    )
    query_cmd.add_argument('--lnglat', help='Candidate coordinate as "lng,lat"')
    query_cmd.add_argument('--index', type=int, help='Print only the N-th match (0-based)')

    bounds_cmd = subparsers.add_parser('bounds', help='Print the extent of all features')
    bounds_cmd.add_argument('file', help='Features JSON file ("-" for stdin)')

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config(args.config) if args.config else MapDrawConfig()
        if args.log_level:
            config = MapDrawConfig(
                default_zoom=config.default_zoom,
                strict=config.strict,
                log_level=args.log_level,
            )
        configure_logging(config.logging_level)

        COMMANDS[args.command](args, config)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
