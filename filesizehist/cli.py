"""Command line interface for filesizehist.

Console scripts target ``filesizehist.cli:main`` and ``python -m filesizehist``
delegates here through ``filesizehist.__main__``.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional, Sequence

from . import cache
from .config import apply_overrides, load_config, parse_image_spec
from .errors import FileSizeHistError
from .metrics import summarize_collection
from .models import DIMENSIONS
from .registry import DatasetRegistry
from .series import VIEWS, view_frame, view_series, view_title

logger = logging.getLogger('filesizehist.cli')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging level based on verbose flag and optional log file."""
    level = logging.DEBUG if verbose else logging.INFO

    # Configure root logger; a no-op for handlers if the host already installed some
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler()
        ]
    )
    logging.getLogger().setLevel(level)

    # Add file handler if log file is specified
    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

        logging.info(f"Logging to file: {log_file}")


def human_size(n: float) -> str:
    for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
        if n < 1000:
            return f"{n:.2f} {unit}"
        n /= 1000
    return f"{n:.2f} EB"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for filesizehist."""
    parser = argparse.ArgumentParser(
        prog='filesizehist',
        description="filesizehist: logarithmic file size histograms of directory trees",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Common arguments
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    parser.add_argument('--log', type=str, help='Log to file')
    parser.add_argument('--config', type=str, help='JSON config file with cache_path and images')
    parser.add_argument('--cache', type=str, help='Cache file path (overrides config and FILESIZEHIST_CACHE)')
    parser.add_argument('--image', action='append', default=[], metavar='NAME=PATH',
                        help='Image to scan; repeat for several. Replaces images from the config file. '
                             'Only scanned when there is no cache or with "build --refresh"')
    parser.add_argument('--rescan-on-corrupt', action='store_true', default=None,
                        help='Rescan instead of failing when the cache file is corrupt')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    build_parser = subparsers.add_parser('build', help='Load the cache or scan the images and write the cache')
    build_parser.add_argument('--refresh', action='store_true',
                              help='Ignore an existing cache and rescan every image')

    show_parser = subparsers.add_parser('show', help='Print the histogram of every image')
    show_parser.add_argument('--json', action='store_true', help='Output summaries in JSON format')

    export_parser = subparsers.add_parser('export', help='Export the series behind a chart view')
    export_parser.add_argument('--view', type=str, choices=sorted(VIEWS), default='line',
                               help='Chart view to export')
    export_parser.add_argument('--dimension', type=str, choices=DIMENSIONS, default='count',
                               help='Per-bucket value: file count or total size')
    export_parser.add_argument('--format', type=str, choices=['json', 'csv'], default='json',
                               help='Output format')
    export_parser.add_argument('--output', '-o', type=str, help='Output file path (default: stdout)')

    subparsers.add_parser('clear-cache', help='Delete the cache file')

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(argv)


def _registry_from_args(args: argparse.Namespace) -> DatasetRegistry:
    config = load_config(args.config)
    config = apply_overrides(
        config,
        cache_path=args.cache,
        images=[parse_image_spec(spec) for spec in args.image],
        rescan_on_corrupt=args.rescan_on_corrupt,
    )
    return DatasetRegistry(config)


def build_command(args: argparse.Namespace) -> int:
    registry = _registry_from_args(args)
    collection = registry.initialize(refresh=getattr(args, 'refresh', False))
    print(f"{len(collection)} image(s), cache: {registry.config.cache_path}")
    for ds in collection:
        print(f"  {ds.name}: {ds.total_file_count} files, {human_size(ds.total_size_bytes)}")
    return 0


def show_command(args: argparse.Namespace) -> int:
    collection = _registry_from_args(args).initialize()
    if args.json:
        print(json.dumps(summarize_collection(collection), indent=2, ensure_ascii=False))
        return 0
    for ds in collection:
        print(f"== {ds.name} ({ds.total_file_count} files, {human_size(ds.total_size_bytes)}) ==")
        df = ds.to_frame()
        print(df.to_string(index=False) if not df.empty else "(no files)")
        print()
    return 0


def export_command(args: argparse.Namespace) -> int:
    collection = _registry_from_args(args).initialize()
    if args.format == 'csv':
        text = view_frame(collection, args.view, args.dimension).to_csv(index=False)
    else:
        payload = {
            "view": args.view,
            "title": view_title(collection, args.view),
            "dimension": args.dimension,
            "series": view_series(collection, args.view, args.dimension),
        }
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    if args.output:
        out_dir = os.path.dirname(os.path.abspath(args.output))
        os.makedirs(out_dir, exist_ok=True)
        with open(args.output, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        logger.info(f"Exported '{args.view}' series to {args.output}")
    else:
        sys.stdout.write(text)
    return 0


def clear_cache_command(args: argparse.Namespace) -> int:
    config = apply_overrides(load_config(args.config), cache_path=args.cache)
    path = config.cache_path
    if cache.exists(path):
        os.remove(path)
        print(f"Removed cache {path}")
    else:
        print(f"No cache at {path}")
    return 0


COMMANDS = {
    'build': build_command,
    'show': show_command,
    'export': export_command,
    'clear-cache': clear_cache_command,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI with optional argv.

    Args:
        argv: Optional list of arguments (if None, use existing sys.argv).

    Returns:
        Exit code: 0 on success, 1 on a filesizehist or OS error, 2 on usage errors.
    """
    try:
        args = parse_args(argv)
    except SystemExit as se:
        return int(se.code) if se.code is not None else 0

    setup_logging(args.verbose, args.log)

    command = COMMANDS.get(args.command)
    if command is None:
        print("Please specify a command. Use --help for more information.", file=sys.stderr)
        return 2

    try:
        return int(command(args))
    except FileSizeHistError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
