#!/usr/bin/env python
"""
Command-line interface for the street importer

Usage:
    python cli.py import --boundary "Torrent, Valencia"
    python cli.py batch --input boundaries.txt
"""

import os
import sys
import json
import time
import argparse
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from streetwalk.config import load_env_files, PipelineConfig
from streetwalk.exceptions import StreetImportError
from streetwalk.collectors.osm import UnnamedWayPolicy
from streetwalk.pipeline import StreetImportPipeline


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_config(args) -> PipelineConfig:
    """Config read from the environment, with command-line overrides applied"""
    base = PipelineConfig()
    overrides = {}
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.cache_dir:
        overrides["cache_dir"] = args.cache_dir
    if args.database_url:
        overrides["store"] = replace(base.store, database_url=args.database_url)
    return replace(base, **overrides)


def unnamed_policy_from_args(args) -> UnnamedWayPolicy:
    if args.per_way_unnamed:
        return UnnamedWayPolicy.PER_WAY
    if args.keep_unnamed:
        return UnnamedWayPolicy.SKIP
    return UnnamedWayPolicy.PRUNE


def make_pipeline(args) -> StreetImportPipeline:
    pipeline = StreetImportPipeline(config=build_config(args))
    pipeline.store.create_schema()
    return pipeline


def cmd_import(args):
    """Import streets for a single boundary"""
    setup_logging(args.verbose)

    try:
        pipeline = make_pipeline(args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        result = pipeline.run(args.boundary, unnamed_policy=unnamed_policy_from_args(args))
    except StreetImportError as e:
        logger.error(f"Import failed: {e}")
        return 1

    logger.info(f"✓ Imported streets for {args.boundary or pipeline.config.default_boundary}")
    logger.info(f"  Created streets: {result.created_streets}")
    logger.info(f"  Updated streets: {result.updated_streets}")
    logger.info(f"  Upserted segments: {result.upserted_segments}")
    logger.info(f"  Pruned unnamed: {result.pruned_unnamed}")

    if args.json:
        print(json.dumps(result.model_dump(by_alias=True), indent=2))

    return 0


def read_boundaries(path: str):
    """One boundary per line; blank lines and # comments are ignored"""
    boundaries = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                boundaries.append(line)
    return boundaries


def cmd_batch(args):
    """Import streets for every boundary listed in a file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    boundaries = read_boundaries(args.input)
    if not boundaries:
        logger.error("No boundaries found in input file")
        return 1

    try:
        pipeline = make_pipeline(args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    policy = unnamed_policy_from_args(args)
    success = 0
    failed = 0

    for i, boundary in enumerate(boundaries, 1):
        logger.info(f"[{i}/{len(boundaries)}] {boundary}")
        try:
            result = pipeline.run(boundary, unnamed_policy=policy)
            logger.info(f"  ✓ {result.created_streets} created, {result.updated_streets} updated, "
                        f"{result.upserted_segments} segments")
            success += 1
        except StreetImportError as e:
            logger.error(f"  ✗ Failed: {e}")
            failed += 1

        # Rate limiting
        if i < len(boundaries):
            time.sleep(args.delay)

    logger.info(f"Complete: {success} succeeded, {failed} failed")
    return 0 if failed == 0 else 1


def main(argv=None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    common.add_argument("--database-url", help="SQLAlchemy database URL (default: STREETWALK_DATABASE_URL)")
    common.add_argument("--cache-dir", help="Cache raw Overpass responses in this directory")
    common.add_argument("--workers", type=int, help="Worker threads for street upserts")
    unnamed = common.add_mutually_exclusive_group()
    unnamed.add_argument("--keep-unnamed", action="store_true",
                         help="Do not prune previously imported unnamed streets")
    unnamed.add_argument("--per-way-unnamed", action="store_true",
                         help="Import each unnamed way as its own street")

    parser = argparse.ArgumentParser(
        description="OpenStreetMap street importer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Import one municipality:
    python cli.py import --boundary "Torrent, Valencia"

  Import every boundary listed in a file:
    python cli.py batch --input boundaries.txt --delay 10
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Import command
    import_parser = subparsers.add_parser("import", parents=[common], help="Import streets for a boundary")
    import_parser.add_argument("--boundary", "-b", help='Boundary name (e.g., "Torrent, Valencia")')
    import_parser.add_argument("--json", action="store_true", help="Print result as JSON to stdout")
    import_parser.set_defaults(func=cmd_import)

    # Batch command
    batch_parser = subparsers.add_parser("batch", parents=[common], help="Import streets for many boundaries")
    batch_parser.add_argument("--input", "-i", required=True, help="Text file with one boundary per line")
    batch_parser.add_argument("--delay", type=float, default=5.0, help="Delay between boundaries (seconds)")
    batch_parser.set_defaults(func=cmd_batch)

    args = parser.parse_args(argv)

    # Local overrides first; neither replaces variables already set
    load_env_files(".env.local", ".env")

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
