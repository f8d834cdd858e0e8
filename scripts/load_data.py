#!/usr/bin/env python
"""
Load surveillance CSV extracts into the Epi Analytics DuckDB database.

Expects one file per table in the data directory, named ``<table>.csv``
(e.g. ``dim_region.csv``, ``fact_cases_weekly.csv``).

Usage:
    epi-load [options]

Options:
    --data-dir PATH     Directory holding the CSV extracts
    --db PATH           Custom database path
    --tables NAMES      Comma-separated subset of tables to load
    --replace           Delete existing rows before loading each table
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

from config import config
from config.logging_config import setup_logging, get_logger
from src.database import get_connection, initialize_database, get_table_counts
from src.ingestion import LOAD_ORDER, load_directory, check_population_edge_year


def main(argv=None) -> int:
    """Main entry point for the CSV load."""
    parser = argparse.ArgumentParser(
        description="Load surveillance CSV extracts into DuckDB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=config.data.raw_path,
        help="Directory holding the CSV extracts",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=config.database.path,
        help="Custom database path",
    )
    parser.add_argument(
        "--tables",
        type=str,
        default=None,
        help=f"Comma-separated tables to load (default: all of {', '.join(LOAD_ORDER)})",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete existing rows before loading each table",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.app.log_level,
        help="Logging level",
    )
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)
    logger = get_logger("load_data")

    tables = None
    if args.tables:
        tables = [t.strip() for t in args.tables.split(",") if t.strip()]
        unknown = [t for t in tables if t not in LOAD_ORDER]
        if unknown:
            parser.error(f"unknown tables: {', '.join(unknown)}")

    start_time = datetime.now()
    logger.info("=" * 60)
    logger.info("Epi Analytics - Data Load")
    logger.info(f"Data directory: {args.data_dir}")
    logger.info(f"Database path: {args.db}")
    logger.info("=" * 60)

    if not args.data_dir.is_dir():
        logger.error(f"Data directory does not exist: {args.data_dir}")
        return 1

    with get_connection(args.db) as conn:
        initialize_database(conn)
        results = load_directory(conn, args.data_dir, tables=tables, replace=args.replace)
        check_population_edge_year(conn)
        counts = get_table_counts(conn)

    failed = [r for r in results.values() if not r.success]

    logger.info("-" * 40)
    for table, count in counts.items():
        logger.info(f"  {table}: {count:,} rows" if count is not None else f"  {table}: missing")
    logger.info(f"Completed in {(datetime.now() - start_time).total_seconds():.1f}s")

    if failed:
        for result in failed:
            for message in result.error_messages:
                logger.error(message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
