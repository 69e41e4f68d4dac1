#!/usr/bin/env python
"""
Export the records matching a shared filter link.

Reads a CSV or JSON record file, applies the filters encoded in a query
string (as copied from the portal URL) for one module, and writes the
matching rows with their filters to the exports directory.

Usage:
    python scripts/export_filtered.py RECORDS --query QUERY [options]

Options:
    --module NAME       Filter module (default: configured default module)
    --query QUERY       Query string, e.g. 'status=["active"]&search="alpha"'
    --format FMT        json, csv or xlsx (default: json)
    --output-dir PATH   Custom exports directory
    --log-level LEVEL   Logging level (default: VAULT_FILTERS_LOG_LEVEL)
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

import pandas as pd

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.logging_config import setup_logging, get_logger
from src.filtering import FilterError, FilterExporter, FilterManager, InMemoryLocation


def load_records(path: Path) -> pd.DataFrame:
    """Read records from a CSV or JSON (array of objects) file."""
    if path.suffix.lower() == ".json":
        return pd.read_json(path, orient="records")
    return pd.read_csv(path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export records matching a filter link")
    parser.add_argument("records", type=Path, help="CSV or JSON record file")
    parser.add_argument(
        "--module",
        default=config.filters.default_module,
        help="Filter module",
    )
    parser.add_argument("--query", default="", help="Encoded filter query string")
    parser.add_argument(
        "--format",
        choices=["json", "csv", "xlsx"],
        default="json",
        help="Export format",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.data.exports_path,
        help="Custom exports directory",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.logging.level.upper(),
        help="Logging level",
    )

    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level, log_file=config.logging.log_file)
    logger = get_logger("export_filtered")

    try:
        # Filters come only from --query
        settings = replace(config.filters, url_sync=True)
        manager = FilterManager(args.module, location=InMemoryLocation(args.query), settings=settings)
        if manager.dropped_params:
            logger.warning(f"Ignored parameters: {', '.join(sorted(manager.dropped_params))}")
        logger.info(f"Filters: {manager.summary()}")

        df = load_records(args.records)
        path = manager.export(df, exporter=FilterExporter(args.output_dir), fmt=args.format)
    except (FilterError, OSError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        return 1

    logger.info(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
