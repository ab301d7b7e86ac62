#!/usr/bin/env python3
"""
Create (or recreate) the inventory schema in the configured database.

Reads the active configuration (sets/default.yaml plus DB_* /
INVENTORY_DATABASE_URL overrides) unless --config or --url is given.

Usage:
    python3 scripts/init_db.py
    python3 scripts/init_db.py --url sqlite:///inventory.db --drop
    DB_NAME=nauticstock_dev python3 scripts/init_db.py
"""

import argparse
import sys
from pathlib import Path

from inventory_config import get_active_config
from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_config,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.logging_config import configure_logging


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Create the inventory tables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: inventory_config/sets/default.yaml)",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="SQLAlchemy database URL; overrides the configuration",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables first",
    )
    args = parser.parse_args()

    config = get_active_config(args.config)
    configure_logging(level=config.logging.level)

    if args.url:
        engine = init_engine_from_url(args.url)
    else:
        engine = init_engine_from_config(config.database)

    try:
        if args.drop:
            drop_tables()
        create_tables()
    except Exception as exc:
        print(f"ERROR: could not create tables: {exc}", file=sys.stderr)
        return 1
    finally:
        reset_engine()

    print(f"Schema ready on {engine.url.render_as_string(hide_password=True)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
