#!/usr/bin/env python3
"""
Create the marketplace schema and load the demo data set.

Eight profiles, nine contracts and fourteen jobs (see
marketplace_kernel/db/seed.py).  With --drop, existing tables are dropped
first, so the script can be re-run against the same database.

Usage:
  python3 scripts/seed_db.py [--database-url URL] [--drop]

The database URL defaults to the configured one (MARKETPLACE_DATABASE_URL
or marketplace_config/defaults.yaml).
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create schema and load demo data")
    p.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: configured database.url)",
    )
    p.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables before creating them",
    )
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    from sqlalchemy.exc import SQLAlchemyError

    from marketplace_config import get_active_config
    from marketplace_kernel.db.engine import (
        create_engine_from_url,
        create_tables,
        drop_tables,
        make_session_factory,
        session_scope,
    )
    from marketplace_kernel.db.seed import CONTRACTS, JOBS, PROFILES, seed_demo_data
    from marketplace_kernel.logging_config import configure_logging

    config = get_active_config()
    configure_logging(level=config.log_level)
    database_url = args.database_url or config.database.url

    print()
    print("  [1/3] Connecting...")
    engine = create_engine_from_url(database_url, echo=config.database.echo)

    try:
        if args.drop:
            print("  [2/3] Dropping and recreating schema...")
            drop_tables(engine)
        else:
            print("  [2/3] Creating schema...")
        create_tables(engine)

        print("  [3/3] Loading demo data...")
        with session_scope(make_session_factory(engine)) as session:
            seed_demo_data(session)
    except SQLAlchemyError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        if not args.drop:
            print("  Tables may already hold data; re-run with --drop.", file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    print()
    print(
        f"  Done. {len(PROFILES)} profiles, {len(CONTRACTS)} contracts, "
        f"{len(JOBS)} jobs."
    )
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
