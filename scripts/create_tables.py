# =============================================================================
# scripts/create_tables.py
# Prints the SQL that creates the tasks and products tables in Supabase
# =============================================================================
"""
The Supabase Python client cannot create tables, so this script prints the
SQL to paste into the Supabase SQL Editor, and optionally checks whether the
tables already exist.

Usage:
    python scripts/create_tables.py                     # development policies
    python scripts/create_tables.py --mode production   # owner-only policies
    python scripts/create_tables.py --check             # query both tables
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from taskhub_core.config import load_settings  # noqa: E402
from taskhub_core.data import get_schema_sql  # noqa: E402
from taskhub_core.data.schema import TABLES  # noqa: E402
from taskhub_core.data.supabase_client import create_supabase_client  # noqa: E402
from taskhub_core.errors import ConfigurationError  # noqa: E402


def print_sql(mode: str) -> None:
    """Print the SQL for manual execution in Supabase SQL Editor."""
    print("=" * 70)
    print(f" SQL TO CREATE TASKHUB TABLES ({mode} policies)")
    print(" Copy this SQL and run it in Supabase SQL Editor")
    print("=" * 70)
    print()
    print(get_schema_sql(mode))
    print("=" * 70)


async def check_tables() -> int:
    """Query each table once; return the number of missing tables."""
    try:
        client = await create_supabase_client(load_settings())
    except ConfigurationError as e:
        print(f"ERROR: {e.message}")
        print("Set SUPABASE_URL and SUPABASE_KEY or fill .taskhub/secrets.toml")
        return len(TABLES)

    missing = 0
    for table in TABLES:
        try:
            response = await client.table(table).select("id").limit(1).execute()
            print(f"[ok]      {table} ({len(response.data)} row sampled)")
        except Exception as e:
            missing += 1
            print(f"[missing] {table}: {e}")
    return missing


def main() -> None:
    parser = argparse.ArgumentParser(description="Create TaskHub tables in Supabase")
    parser.add_argument("--mode", choices=["development", "production"], default="development",
                        help="Row-level security policy set")
    parser.add_argument("--check", action="store_true", help="Check whether the tables exist")
    args = parser.parse_args()

    if args.check:
        sys.exit(1 if asyncio.run(check_tables()) else 0)
    print_sql(args.mode)


if __name__ == "__main__":
    main()
