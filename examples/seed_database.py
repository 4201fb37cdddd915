#!/usr/bin/env python3
"""
Create a claimable database and seed it from an SQL file

Usage:
    python examples/seed_database.py
    python examples/seed_database.py path/to/schema.sql

Requires the examples extra: pip install instagres-python-sdk[examples]
"""

import sys
import time
from pathlib import Path

import psycopg

from instagres_client import InstagresClient, InstagresError, parse_connection_string

DEFAULT_SCHEMA = Path(__file__).parent / "sample_schema.sql"


def main() -> int:
    sql_file = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SCHEMA
    if not sql_file.is_file():
        print(f"✗ SQL file not found: {sql_file}")
        return 1

    try:
        print("Step 1: Creating database...")
        start = time.monotonic()
        with InstagresClient() as client:
            database = client.create_claimable_database("seeding-example")
        print(f"  ✓ Database created in {round((time.monotonic() - start) * 1000)}ms\n")

        print("Step 2: Connecting...")
        parsed = parse_connection_string(database.connection_string)
        with psycopg.connect(**parsed.connect_kwargs()) as conn:
            print("  ✓ Connected\n")

            print(f"Step 3: Executing SQL from {sql_file}...")
            start = time.monotonic()
            conn.execute(sql_file.read_text(encoding="utf-8"))
            conn.commit()
            print(f"  ✓ SQL executed in {round((time.monotonic() - start) * 1000)}ms\n")

            print("Step 4: Verifying data...")
            for table in ("users", "posts"):
                count = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                print(f"  ✓ {table}: {count} rows")

    except InstagresError as e:
        print(f"✗ {e.kind.value}: {e}")
        return 1
    except psycopg.Error as e:
        print(f"✗ Database error: {e}")
        return 1

    print(f"\nConnection String:\n  {database.connection_string}\n")
    print(f"Claim URL:\n  {database.claim_url}\n")
    print(f"Expires At:\n  {database.expires_at}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
