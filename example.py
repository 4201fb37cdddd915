#!/usr/bin/env python3
"""
Example usage of the Instagres Python SDK

Usage:
    python example.py
    python example.py my-custom-referrer
"""

import sys
import time

from instagres_client import InstagresClient, InstagresError, parse_connection_string


def main() -> int:
    referrer = sys.argv[1] if len(sys.argv) > 1 else "instagres-python"

    print(f"Creating database (referrer: {referrer})...")

    try:
        with InstagresClient() as client:
            start = time.monotonic()
            database = client.create_claimable_database(referrer)
            duration = round((time.monotonic() - start) * 1000)

        print(f"✓ Database created in {duration}ms\n")
        print(f"Connection String:\n  {database.connection_string}\n")
        print(f"Claim URL:\n  {database.claim_url}\n")
        print(f"Expires At:\n  {database.expires_at}\n")

        parsed = parse_connection_string(database.connection_string)
        print(f"DSN:\n  {parsed.dsn}")
        print(f"User:\n  {parsed.user}")

    except InstagresError as e:
        print(f"✗ {e.kind.value}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
