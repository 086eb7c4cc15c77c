"""
Seed the record store with sample users.

Posts a few {name, email} rows to /api/userdata so the data page has
something to show.

Run: python scripts/seed_user_data.py [base_url]
"""

import os
import sys

import httpx
from dotenv import load_dotenv

load_dotenv()

SAMPLE_USERS = [
    {"name": "John Doe", "email": "john.doe@example.com"},
    {"name": "Jane Smith", "email": "jane.smith@example.com"},
    {"name": "Bob Wilson", "email": "bob.wilson@example.com"},
]


def main() -> int:
    base_url = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("RECORD_STORE_URL", "http://localhost:8000")
    endpoint = base_url.rstrip("/") + "/api/userdata"

    print(f"Seeding {endpoint}")
    failures = 0
    with httpx.Client(timeout=10.0) as client:
        for user in SAMPLE_USERS:
            try:
                response = client.post(endpoint, json=user)
                response.raise_for_status()
                print(f"  + {user['email']}")
            except httpx.HTTPError as e:
                print(f"  ! {user['email']}: {e}")
                failures += 1

        listing = client.get(endpoint)
        if listing.is_success:
            print(f"\nRecord store now holds {len(listing.json())} users")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
