"""
Example script resolving schemas from a running schema registry.

Usage:
    python examples/resolve_schemas.py http://localhost:8081 orders
"""

import logging
import sys

from yasr import RegistryClient
from yasr.exceptions import NotFoundError


def main(url: str, subject: str):
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    with RegistryClient.from_url(url, create_codecs=True) as client:
        print("--- Subjects ---")
        print(client.list_subjects())

        print(f"\n--- Latest '{subject}' ---")
        latest = client.get_latest(subject)
        print(latest)

        print("\n--- Same schema by id (served from cache) ---")
        by_id = client.get_by_id(latest.id)
        print(by_id, "| identical object:", by_id is latest)

        print("\n--- Referenced by ---")
        try:
            print(client.get_latest_referenced_by(subject))
        except NotFoundError as e:
            print(f"not available: {e}")


if __name__ == "__main__":
    main(*sys.argv[1:3])
