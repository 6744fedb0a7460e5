"""Create the default system user and seed lunch places.

The scheduled lunch proposal runs as the default user and never creates it,
so run this once per deployment before enabling the schedule.

Usage (from repository root):
    python backend/scripts/seed_lunch_places.py "Pizza Place" "Noodle Bar"

Usage (from backend directory):
    python scripts/seed_lunch_places.py --username admin "Pizza Place"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make `lunchbot` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from lunchbot.config import get_settings
from lunchbot.db.session import create_db_engine, create_session_factory
from lunchbot.services.identity import DatabaseIdentityResolver, resolve_or_create_user
from lunchbot.services.lunch import add_lunch_place
from lunchbot.services.store import RecordStore


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create the default user and seed lunch places.")
    parser.add_argument(
        "--username",
        default=settings.default_user,
        help=f"Default system username (default: {settings.default_user})",
    )
    parser.add_argument("places", nargs="*", help="Lunch place names to add.")
    return parser.parse_args()


def main() -> None:
    """Seed the default user and places and print a short summary."""

    args = parse_args()
    session_factory = create_session_factory(create_db_engine(get_settings()))

    with session_factory() as db:
        user = resolve_or_create_user(DatabaseIdentityResolver(db), args.username)
        store = RecordStore(db, user_id=user.id)
        replies = [(name, add_lunch_place(store, name).text) for name in args.places]

    print("Seed complete")
    print(f"default_user={user.username} id={user.id}")
    for name, reply in replies:
        print(f"  {name}: {reply}")


if __name__ == "__main__":
    main()
