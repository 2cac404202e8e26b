"""Club Supply management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py promote --email a@b.org  # Grant administrator access
"""

import argparse
import sys


def _domain():
    from clubsupply.domain import clubsupply

    clubsupply.init()
    return clubsupply


def setup_database():
    from clubsupply.utils.db import setup_db

    domain = _domain()
    print("Creating clubsupply database schema...")
    prepared = setup_db(domain)
    if not prepared:
        print("  No SQL provider configured; nothing to create.")
    print("Done.")


def drop_database():
    from clubsupply.utils.db import drop_db

    domain = _domain()
    print("Dropping clubsupply database schema...")
    dropped = drop_db(domain)
    if not dropped:
        print("  No SQL provider configured; nothing to drop.")
    print("Done.")


def promote(email):
    from clubsupply.access.registration import PromoteCoordinator

    domain = _domain()
    with domain.domain_context():
        profile = domain.process(PromoteCoordinator(email=email), asynchronous=False)
    print(f"{profile['email']} ({profile['club_name']}) now has {profile['access']} access.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Club Supply management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    promote_parser = subparsers.add_parser("promote", help="Grant bosslevel access to a coordinator")
    promote_parser.add_argument("--email", required=True, help="Email of the coordinator account")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "promote":
        from protean.exceptions import ObjectNotFoundError

        try:
            promote(args.email)
        except ObjectNotFoundError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
