"""Storefront database management CLI.

Provides commands to create indexes, drop collections and bootstrap the
administrator account.

Usage:
    python src/manage.py setup-db                              # Create all indexes
    python src/manage.py drop-db                               # Drop all collections
    python src/manage.py seed-admin --email ops@example.com    # Create or promote the admin
"""

import argparse
import sys


def setup_databases(database=None):
    """Create the indexes every collection relies on."""
    from shared.database import ensure_indexes, get_database

    database = database if database is not None else get_database()
    print(f"Creating indexes in {database.name}...")
    ensure_indexes(database)
    print("Done.")


def drop_databases(database=None):
    """Drop every Storefront collection."""
    from shared.database import drop_collections, get_database

    database = database if database is not None else get_database()
    print(f"Dropping collections in {database.name}...")
    drop_collections(database)
    print("Done.")


def seed_admin(email=None, name=None):
    """Create (or promote) the administrator account."""
    from identity.account.bootstrap import bootstrap_admin
    from identity.domain import identity
    from shared.config import get_settings

    settings = get_settings()
    email = email or settings.admin_email
    name = name or settings.admin_name or "Administrator"
    if not email:
        print("An admin email is required (--email or ADMIN_EMAIL).", file=sys.stderr)
        return None

    identity.init()
    with identity.domain_context():
        user = bootstrap_admin(email=email, name=name)
    print(f"Admin ready: {user.email} ({user.id})")
    return user


def main(argv=None):
    from shared.logging import configure_logging

    configure_logging()

    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database indexes")
    subparsers.add_parser("drop-db", help="Drop all database collections")

    seed_parser = subparsers.add_parser("seed-admin", help="Create or promote the administrator account")
    seed_parser.add_argument("--email", help="Admin email (default: $ADMIN_EMAIL)")
    seed_parser.add_argument("--name", help="Admin display name (default: $ADMIN_NAME)")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "seed-admin":
        if seed_admin(args.email, args.name) is None:
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
