"""Logistics management CLI.

Usage:
    python src/manage.py setup-db              # Create all tables
    python src/manage.py drop-db               # Drop all tables
    python src/manage.py retry-notifications   # Re-queue failed notifications
"""

import argparse
import sys


def _domain():
    from logistics.domain import logistics

    logistics.init()
    return logistics


def setup_database():
    from logistics.utils.db import setup_db

    print("Creating logistics database schema...")
    providers = setup_db(_domain())
    print(f"  schema ready ({', '.join(providers) or 'no relational providers'}).")


def drop_database():
    from logistics.utils.db import drop_db

    print("Dropping logistics database schema...")
    providers = drop_db(_domain())
    print(f"  schema dropped ({', '.join(providers) or 'no relational providers'}).")


def retry_notifications(batch_size: int):
    from logistics.notification.retry import RetryFailedNotifications

    domain = _domain()
    with domain.domain_context():
        retried = domain.process(RetryFailedNotifications(batch_size=batch_size), asynchronous=False)
    print(f"Re-queued {retried or 0} failed notification(s).")


def main():
    parser = argparse.ArgumentParser(description="Logistics management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    retry_parser = subparsers.add_parser("retry-notifications", help="Re-queue failed notifications")
    retry_parser.add_argument("--batch-size", type=int, default=100)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "retry-notifications":
        retry_notifications(args.batch_size)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
