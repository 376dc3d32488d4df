"""Shipping connector management CLI.

Provides commands to create and drop the database schema, and to run one
tracking reconciliation pass (typically from cron).

Usage:
    python src/manage.py setup-db         # Create all tables
    python src/manage.py drop-db          # Drop all tables
    python src/manage.py update-tracking  # Poll the carrier for unfinished shipments
"""

import argparse
import sys


def _init_domain():
    from shipping.domain import shipping

    shipping.init()
    return shipping


def setup_database():
    from shipping.utils.db import setup_db

    domain = _init_domain()
    print("Creating shipping database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from shipping.utils.db import drop_db

    domain = _init_domain()
    print("Dropping shipping database schema...")
    drop_db(domain)
    print("Done.")


def update_tracking():
    """Run one reconciliation pass and report its summary."""
    from shipping.carrier import get_carrier
    from shipping.config import get_config
    from shipping.marketplace import get_notifier
    from shipping.shipment.persistence import PersistenceGateway
    from shipping.shipment.tracking import TrackingReconciler, TrackingStatusLookup
    from shipping.utils.logging import configure_logging

    configure_logging()
    domain = _init_domain()
    config = get_config()

    with domain.domain_context():
        reconciler = TrackingReconciler(
            config,
            TrackingStatusLookup(config, get_carrier()),
            PersistenceGateway(),
            get_notifier(),
        )
        summary = reconciler.reconcile()

    print(
        f"Checked {summary.checked} shipment(s): {summary.updated} updated, "
        f"{summary.skipped} unchanged, {summary.failed} failed."
    )
    return summary


def main():
    parser = argparse.ArgumentParser(description="Shipping connector management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("update-tracking", help="Reconcile tracking status of unfinished shipments")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "update-tracking":
        update_tracking()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
