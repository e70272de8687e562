"""Welcome Winks management CLI.

Creates and drops database schemas for both domains and seeds the
default scoring configuration.

Usage:
    python src/manage.py setup-db                        # Create all tables
    python src/manage.py setup-db --domain ratings       # Only the ratings tables
    python src/manage.py drop-db                         # Drop all tables
    python src/manage.py init-scoring                    # Seed default scoring + questions
"""

import argparse
import sys

DOMAIN_NAMES = ["ratings", "notifications"]


def _domains(names=None):
    from notifications.domain import notifications
    from ratings.domain import ratings

    all_domains = {"ratings": ratings, "notifications": notifications}
    return {name: all_domains[name] for name in names} if names else all_domains


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from ratings.utils.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from ratings.utils.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def initialize_scoring(created_by="system"):
    """Seed the default scoring configuration and survey questions."""
    from ratings.domain import ratings
    from ratings.scoring_config.management import InitializeDefaultScoring

    ratings.init()
    with ratings.domain_context():
        config_id = ratings.process(InitializeDefaultScoring(created_by=created_by), asynchronous=False)
    print(f"Active scoring configuration: {config_id}")


def main():
    parser = argparse.ArgumentParser(description="Welcome Winks management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    scoring_parser = subparsers.add_parser("init-scoring", help="Seed the default scoring configuration")
    scoring_parser.add_argument("--created-by", default="system")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "init-scoring":
        initialize_scoring(args.created_by)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
