"""Protean Engine runner for the Welcome Winks domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

Usage:
    python src/server.py                        # Run both domain engines
    python src/server.py --domain ratings       # Run only the ratings engine
    python src/server.py --domain notifications # Run only the notifications engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["ratings", "notifications"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "ratings":
        from ratings.domain import ratings

        ratings.init()
        return ratings
    elif name == "notifications":
        from notifications.domain import notifications

        notifications.init()
        return notifications
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Welcome Winks Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
