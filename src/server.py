"""Protean Engine runner for the logistics domain.

With PROTEAN_ENV=production events are processed asynchronously. The Engine
runs the notification fan-out and dispatcher outside the HTTP request path.

Usage:
    python src/server.py
    python src/server.py --test-mode   # drain pending messages and exit
"""

import argparse

from protean.server.engine import Engine


def build_engine(test_mode: bool = False) -> Engine:
    from logistics.domain import logistics

    logistics.init()
    return Engine(logistics, test_mode=test_mode)


def main():
    parser = argparse.ArgumentParser(description="Logistics Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process what is pending, then stop",
    )
    args = parser.parse_args()

    build_engine(test_mode=args.test_mode).run()


if __name__ == "__main__":
    main()
