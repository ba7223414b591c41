"""
CLI entry point for ZipReel.

Usage:
    python main.py demo
    python main.py api [--host 0.0.0.0] [--port 8000]
"""

import argparse
import sys
from typing import List

from zipreel.cache.stats import CacheLevel
from zipreel.catalog.query import SearchType
from zipreel.config import get_settings
from zipreel.core.coordinator import SearchResult
from zipreel.core.service import SearchService
from zipreel.exceptions import ZipReelException
from zipreel.observability import setup_logging


def _print_results(title: str, results: List[SearchResult]) -> None:
    print(f"\n{title}")
    for result in results:
        print(f"  {result}")


def cmd_demo(args):
    """Replay a short search session and print where each answer came from."""
    service = SearchService()
    try:
        service.add_movie("1", "Inception", "Sci-Fi", 2010, 9.5)
        service.add_movie("2", "The Dark Knight", "Action", 2008, 9.0)
        service.add_user("1", "John", "Action")

        _print_results(
            "First search for Sci-Fi movies:",
            service.search("1", SearchType.GENRE, "Sci-Fi"),
        )
        _print_results(
            "Second search for Sci-Fi movies:",
            service.search("1", SearchType.GENRE, "Sci-Fi"),
        )

        service.add_user("2", "Alice", "Sci-Fi")
        _print_results(
            "Search for Sci-Fi movies from different user:",
            service.search("2", SearchType.GENRE, "Sci-Fi"),
        )
        _print_results(
            "Searching for movies from 2008:",
            service.search("1", SearchType.YEAR, "2008"),
        )
        _print_results(
            "Second search for 2008 movies:",
            service.search("1", SearchType.YEAR, "2008"),
        )
        _print_results(
            "Multi-criteria search:",
            service.search_multi("1", "Action", 2008, 8.0),
        )
        _print_results(
            "Second multi-criteria search:",
            service.search_multi("1", "Action", 2008, 8.0),
        )

        print("\nCache Statistics:")
        print(service.coordinator.stats)

        service.clear_cache(CacheLevel.TIER1)
        print(f"\n{CacheLevel.TIER1.value} cache cleared successfully")
        _print_results(
            "After clearing Tier 1 cache, searching for Sci-Fi movies:",
            service.search("1", SearchType.GENRE, "Sci-Fi"),
        )

        print("\nFinal Cache Statistics:")
        print(service.coordinator.stats)
    except ZipReelException as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def cmd_api(args):
    """Start the FastAPI server."""
    import uvicorn

    from zipreel.api.app import create_app

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port
    print(f"Starting ZipReel API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port)


def main():
    parser = argparse.ArgumentParser(
        description="ZipReel - Movie search with two-tier caching"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("demo", help="Run the demo search session")

    p_api = subparsers.add_parser("api", help="Start REST API server")
    p_api.add_argument("--host", default=None)
    p_api.add_argument("--port", type=int, default=None)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()

    commands = {
        "demo": cmd_demo,
        "api": cmd_api,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
