#!/usr/bin/env python3
import argparse
import asyncio
import logging
import os
import sys

# Add src directory to path
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
sys.path.insert(0, src_path)  # noqa: E402

from core.container import create_container
from domain.exceptions import ServiceError
from domain.provider import ProviderId
from domain.result import Error, Success
from services.config_service import ConfigService
from services.load_balancer import LoadBalancer
from services.usage_tracker import UsageTracker
from services.wallpaper_repository import WallpaperRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallhub",
        description="Browse wallpapers across Unsplash, Pexels, Pixabay and Wallhaven.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--provider",
        choices=[p.value for p in ProviderId],
        default=None,
        help="Pin requests to one provider instead of load balancing.",
    )
    common.add_argument("--page", type=int, default=1)
    common.add_argument("--per-page", type=int, default=20)

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("featured", parents=[common], help="Show featured wallpapers.")
    search = commands.add_parser("search", parents=[common], help="Search wallpapers.")
    search.add_argument("query")
    commands.add_parser("random", parents=[common], help="Show random wallpapers.")
    return parser


def print_outcome(outcome) -> None:
    if isinstance(outcome, Success):
        wallpapers = outcome.data
        print(f"{len(wallpapers)} wallpapers")
        for wallpaper in wallpapers:
            print(f"  {wallpaper.id}  {wallpaper.resolution}  {wallpaper.url}")
    elif isinstance(outcome, Error):
        print(f"error ({outcome.provider.name}): {outcome.message}")
    else:
        print("loading...")


def print_usage(tracker: UsageTracker, balancer: LoadBalancer) -> None:
    usage = balancer.usage()
    print("usage:")
    for provider, counters in tracker.all_stats().items():
        quota = usage[provider]
        print(
            f"  {provider.display_name}: {quota.current}/{quota.limit} reserved, "
            f"{counters.call_count} calls, {counters.success_rate:.0f}% success"
        )


async def run(args: argparse.Namespace) -> int:
    config = ConfigService().load_config()
    container = create_container(config)
    repository = container.get(WallpaperRepository)
    balancer = container.get(LoadBalancer)
    balancer.start()
    provider = ProviderId(args.provider) if args.provider else None

    try:
        if args.command == "featured":
            async for outcome in repository.featured(args.page, args.per_page, provider):
                print_outcome(outcome)
        elif args.command == "search":
            async for outcome in repository.search(
                args.query, args.page, args.per_page, provider=provider
            ):
                print_outcome(outcome)
        else:
            print_outcome(await repository.random(args.per_page, provider=provider))
    finally:
        await repository.close()
        balancer.stop()

    print_usage(container.get(UsageTracker), balancer)
    return 0


def main():
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        sys.exit(asyncio.run(run(args)))
    except ServiceError as e:
        print(f"wallhub: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
