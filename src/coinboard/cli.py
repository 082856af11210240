"""Command line entry point: ``coinboard prices|history|watch``."""

import argparse
import logging
import sys

from coinboard.config import load_config_from_env
from coinboard.dashboard import Dashboard
from coinboard.display import render_card, render_chart, render_dashboard
from coinboard.errors import PriceFeedError
from coinboard.feed import PriceFeed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coinboard", description="Crypto price dashboard")
    parser.add_argument("--env-file", help="Load settings from this .env file first")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--offline", action="store_true", help="Serve synthetic data only")
    mode.add_argument("--online", action="store_true", help="Allow live API calls")
    parser.add_argument("--coincap-only", action="store_true", help="Skip CoinGecko")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("prices", help="Print current prices once")
    history = sub.add_parser("history", help="Print the Bitcoin price history once")
    history.add_argument("--hours", type=float, default=None)
    watch = sub.add_parser("watch", help="Refresh the dashboard on an interval")
    watch.add_argument("--interval", type=float, default=None, help="Seconds between refreshes")
    watch.add_argument("--hours", type=float, default=None)
    watch.add_argument("--cycles", type=int, default=None, help="Stop after N refreshes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config_from_env(args.env_file)
        if args.offline:
            config.enable_api = False
        elif args.online:
            config.enable_api = True
        if args.coincap_only:
            config.coincap_only = True

        feed = PriceFeed(config)
        if args.command == "prices":
            for snapshot in feed.get_snapshots():
                print(render_card(snapshot))
        elif args.command == "history":
            print(render_chart(feed.get_history(args.hours)))
        else:
            with Dashboard(feed, history_hours=args.hours, refresh_seconds=args.interval) as board:
                board.subscribe(lambda state: print(render_dashboard(state, board.history_hours) + "\n"))
                try:
                    board.run(cycles=args.cycles)
                except KeyboardInterrupt:
                    pass
    except PriceFeedError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
