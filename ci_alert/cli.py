"""
ci-alert command line entry point.

Usage:
    ci-alert [--owner OWNER] [--repo REPO] [--author LOGIN] [--interval SECONDS]
             [--window-days DAYS] [--exclude CONTEXT ...] [--once] [--no-refresh] [-v]
"""

import argparse
import logging
import signal
import sys

from ci_alert.client import GitHubClient
from ci_alert.config import WatchConfig
from ci_alert.exceptions import ConfigurationError
from ci_alert.logging import configure_logging, get_logger
from ci_alert.notifier import TerminalNotifier
from ci_alert.watcher import PRWatcher

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-alert",
        description="Desktop alerts for CI failures and merges on your recent pull requests",
    )
    parser.add_argument("--owner", help="Repository owner")
    parser.add_argument("--repo", help="Repository name")
    parser.add_argument("--author", help="Pull request author login")
    parser.add_argument("--interval", type=float, dest="poll_interval", help="Seconds between rounds (default: 360)")
    parser.add_argument("--window-days", type=int, help="Only track PRs created within this many days (default: 7)")
    parser.add_argument(
        "--exclude",
        nargs="*",
        dest="excluded_contexts",
        metavar="CONTEXT",
        help="CI contexts that never count as failures",
    )
    parser.add_argument("--failure-repeat", type=int, help="Times each failure alert is posted (default: 3)")
    parser.add_argument("--merge-repeat", type=int, help="Times each merge alert is posted (default: 1)")
    parser.add_argument("--notifier", default=TerminalNotifier.DEFAULT_BINARY, help="terminal-notifier executable")
    parser.add_argument("--once", action="store_true", help="Run a single round and exit")
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Fetch the PR list once at startup instead of every round",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests")
    return parser


def load_config(args: argparse.Namespace) -> WatchConfig:
    """Defaults, then environment, then command line flags."""
    return WatchConfig.from_env().with_overrides(
        owner=args.owner,
        repo=args.repo,
        author=args.author,
        poll_interval=args.poll_interval,
        window_days=args.window_days,
        excluded_contexts=args.excluded_contexts,
        failure_repeat=args.failure_repeat,
        merge_repeat=args.merge_repeat,
        refresh_each_round=False if args.no_refresh else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        http_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        config = load_config(args)
        client = GitHubClient.from_env(timeout=config.request_timeout)
    except ConfigurationError as e:
        logger.error("%s", e.message)
        return 1

    notifier = TerminalNotifier(binary=args.notifier, repeat_interval=config.repeat_interval)

    with client:
        watcher = PRWatcher(client, notifier, config)

        def handle_signal(signum: int, frame: object) -> None:
            logger.info("Received signal %d, shutting down...", signum)
            watcher.stop()

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        watcher.run_forever(max_rounds=1 if args.once else None)

    return 0


if __name__ == "__main__":
    sys.exit(main())
