#!/usr/bin/env python3
"""
Reddit Watch - Main Entry Point

Snapshot or monitor the authenticated user's private message feeds.

Usage:
    python run.py snapshot inbox                      # Save the inbox to data/inbox_<time>.json
    python run.py snapshot sent --output sent.json    # Save to a chosen file
    python run.py monitor unread --duration 300       # Log new/removed unread messages for 5 minutes
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from datetime import datetime
from pathlib import Path

# Add modules to path
sys.path.insert(0, str(Path(__file__).parent))

from reddit_client import ChangeEvent, Reddit
from reddit_client.config import DEFAULT_OUTPUT_DIR, MONITORING_WAIT_DELAY
from reddit_client.controllers import MessageFeed
from shared import configure_logging, ensure_dir, save_json

logger = logging.getLogger("redditwatch")

FEEDS = [feed.value for feed in MessageFeed]


def take_snapshot(reddit: Reddit, feed: str, output: str | Path | None = None) -> Path:
    """Fetch ``feed`` once and write its records to JSON."""
    messages = reddit.private_messages.get_messages(feed)

    if output is None:
        output = ensure_dir(DEFAULT_OUTPUT_DIR) / f"{feed}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    output = Path(output)

    metadata = {
        "timestamp": datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        "feed": feed,
        "total_messages": len(messages),
    }
    save_json({"metadata": metadata, "messages": messages}, output)
    logger.info("Saved %d %s message(s) to %s", len(messages), feed, output)
    return output


def log_change(event: ChangeEvent) -> None:
    for message in event.added:
        logger.info("[%s] + %s from %s: %s", event.feed.value, message.fullname, message.author, message.subject)
    for message in event.removed:
        logger.info("[%s] - %s", event.feed.value, message.fullname)


def monitor(reddit: Reddit, feed: str, duration: float | None = None) -> None:
    """Monitor ``feed`` until ``duration`` seconds pass or Ctrl+C."""
    messages = reddit.private_messages
    messages.on_change(feed, log_change)
    if not messages.start_monitoring(feed):
        logger.warning("Feed %s is already being monitored", feed)
        return

    logger.info("Monitoring %s%s; press Ctrl+C to stop", feed, f" for {duration:.0f}s" if duration else "")
    done = threading.Event()
    try:
        done.wait(duration)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        messages.stop_monitoring(feed)
        messages.remove_listener(feed, log_change)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reddit Watch")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--delay",
        type=float,
        default=MONITORING_WAIT_DELAY,
        help="Base delay between poll cycles in seconds",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    snapshot_parser = commands.add_parser("snapshot", help="Save one feed to JSON")
    snapshot_parser.add_argument("feed", choices=FEEDS)
    snapshot_parser.add_argument("--output", help="Output JSON file")

    monitor_parser = commands.add_parser("monitor", help="Log changes to one feed")
    monitor_parser.add_argument("feed", choices=FEEDS)
    monitor_parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        reddit = Reddit.from_env(monitoring_delay=args.delay)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    try:
        if args.command == "snapshot":
            take_snapshot(reddit, args.feed, args.output)
        else:
            monitor(reddit, args.feed, args.duration)
    finally:
        reddit.close(join_timeout=args.delay * 2)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
