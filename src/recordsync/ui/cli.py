from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from recordsync.app import list_records, pull_records, push_records, synchronize_records
from recordsync.config import ConfigurationError, configure_logging
from recordsync.domain.model import SyncState

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise local records with a remote store")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Push dirty records, pull and sweep removed ones")
    subparsers.add_parser("push", help="Upload dirty records only")
    subparsers.add_parser("pull", help="Fetch remote records without deleting local ones")

    listing = subparsers.add_parser("list", help="Print locally stored records as JSON lines")
    listing.add_argument(
        "--state",
        type=_parse_state,
        help="Only list records in this state (synced, dirty, unseen)",
    )

    return parser.parse_args(list(argv))


def _parse_state(value: str) -> SyncState:
    try:
        return SyncState(value.strip().lower())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid state: {value}") from exc


def _print_records(state: SyncState | None) -> None:
    for entity in list_records(state=state):
        print(json.dumps(entity.dictionary, sort_keys=True, default=str))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.getLevelName(parsed_args.log_level))

    try:
        if parsed_args.command == "sync":
            synchronize_records()
        elif parsed_args.command == "push":
            push_records()
        elif parsed_args.command == "pull":
            pull_records()
        elif parsed_args.command == "list":
            _print_records(parsed_args.state)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ConfigurationError, ValueError):
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
