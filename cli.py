"""
pokefetch CLI.

Fetches PokeAPI resources in parallel, retrying transient failures, and
saves each raw JSON response as <output-dir>/<name>.json.

Usage
-----
# Fetch the default set
python cli.py fetch

# Fetch specific Pokemon
python cli.py fetch bulbasaur ivysaur charmander

# Read identifiers from a file, 8 workers, JSON report
python cli.py fetch --items-file names.txt --max-workers 8 --report data/report.json

# Other endpoints work too
python cli.py fetch --base-url https://pokeapi.co/api/v2/ability overgrow blaze

Exit status is 0 when every item was saved and 1 otherwise.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------


def _collect_items(args: argparse.Namespace) -> list[str]:
    from configs.constants import Constants
    from pokefetch.validation import read_items_file

    items = list(args.items or [])
    if args.items_file:
        items.extend(read_items_file(Path(args.items_file)))
    return items or list(Constants.DEFAULT_ITEMS)


def _build_config(args: argparse.Namespace):
    from pokefetch.config import FetchConfig

    return FetchConfig(
        base_url=args.base_url,
        output_dir=Path(args.output_dir),
        max_retries=args.max_retries,
        retry_delay=args.retry_delay,
        backoff_factor=args.backoff_factor,
        rate_limit_multiplier=args.rate_limit_multiplier,
        max_workers=args.max_workers,
        request_timeout=args.timeout,
        preflight_timeout=args.preflight_timeout,
        preflight=not args.no_preflight,
        worker_deadline=args.deadline,
        log_file=Path(args.log_file),
    )


def cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch every requested item and print the aggregate report."""
    from pokefetch.runner import run_batch, write_report

    try:
        config = _build_config(args)
        items = _collect_items(args)
    except (ValueError, OSError) as exc:
        args.parser.error(str(exc))

    report = run_batch(items, config)

    print(f"\n{'─' * 60}")
    print(report.summary())
    print(f"Log file: {config.log_file}")
    if args.report:
        write_report(report, Path(args.report))
        print(f"Report:   {args.report}")
    return report.exit_code


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    from configs.constants import Constants

    root = argparse.ArgumentParser(
        prog="pokefetch",
        description="pokefetch: parallel PokeAPI fetcher with retries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    root.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = root.add_subparsers(dest="command", required=True)

    # ================================================================
    # fetch
    # ================================================================
    fp = subparsers.add_parser("fetch", help="Fetch items from the API")
    fp.add_argument("items", nargs="*", help="Identifiers to fetch (e.g. bulbasaur)")
    fp.add_argument("--items-file", metavar="FILE", help="One identifier per line")
    fp.add_argument("--base-url", default=Constants.POKEMON_ENDPOINT, metavar="URL")
    fp.add_argument("--output-dir", default=Constants.OUTPUT_DIR, metavar="DIR")
    fp.add_argument("--log-file", default=Constants.LOG_FILE, metavar="FILE")
    fp.add_argument("--report", default=None, metavar="FILE", help="Write JSON report")
    fp.add_argument("--max-retries", type=int, default=Constants.MAX_RETRIES)
    fp.add_argument(
        "--retry-delay", type=float, default=Constants.RETRY_DELAY, help="Seconds between attempts"
    )
    fp.add_argument("--backoff-factor", type=float, default=Constants.BACKOFF_FACTOR)
    fp.add_argument(
        "--rate-limit-multiplier",
        type=float,
        default=Constants.RATE_LIMIT_MULTIPLIER,
        help="Delay multiplier after HTTP 429 (>= 2)",
    )
    fp.add_argument("--max-workers", type=int, default=Constants.MAX_WORKERS)
    fp.add_argument("--timeout", type=float, default=Constants.REQUEST_TIMEOUT, help="Request timeout")
    fp.add_argument("--preflight-timeout", type=float, default=Constants.PREFLIGHT_TIMEOUT)
    fp.add_argument("--no-preflight", action="store_true", help="Skip the connectivity probe")
    fp.add_argument(
        "--deadline", type=float, default=None, help="Per-item time budget in seconds"
    )
    fp.set_defaults(func=cmd_fetch, parser=fp)

    return root


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    # Dispatch to the appropriate handler
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
