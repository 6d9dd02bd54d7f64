#!/usr/bin/env python3
"""Scan the connected mailbox for job emails and import them into the tracker."""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobmail.config import ensure_dirs, load_settings
from jobmail.errors import JobMailError, MailboxConnectionError, ValidationError
from jobmail.log import get_logger, set_level
from jobmail.mailbox import get_mailbox
from jobmail.models import JOB_STATUSES, REJECTED
from jobmail.report import staging_table
from jobmail.session import ImportSession
from jobmail.store import get_store

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--since", type=date.fromisoformat, help="first day to scan (YYYY-MM-DD)")
    p.add_argument("--until", type=date.fromisoformat, help="last day to scan (YYYY-MM-DD)")
    p.add_argument("--max", type=int, dest="max_results", help="cap on scanned emails (<= 500)")
    p.add_argument("--search", default="", help="only print rows matching this text (selection is unchanged)")
    select = p.add_mutually_exclusive_group()
    select.add_argument("--select-status", choices=JOB_STATUSES, help="import only rows in this status")
    select.add_argument("--only-rejected", action="store_true", help="import only rows detected as rejections")
    p.add_argument("--mark", choices=JOB_STATUSES, help="set this status on every selected row")
    p.add_argument("--dry-run", action="store_true", help="show staged rows without importing")
    p.add_argument("-v", "--verbose", action="store_true", help="debug-level console output")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        set_level("DEBUG")
    ensure_dirs()
    settings = load_settings()
    session = ImportSession(get_mailbox(settings), get_store(settings), settings)

    try:
        outcome = session.scan(args.since, args.until, args.max_results)
    except MailboxConnectionError as exc:
        log.error("%s", exc)
        return 2
    except JobMailError as exc:
        log.error("Scan failed: %s", exc)
        return 1

    if not outcome.new:
        return 0

    staging = session.staging
    if args.only_rejected:
        staging.select_by_status(REJECTED)
    elif args.select_status:
        staging.select_by_status(args.select_status)
    if args.mark:
        staging.bulk_set_status(args.mark)

    view = staging.filtered_view(args.search)
    print(staging_table(view.items()))
    summary = staging.summary(view)
    log.info("%d selected · %d shown · %d total", summary["selected"], summary["shown"], summary["total"])

    if args.dry_run:
        session.close()
        return 0

    try:
        result, message = session.commit()
    except ValidationError as exc:
        log.error("%s", exc)
        return 1
    print(message)
    return 0 if result.failed == 0 else 3


if __name__ == "__main__":
    sys.exit(main())
