"""User-facing summaries for scan and import outcomes."""
from __future__ import annotations

from collections.abc import Iterable

from jobmail.models import CommitResult, StagingRow

NO_EMAILS_FOUND = "No job-related emails found in this date range"


def scan_message(total: int, new: int, duplicates: int) -> str:
    if new > 0:
        if duplicates > 0:
            return f"Found {new} new emails ({duplicates} already imported)"
        return f"Found {new} job-related emails"
    if duplicates > 0:
        return f"All {total} emails were already imported"
    return NO_EMAILS_FOUND


def commit_message(result: CommitResult) -> str:
    message = f"Import complete! {result.succeeded} job(s) processed."
    if result.failed > 0:
        message += f" {result.failed} failed."
    if result.skipped > 0:
        message += f" {result.skipped} already imported."
    if result.cancelled > 0:
        message += f" {result.cancelled} cancelled."
    return message


def _cell(text: str, width: int) -> str:
    text = " ".join((text or "").split())
    if len(text) > width:
        text = text[: width - 1] + "…"
    return text.ljust(width)


def staging_table(items: Iterable[tuple[int, StagingRow]]) -> str:
    """Plain-text table of staged rows for terminal review.

    ``items`` are ``(index, row)`` pairs as yielded by ``StagingView.items``;
    the ``#`` column shows the staging index that ``set_field`` expects.
    """
    lines = [
        f"{'#':>3}  {'sel':3}  {_cell('Company', 22)}  {_cell('Position', 26)}  "
        f"{_cell('Status', 12)}  {_cell('Date', 10)}  Subject",
    ]
    for i, r in items:
        lines.append(
            f"{i:>3}  {'[x]' if r.selected else '[ ]'}  {_cell(r.company, 22)}  "
            f"{_cell(r.title, 26)}  {_cell(r.status, 12)}  "
            f"{_cell(r.applied_date.isoformat() if r.applied_date else '', 10)}  "
            f"{_cell(r.subject, 50).rstrip()}"
        )
    return "\n".join(lines)
