"""Text formatting for change reports and run summaries."""

from datetime import UTC, datetime

from dirstamp.core.stamp.types import NS_PER_SECOND, StampSummary, TimestampDecision

DATE_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

NOTHING_TO_DO = "No folder timestamps needed updating."
DRY_RUN_NOTE = "Note: this was a dry run. Use -C to confirm and apply changes."


def format_utc(timestamp_ns: int) -> str:
    """Format a nanosecond Unix timestamp as a UTC date string.

    Sub-second precision is truncated toward the earlier second.

    Args:
        timestamp_ns: Nanoseconds since the epoch

    Returns:
        String like "2024-05-01 12:00:00 UTC", or "<bad time>" when the
        value is outside the range datetime can represent

    """
    try:
        moment = datetime.fromtimestamp(timestamp_ns // NS_PER_SECOND, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return "<bad time>"
    return moment.strftime(DATE_FORMAT)


def format_day_delta(days: float) -> str:
    """Format a signed day difference, e.g. "+10.0 days"."""
    return f"{days:+.1f} days"


def format_change(decision: TimestampDecision, show_dates: bool = False) -> str:
    """Format one report line for a directory that is (or would be) updated.

    Args:
        decision: The applied decision
        show_dates: Append from/to timestamps and the day delta

    Returns:
        Line like "would update photos/2024" or
        "updated photos (from ... to ..., +3.0 days)"

    """
    verb = "would update" if decision.dry_run else "updated"
    line = f"{verb} {decision.path}"
    if show_dates:
        line += (
            f" (from {format_utc(decision.current_ns)}"
            f" to {format_utc(decision.target_ns)},"
            f" {format_day_delta(decision.delta_days)})"
        )
    return line


def format_summary(summary: StampSummary) -> str:
    """Final message stating whether anything was (or would be) changed."""
    if summary.updated == 0:
        return NOTHING_TO_DO
    if summary.dry_run:
        return DRY_RUN_NOTE
    noun = "timestamp" if summary.updated == 1 else "timestamps"
    return f"Updated {summary.updated} folder {noun}."
