"""Statement email scheduling decisions.

Owners are grouped into schedules by listing tags (Weekly, Bi-Weekly,
Monthly). The scheduler asks this module which frequency applies, which
period to generate and what subject line to use; delivery itself is not
handled here.
"""

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from statement_engine.core.exceptions import ValidationError

WEEKLY = "Weekly"
BI_WEEKLY = "Bi-Weekly"
MONTHLY = "Monthly"

FREQUENCY_TAGS = (WEEKLY, BI_WEEKLY, MONTHLY)


def get_frequency_from_tags(tags: Iterable[str] | str | None) -> str:
    """Statement frequency from a listing's tags.

    Tags match exactly, case-insensitive, after trimming; the first
    recognised tag wins.

    Args:
        tags: List of tags or a comma-separated string

    Returns:
        str: "Weekly", "Bi-Weekly" or "Monthly" (default)
    """
    if isinstance(tags, str):
        tag_list = tags.split(",")
    else:
        tag_list = list(tags or [])

    for tag in tag_list:
        if not isinstance(tag, str):
            continue
        normalized = tag.strip().lower()
        for frequency in FREQUENCY_TAGS:
            if normalized == frequency.lower():
                return frequency

    return MONTHLY


def _as_date(value: date | str, name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value!r}") from e


def get_email_subject(frequency: str | None, start: date | str, end: date | str) -> str:
    """Subject line of a statement email.

    Weekly and bi-weekly statements name the date range
    ("Owner Statement - 11.24-12.1.2025"); monthly statements name the
    month of the period end ("Owner Statement - November 2025").
    """
    start_date = _as_date(start, "period start")
    end_date = _as_date(end, "period end")

    if frequency in (WEEKLY, BI_WEEKLY):
        return (
            f"Owner Statement - {start_date.month}.{start_date.day}"
            f"-{end_date.month}.{end_date.day}.{end_date.year}"
        )

    return f"Owner Statement - {calendar.month_name[end_date.month]} {end_date.year}"


def get_statement_period(frequency: str | None, today: date) -> tuple[date, date]:
    """Period a scheduled run on ``today`` reports on.

    Weekly: the previous Monday-Sunday week. Bi-weekly: the two weeks
    ending last Sunday. Monthly (and anything unrecognised): the previous
    calendar month.
    """
    if frequency in (WEEKLY, BI_WEEKLY):
        days_since_sunday = (today.weekday() + 1) % 7
        end = today - timedelta(days=days_since_sunday)
        span = 6 if frequency == WEEKLY else 13
        return end - timedelta(days=span), end

    end = today.replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end
