"""
Manday efficiency and document counts for the dashboards.

Everything here works on plain iterables of records (MandayRecord or
anything with `original_working_days`, `actual_working_days` and
`date_recorded`), so it can be fed a queryset or a list built in a test.
"""
import calendar
import datetime
from collections import OrderedDict

from routing.deadlines import InvalidDate, parse_date

PERIODS = ('day', 'week', 'month', 'quarter', 'year')
WINDOWS = ('day', 'week', 'month')

AHEAD_OF_TIME = "Ahead of Time"
ON_SCHEDULE = "On Schedule"
OFF_TRACK = "Off Track"


def calculate_efficiency(original, actual):
    """
    Planned days as a percentage of actual days, capped at 100.
    0 when either side is not positive.
    """
    if original <= 0 or actual <= 0:
        return 0
    return min(round(original / actual * 100), 100)


def efficiency_status(original, actual):
    if actual < original:
        return AHEAD_OF_TIME
    if actual == original:
        return ON_SCHEDULE
    return OFF_TRACK


def _record_date(record):
    try:
        return parse_date(record.date_recorded)
    except InvalidDate:
        return None


def _period_key(day, period):
    if period == 'day':
        return (day.year, day.month, day.day), day.strftime('%b %d, %Y')
    if period == 'week':
        iso_year, iso_week, _ = day.isocalendar()
        return (iso_year, iso_week), f"Week {iso_week}, {iso_year}"
    if period == 'month':
        return (day.year, day.month), day.strftime('%B %Y')
    if period == 'quarter':
        quarter = (day.month - 1) // 3 + 1
        return (day.year, quarter), f"Q{quarter} {day.year}"
    if period == 'year':
        return (day.year,), str(day.year)
    raise ValueError(f"Unknown period: {period}")


def summarize(records):
    """Totals and efficiency for a set of records."""
    original = actual = count = 0
    for record in records:
        original += record.original_working_days
        actual += record.actual_working_days
        count += 1
    return {
        'original': original,
        'actual': actual,
        'count': count,
        'efficiency': calculate_efficiency(original, actual),
        'status': efficiency_status(original, actual) if count else '',
    }


def group_by_period(records, period):
    """
    Buckets records by day, ISO week, month, quarter or year and returns the
    buckets in chronological order.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period}")

    buckets = {}
    for record in records:
        day = _record_date(record)
        if day is None:
            continue
        key, label = _period_key(day, period)
        bucket = buckets.setdefault(key, {'period': label, 'records': []})
        bucket['records'].append(record)

    rows = []
    for key in sorted(buckets):
        bucket = buckets[key]
        totals = summarize(bucket['records'])
        rows.append({
            'period': bucket['period'],
            'original': totals['original'],
            'actual': totals['actual'],
            'count': totals['count'],
            'efficiency': totals['efficiency'],
        })
    return rows


def in_window(day, window, today):
    if window == 'day':
        return day == today
    if window == 'week':
        return today - datetime.timedelta(days=7) <= day <= today
    if window == 'month':
        return (day.year, day.month) == (today.year, today.month) and day <= today
    raise ValueError(f"Unknown window: {window}")


def period_totals(records, window, today):
    """
    Totals for records dated today, in the last seven days, or in the
    current calendar month.
    """
    selected = []
    for record in records:
        day = _record_date(record)
        if day is not None and in_window(day, window, today):
            selected.append(record)
    return summarize(selected)


def annual_comparison(records, year):
    """
    Twelve rows, one per month of `year`, with planned and actual days.
    """
    months = OrderedDict((month, []) for month in range(1, 13))
    for record in records:
        day = _record_date(record)
        if day is not None and day.year == year:
            months[day.month].append(record)

    rows = []
    for month, month_records in months.items():
        totals = summarize(month_records)
        rows.append({
            'name': calendar.month_abbr[month],
            'planned': totals['original'],
            'actual': totals['actual'],
            'efficiency': totals['efficiency'],
        })
    return rows


def weekly_document_status(documents, today):
    """
    Ongoing vs closed documents touched in the last seven days. A closed
    document counts by its end date, anything else by its start date.
    """
    since = today - datetime.timedelta(days=7)
    counts = {'ongoing': 0, 'closed': 0}
    for document in documents:
        closed = document.status == 'Closed'
        try:
            day = parse_date(document.end_date if closed and document.end_date else document.start_date)
        except InvalidDate:
            continue
        if since <= day <= today:
            counts['closed' if closed else 'ongoing'] += 1
    return counts
