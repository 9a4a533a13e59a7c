import datetime
import enum
from collections import namedtuple

from django.utils import timezone

# Monday=0 ... Friday=4
WEEKEND = (5, 6)

DATE_LABEL_FORMAT = '%b %d, %Y'

US_FORMATS = (
    '%m/%d/%Y',
    '%m/%d/%Y %I:%M %p',
    '%m/%d/%Y %I:%M:%S %p',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %H:%M:%S',
)


class InvalidDate(ValueError):
    pass


class Urgency(str, enum.Enum):
    NEUTRAL = 'gray'
    NORMAL = 'green'
    WARNING = 'yellow'
    CRITICAL = 'red'


DeadlineStatus = namedtuple('DeadlineStatus', ['label', 'urgency'])

NOT_AVAILABLE = DeadlineStatus('N/A', Urgency.NEUTRAL)
CLOSED = DeadlineStatus('Closed', Urgency.NEUTRAL)
OVERDUE = DeadlineStatus('Overdue', Urgency.CRITICAL)


def _to_local_date(value):
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.date()


def parse_date(value):
    """
    Normalizes a date-ish value to a local calendar date.

    Accepts date/datetime objects, ISO-8601 strings ('2024-03-01',
    '2024-03-01T09:30:00Z') and US style strings as written by the intake
    office ('03/01/2024', '03/01/2024, 09:30 AM'). Raises InvalidDate for
    anything else.
    """
    if isinstance(value, datetime.datetime):
        return _to_local_date(value)
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate(f"Cannot parse date from {value!r}")

    text = value.strip()

    iso_text = text[:-1] + '+00:00' if text.endswith('Z') else text
    try:
        return _to_local_date(datetime.datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    text = ' '.join(text.replace(',', ' ').split())
    for fmt in US_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise InvalidDate(f"Cannot parse date from {value!r}")


def is_business_day(day):
    return day.weekday() not in WEEKEND


def compute_deadline(start, budget_days):
    """
    Returns the date reached by counting `budget_days` business days strictly
    after `start`. The start day itself is never counted.
    """
    start = parse_date(start)
    budget_days = int(budget_days)
    if budget_days < 0:
        raise ValueError("budget_days must not be negative")

    deadline = start
    counted = 0
    while counted < budget_days:
        deadline += datetime.timedelta(days=1)
        if is_business_day(deadline):
            counted += 1
    return deadline


def remaining_business_days(from_date, to_date):
    """
    Counts business days in (from_date, to_date].
    """
    current = parse_date(from_date)
    end = parse_date(to_date)

    count = 0
    while current < end:
        current += datetime.timedelta(days=1)
        if is_business_day(current):
            count += 1
    return count


def classify_urgency(remaining, is_overdue, is_closed, due=None):
    if is_closed:
        return CLOSED
    if is_overdue:
        return OVERDUE

    due_label = due.strftime(DATE_LABEL_FORMAT) if due else ''
    if remaining <= 0:
        return DeadlineStatus(f"Due today ({due_label})", Urgency.CRITICAL)

    label = f"{remaining} working days left (due {due_label})"
    if remaining <= 3:
        return DeadlineStatus(label, Urgency.CRITICAL)
    if remaining <= 7:
        return DeadlineStatus(label, Urgency.WARNING)
    return DeadlineStatus(label, Urgency.NORMAL)


def _budget(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def deadline_status(start, budget_days, end_date=None, today=None):
    """
    Badge for a document row. Missing or broken inputs give 'N/A' rather
    than an exception.
    """
    if end_date:
        return CLOSED

    budget = _budget(budget_days)
    if start in (None, '', 'N/A') or budget <= 0:
        return NOT_AVAILABLE

    try:
        deadline = compute_deadline(start, budget)
    except InvalidDate:
        return NOT_AVAILABLE

    today = parse_date(today) if today else timezone.localdate()
    is_overdue = today > deadline
    remaining = 0 if is_overdue else remaining_business_days(today, deadline)
    return classify_urgency(remaining, is_overdue, False, due=deadline)
