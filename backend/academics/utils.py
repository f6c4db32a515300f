import datetime
import re
from typing import Optional

from django.utils import timezone


_NON_ALNUM_RE = re.compile(r'[^a-zA-Z0-9]')
_SLOT_HOUR_RE = re.compile(r'^\s*(\d{1,2})')

# Slot labels carry no AM/PM on the start hour ("1-2PM"); classes never
# start before 7 in the morning, so smaller hours are afternoon.
PM_SHIFT_BELOW_HOUR = 7


def normalize_course_code(value: Optional[str]) -> str:
    """Return `value` with every non-alphanumeric character removed, upper-cased.

    ``'cs-301 '``, ``'CS 301'`` and ``'Cs301'`` all normalize to ``'CS301'``.
    """
    if not value:
        return ''
    return _NON_ALNUM_RE.sub('', str(value)).upper()


def normalize_faculty_name(value: Optional[str]) -> str:
    return (value or '').strip().lower()


def slot_start_hour(time_slot: Optional[str]) -> Optional[int]:
    """Return the 24h start hour encoded in a slot label like ``'9-10AM'``.

    Minutes are ignored, so ``'9:30-10:30'`` starts at 9. Returns None when
    the label has no leading hour.
    """
    if not time_slot:
        return None
    m = _SLOT_HOUR_RE.match(str(time_slot).split('-')[0])
    if not m:
        return None
    hour = int(m.group(1))
    if hour < PM_SHIFT_BELOW_HOUR:
        hour += 12
    if hour > 23:
        return None
    return hour


def session_timestamp(date: datetime.date, time_slot: Optional[str]) -> datetime.datetime:
    """Effective start of a session, timezone-aware in the current timezone.

    Falls back to midnight of `date` when the slot label cannot be parsed.
    """
    hour = slot_start_hour(time_slot)
    naive = datetime.datetime.combine(date, datetime.time(hour or 0, 0))
    return timezone.make_aware(naive, timezone.get_current_timezone())
