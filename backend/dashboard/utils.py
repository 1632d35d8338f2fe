import calendar
from datetime import datetime, time, timedelta
from django.utils import timezone

VALID_RANGES = ('today', 'thisweek', 'thismonth', 'custom')


def _start_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def get_date_range(range_name, date_from=None, date_to=None, now=None):
    """
    Resolve a dashboard range name into a half-open [start, end) window.

    Days are whole local days: `end` is midnight after the last included day.
    The week starts on Sunday. Raises ValueError on unknown ranges or bad dates.
    """
    now = timezone.localtime(now or timezone.now())
    today = now.date()

    if range_name == 'today':
        start_day, end_day = today, today
    elif range_name == 'thisweek':
        days_since_sunday = (today.weekday() + 1) % 7
        start_day, end_day = today - timedelta(days=days_since_sunday), today
    elif range_name == 'thismonth':
        last_day = calendar.monthrange(today.year, today.month)[1]
        start_day, end_day = today.replace(day=1), today.replace(day=last_day)
    elif range_name == 'custom':
        if not date_from or not date_to:
            raise ValueError('from and to dates are required for custom range')
        try:
            start_day = datetime.strptime(date_from, '%Y-%m-%d').date()
            end_day = datetime.strptime(date_to, '%Y-%m-%d').date()
        except ValueError:
            raise ValueError('Invalid date format. Use YYYY-MM-DD')
        if start_day > end_day:
            raise ValueError('from date must not be after to date')
    else:
        raise ValueError('Invalid date range. Use: today, thisweek, thismonth, or custom')

    return _start_of_day(start_day), _start_of_day(end_day + timedelta(days=1))
