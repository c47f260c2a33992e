"""
Per-day classification of localized calendar events.

Operates on the localized event dicts produced by the calendar service
(``date``/``endDate`` as ``YYYY-MM-DD`` strings). Those strings are
fixed-width and zero-padded, so plain string comparison orders them
chronologically.
"""

from datetime import date, timedelta
from typing import Optional

EVENT_TYPE_PRIORITY = {
    "booked_out": 1,
    "on_set": 2,
    "episode_airing": 3,
    "availability_hold": 4,
    "pinned": 5,
    "premiere": 6,
    "callback": 7,
    "audition": 8,
    "class_workshop": 9,
    "agency_meeting": 10,
    "deadline": 11,
    "other": 12,
}

LOWEST_PRIORITY = max(EVENT_TYPE_PRIORITY.values()) + 1

# Types that colour a whole day cell
BACKGROUND_TYPES = ("booked_out", "on_set", "episode_airing", "availability_hold", "pinned")


def events_for_date(events: list[dict], day: str) -> tuple[list[dict], list[dict]]:
    """Split events into (regular, multi-day) lists for one local date"""
    regular = [e for e in events if not e["isMultiDay"] and e["date"] == day]
    multi_day = [e for e in events if e["isMultiDay"] and e["date"] <= day <= e["endDate"]]
    return regular, multi_day


def sort_by_priority(events: list[dict]) -> list[dict]:
    """Order by display priority; equal types keep their input order"""
    return sorted(events, key=lambda e: EVENT_TYPE_PRIORITY.get(e["type"], LOWEST_PRIORITY))


def background_type(events: list[dict]) -> Optional[str]:
    best = None
    for event in events:
        if event["type"] not in BACKGROUND_TYPES:
            continue
        if best is None or EVENT_TYPE_PRIORITY[event["type"]] < EVENT_TYPE_PRIORITY[best]:
            best = event["type"]
    return best


def date_range(start: date, end: date) -> list[str]:
    days = []
    current = start
    while current <= end:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


def summarize_days(events: list[dict], start: date, end: date) -> list[dict]:
    """Build the per-day view for every date from ``start`` to ``end`` inclusive"""
    summaries = []
    for day in date_range(start, end):
        regular, multi_day = events_for_date(events, day)
        combined = regular + multi_day
        summaries.append(
            {
                "date": day,
                "regularEvents": regular,
                "multiDayEvents": multi_day,
                "events": sort_by_priority(combined),
                "backgroundType": background_type(combined),
            }
        )
    return summaries
