"""Fixed-interval uptime slots for device heartbeats.

The slot grid covers the Pacific days of a date range, from the first
midnight up to the midnight after the last day. Slots are stepped in elapsed
time, so a spring-forward day holds 23 hours of slots and a fall-back day 25.
"""

from bisect import bisect_left, bisect_right
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, List

import structlog

from ..errors import InvalidRange
from ..models.time_range import DateRange
from ..models.uptime import Heartbeat, UptimeSlot, UptimeStats
from .timezone_utils import PACIFIC_TZ, ensure_utc, pacific_day_boundaries

logger = structlog.get_logger()

DEFAULT_INTERVAL_MINUTES = 5
# Heartbeats this close to a slot still count it as online
ONLINE_WINDOW_MINUTES = 5


def _check_interval(interval_minutes: int) -> timedelta:
    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int) or interval_minutes <= 0:
        raise InvalidRange(f"Slot interval must be a positive number of minutes, got {interval_minutes!r}")
    return timedelta(minutes=interval_minutes)


def time_slots(
    date_range: DateRange,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    tz: tzinfo = PACIFIC_TZ
) -> List[datetime]:
    """Start instants (UTC) of every slot covering ``date_range``.

    Raises:
        InvalidRange: if ``interval_minutes`` is not a positive integer
    """
    step = _check_interval(interval_minutes)
    start, _ = pacific_day_boundaries(date_range.start, tz)
    _, end = pacific_day_boundaries(date_range.end, tz)
    current, end = ensure_utc(start), ensure_utc(end)

    slots = []
    while current < end:
        slots.append(current)
        current += step
    return slots


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def bucket_uptime(
    heartbeats: Iterable[Heartbeat],
    date_range: DateRange,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    tz: tzinfo = PACIFIC_TZ,
    window_minutes: int = ONLINE_WINDOW_MINUTES
) -> List[UptimeSlot]:
    """Mark each slot of ``date_range`` online or offline.

    A slot is online when any heartbeat lands within ``window_minutes`` of
    it, edges included. Battery and CPU are averaged over the heartbeats
    inside the slot, or over the surrounding window when the slot itself is
    empty. Offline slots are kept with zeroed readings.

    Args:
        heartbeats: Device heartbeats in any order
        date_range: Inclusive window of calendar dates
        interval_minutes: Slot length
        tz: Zone the calendar days and display times belong to
        window_minutes: Tolerance either side of a slot

    Returns:
        One slot per interval, ordered by start
    """
    starts = time_slots(date_range, interval_minutes, tz)
    step = timedelta(minutes=interval_minutes)
    window = timedelta(minutes=window_minutes)

    ordered = sorted(heartbeats, key=lambda hb: hb.timestamp)
    times = [hb.timestamp for hb in ordered]

    slots: List[UptimeSlot] = []
    for slot_start in starts:
        slot_end = slot_start + step
        nearby = ordered[bisect_left(times, slot_start - window):bisect_right(times, slot_end + window)]
        inside = ordered[bisect_left(times, slot_start):bisect_left(times, slot_end)]

        slot = UptimeSlot(
            start=slot_start,
            display_time=slot_start.astimezone(tz).strftime("%H:%M"),
            prev_is_online=slots[-1].is_online if slots else None
        )
        if nearby:
            sample = inside or nearby
            slot.is_online = True
            slot.battery_level = _mean([hb.battery_level for hb in sample if hb.battery_level is not None])
            slot.cpu_usage = _mean([hb.cpu_usage for hb in sample if hb.cpu_usage is not None])
            slot.heartbeat_count = len(nearby)
        slots.append(slot)

    logger.debug(
        "Bucketed heartbeats into uptime slots",
        start_date=date_range.start_date,
        end_date=date_range.end_date,
        interval_minutes=interval_minutes,
        slots=len(slots),
        online_slots=sum(1 for s in slots if s.is_online),
        heartbeats=len(ordered)
    )

    return slots


def uptime_stats(slots: List[UptimeSlot], interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> UptimeStats:
    """Session totals for a run of slots.

    A session is a maximal run of consecutive online slots. Every duration
    is reported in minutes.
    """
    _check_interval(interval_minutes)
    if not slots:
        return UptimeStats()

    stats = UptimeStats()
    online_slots = 0
    session = longest_session = 0
    offline = longest_offline = 0

    for slot in slots:
        if slot.is_online:
            if session == 0:
                stats.total_sessions += 1
                if stats.first_online is None:
                    stats.first_online = slot.display_time
            session += 1
            online_slots += 1
            offline = 0
            longest_session = max(longest_session, session)
            stats.last_online = slot.display_time
        else:
            session = 0
            offline += 1
            longest_offline = max(longest_offline, offline)

    stats.total_uptime = online_slots * interval_minutes
    stats.uptime_percentage = round(online_slots / len(slots) * 100, 2)
    if stats.total_sessions:
        stats.average_session_length = round(stats.total_uptime / stats.total_sessions, 2)
    stats.longest_session = longest_session * interval_minutes
    stats.longest_offline = longest_offline * interval_minutes
    return stats
