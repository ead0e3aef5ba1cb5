"""
Appointment slot availability.

Turns a doctor's weekly schedule, leave dates and the start times already
booked on a date into the list of bookable "HH:MM" start times.

All clock arithmetic is done in minutes since midnight; strings are parsed
once on the way in and formatted once on the way out.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Mapping, Optional
import re

from clinicdesk.core.logger import get_logger

logger = get_logger("slots")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Unavailable(str, Enum):
    NO_SCHEDULE = "no_schedule"
    PAST_DATE = "past_date"
    BEYOND_WINDOW = "beyond_window"
    NOT_ACCEPTING = "not_accepting"
    ONLINE_DISABLED = "online_disabled"
    NOT_WORKING = "not_working"
    ON_LEAVE = "on_leave"
    FULLY_BOOKED = "fully_booked"


MESSAGES = {
    Unavailable.NO_SCHEDULE: "No schedule configured for this doctor",
    Unavailable.PAST_DATE: "Cannot book appointments in the past",
    Unavailable.BEYOND_WINDOW: "Cannot book more than {days} days in advance",
    Unavailable.NOT_ACCEPTING: "Doctor is not accepting appointments",
    Unavailable.ONLINE_DISABLED: "Doctor is not accepting online appointments",
    Unavailable.NOT_WORKING: "Doctor is not available on this day",
    Unavailable.ON_LEAVE: "Doctor is on leave on this date",
    Unavailable.FULLY_BOOKED: "No available slots for this date",
}


def parse_clock(value: str) -> int:
    """Parse a 24-hour "HH:MM" string into minutes since midnight."""
    match = CLOCK_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}'. Use HH:MM (24-hour)")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def weekday_name(target: date) -> str:
    return WEEKDAYS[target.weekday()]


@dataclass(frozen=True)
class TimeRange:
    start: int
    end: int


@dataclass(frozen=True)
class DaySchedule:
    day: str
    is_working: bool
    ranges: tuple[TimeRange, ...] = ()


def build_weekly_schedule(records: Iterable[Mapping]) -> dict[str, DaySchedule]:
    """
    Convert stored day records ({day, is_working, slots:[{start_time, end_time}]})
    into a weekday-keyed mapping. Ranges that cannot be parsed are dropped
    with a warning rather than failing the whole query.
    """
    weekly: dict[str, DaySchedule] = {}
    for record in records or []:
        day = str(record.get("day", "")).lower()
        if day not in WEEKDAYS:
            logger.warning("Ignoring schedule entry with unknown day %r", record.get("day"))
            continue
        ranges = []
        for item in record.get("slots") or []:
            try:
                ranges.append(TimeRange(parse_clock(item["start_time"]), parse_clock(item["end_time"])))
            except (KeyError, TypeError, ValueError):
                logger.warning("Ignoring malformed time range %r on %s", item, day)
        weekly[day] = DaySchedule(day=day, is_working=bool(record.get("is_working", False)), ranges=tuple(ranges))
    return weekly


@dataclass
class ScheduleRules:
    """Everything the engine needs to know about one doctor's schedule."""
    weekly: dict[str, DaySchedule]
    slot_duration: int = 30
    buffer_time: int = 0
    max_patients_per_slot: int = 1
    advance_booking_days: int = 30
    is_accepting_appointments: bool = True
    accepts_online_booking: bool = False
    leave_dates: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def from_record(cls, schedule) -> "ScheduleRules":
        leave = set()
        for entry in schedule.leave_dates or []:
            raw = entry.get("date") if isinstance(entry, Mapping) else entry
            try:
                leave.add(raw if isinstance(raw, date) else date.fromisoformat(str(raw)[:10]))
            except ValueError:
                logger.warning("Ignoring malformed leave date %r", raw)
        return cls(
            weekly=build_weekly_schedule(schedule.weekly_schedule),
            slot_duration=schedule.slot_duration,
            buffer_time=schedule.buffer_time,
            max_patients_per_slot=schedule.max_patients_per_slot,
            advance_booking_days=schedule.advance_booking_days,
            is_accepting_appointments=schedule.is_accepting_appointments,
            accepts_online_booking=schedule.accepts_online_booking,
            leave_dates=frozenset(leave),
        )


@dataclass
class AvailabilityResult:
    available_slots: list[str]
    slot_duration: int
    reason: Optional[Unavailable] = None
    message: Optional[str] = None

    @classmethod
    def unavailable(cls, reason: Unavailable, slot_duration: int, **fmt) -> "AvailabilityResult":
        return cls(
            available_slots=[],
            slot_duration=slot_duration,
            reason=reason,
            message=MESSAGES[reason].format(**fmt),
        )


def resolve_working_ranges(
    weekly: Mapping[str, DaySchedule],
    target: date,
    leave_dates: Iterable[date] = (),
) -> tuple[list[TimeRange], Optional[Unavailable]]:
    """Working ranges for the date, or an empty list and the reason there are none."""
    day = weekly.get(weekday_name(target))
    if day is None or not day.is_working or not day.ranges:
        return [], Unavailable.NOT_WORKING
    if target in set(leave_dates):
        return [], Unavailable.ON_LEAVE
    return list(day.ranges), None


def generate_candidates(ranges: Iterable[TimeRange], slot_duration: int, buffer_time: int = 0) -> list[int]:
    # Ranges are walked in the order given; overlapping ranges yield duplicates.
    step = slot_duration + buffer_time
    candidates = []
    for time_range in ranges:
        cursor = time_range.start
        while cursor + slot_duration <= time_range.end:
            candidates.append(cursor)
            cursor += step
    return candidates


def filter_conflicts(candidates: Iterable[int], booked_starts: Iterable[int], capacity: int) -> list[int]:
    counts = Counter(booked_starts)
    return [slot for slot in candidates if counts[slot] < capacity]


def check_booking_window(
    target: date,
    today: date,
    rules: ScheduleRules,
    public: bool = False,
) -> Optional[Unavailable]:
    if not rules.is_accepting_appointments:
        return Unavailable.NOT_ACCEPTING
    if public and not rules.accepts_online_booking:
        return Unavailable.ONLINE_DISABLED
    if target < today:
        return Unavailable.PAST_DATE
    if target > today + timedelta(days=rules.advance_booking_days):
        return Unavailable.BEYOND_WINDOW
    return None


def parse_booked_starts(start_times: Iterable[str]) -> list[int]:
    parsed = []
    for value in start_times:
        try:
            parsed.append(parse_clock(value))
        except ValueError:
            logger.warning("Ignoring booking with malformed start time %r", value)
    return parsed


def compute_availability(
    rules: ScheduleRules,
    target: date,
    today: date,
    booked_start_times: Iterable[str],
    public: bool = False,
    now_minutes: Optional[int] = None,
    lead_minutes: int = 0,
) -> AvailabilityResult:
    """
    Bookable start times for one doctor on one date.

    ``booked_start_times`` holds the start time of every booking on the date
    that still occupies capacity. When ``now_minutes`` is given and the target
    is today, slots starting within ``lead_minutes`` of now are dropped.
    """
    duration = rules.slot_duration

    rejection = check_booking_window(target, today, rules, public=public)
    if rejection is not None:
        return AvailabilityResult.unavailable(rejection, duration, days=rules.advance_booking_days)

    ranges, reason = resolve_working_ranges(rules.weekly, target, rules.leave_dates)
    if reason is not None:
        return AvailabilityResult.unavailable(reason, duration)

    candidates = generate_candidates(ranges, duration, rules.buffer_time)
    available = filter_conflicts(candidates, parse_booked_starts(booked_start_times), rules.max_patients_per_slot)

    if now_minutes is not None and target == today:
        available = [slot for slot in available if slot > now_minutes + lead_minutes]

    if not available:
        return AvailabilityResult.unavailable(Unavailable.FULLY_BOOKED, duration)

    return AvailabilityResult(available_slots=[format_clock(slot) for slot in available], slot_duration=duration)
