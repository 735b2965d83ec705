"""
Distribution analytics over slots that still have an open seat.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .booking import available_clinicians, build_booking_index
from .config import DAYS_OF_WEEK
from .insurance import matches_client_insurance
from .models import AvailabilitySlot, BookedSlot, SlotDistribution
from .timeparse import time_bucket


def _open_slots(
    slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot]
) -> Iterator[Tuple[AvailabilitySlot, List[str]]]:
    index = build_booking_index(bookings)
    for slot in slots:
        open_clinicians = available_clinicians(slot, index)
        if open_clinicians:
            yield slot, open_clinicians


def compute_slot_distribution(
    slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot]
) -> SlotDistribution:
    dist = SlotDistribution()
    for slot, open_clinicians in _open_slots(slots, bookings):
        # day and time count the slot once; clinicians count per open seat
        dist.by_day[slot.day] = dist.by_day.get(slot.day, 0) + 1
        bucket = time_bucket(slot.time)
        dist.by_time[bucket] = dist.by_time.get(bucket, 0) + 1
        for clinician in open_clinicians:
            dist.by_clinician[clinician] = dist.by_clinician.get(clinician, 0) + 1
    return dist


def total_available_count(slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot]) -> int:
    return sum(1 for _ in _open_slots(slots, bookings))


def insurance_match_count(
    slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot], client_insurance: Optional[str]
) -> int:
    if not client_insurance:
        return 0
    return sum(
        1
        for slot, _ in _open_slots(slots, bookings)
        if matches_client_insurance(slot.insurance, client_insurance)
    )


def day_counts(slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot]) -> Dict[str, int]:
    """Open-slot count per weekday; every weekday is present even when zero."""
    counts: Dict[str, int] = {day: 0 for day in DAYS_OF_WEEK}
    for slot, _ in _open_slots(slots, bookings):
        counts[slot.day] = counts.get(slot.day, 0) + 1
    return counts


def available_days(slots: Sequence[AvailabilitySlot], bookings: Sequence[BookedSlot]) -> List[str]:
    counts = day_counts(slots, bookings)
    return [day for day in DAYS_OF_WEEK if counts[day] > 0]
