"""
Booking index: which clinician-instances of which slots are already taken.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Tuple

from .models import AvailabilitySlot, BookedSlot

BookingIndex = FrozenSet[Tuple[str, str]]


def build_booking_index(bookings: Iterable[BookedSlot]) -> BookingIndex:
    return frozenset((b.slot_id, b.clinician) for b in bookings)


def is_clinician_booked(index: BookingIndex, slot_id: str, clinician: str) -> bool:
    return (slot_id, clinician) in index


def available_clinicians(slot: AvailabilitySlot, index: BookingIndex) -> List[str]:
    return [c for c in slot.clinicians if (slot.id, c) not in index]
