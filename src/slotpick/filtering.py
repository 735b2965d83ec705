"""
Multi-criteria slot filter. All criteria are optional and combine with AND.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .booking import available_clinicians, build_booking_index
from .insurance import matches_client_insurance
from .models import AvailableSlot, AvailabilitySlot, BookedSlot
from .timeparse import is_in_time_range


@dataclass
class SlotCriteria:
    clinicians: List[str] = field(default_factory=list)  # case-insensitive allowlist
    days: List[str] = field(default_factory=list)
    time_range: Optional[str] = None
    specific_time: Optional[str] = None  # exact label, wins over time_range
    client_insurance: Optional[str] = None
    only_insurance_match: bool = False
    exclude_offered: bool = False
    previously_offered: Set[str] = field(default_factory=set)

    def admits(self, slot: AvailabilitySlot) -> bool:
        """Slot-level checks, before looking at bookings."""
        if self.days and slot.day not in self.days:
            return False
        if self.specific_time:
            if slot.time != self.specific_time:
                return False
        elif self.time_range and not is_in_time_range(slot.time, self.time_range):
            return False
        if (
            self.only_insurance_match
            and self.client_insurance
            and not matches_client_insurance(slot.insurance, self.client_insurance)
        ):
            return False
        if self.exclude_offered and slot.id in self.previously_offered:
            return False
        return True


def filter_slots(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    criteria: Optional[SlotCriteria] = None,
) -> List[AvailableSlot]:
    criteria = criteria or SlotCriteria()
    index = build_booking_index(bookings)
    allowed = {c.lower() for c in criteria.clinicians}
    result: List[AvailableSlot] = []

    for slot in slots:
        if not criteria.admits(slot):
            continue
        open_clinicians = available_clinicians(slot, index)
        if allowed:
            open_clinicians = [c for c in open_clinicians if c.lower() in allowed]
        if open_clinicians:
            result.append(AvailableSlot(slot=slot, available_clinicians=open_clinicians))
    return result
