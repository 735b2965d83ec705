"""
Typed containers used throughout the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class AvailabilitySlot:
    id: str  # derived from day + time, see sheets.make_slot_id
    day: str
    time: str  # display label, e.g. "9:00 AM"
    clinicians: Tuple[str, ...]
    insurance: str = ""  # comma-joined tags

    def __post_init__(self) -> None:
        object.__setattr__(self, "clinicians", tuple(self.clinicians))


@dataclass(frozen=True)
class BookedSlot:
    slot_id: str
    clinician: str


@dataclass
class ClinicianStats:
    name: str
    total_slots: int = 0
    available_slots: int = 0
    booked_slots: int = 0
    insurances: List[str] = field(default_factory=list)
    days: List[str] = field(default_factory=list)
    is_requested_clinician: bool = False
    matches_client_insurance: bool = False

    def record(self, slot: AvailabilitySlot, booked: bool, insurances: List[str]) -> None:
        self.total_slots += 1
        if booked:
            self.booked_slots += 1
        else:
            self.available_slots += 1
        if slot.day not in self.days:
            self.days.append(slot.day)
        for ins in insurances:
            if ins not in self.insurances:
                self.insurances.append(ins)


@dataclass
class SlotDistribution:
    by_day: Dict[str, int] = field(default_factory=dict)
    by_time: Dict[str, int] = field(default_factory=dict)
    by_clinician: Dict[str, int] = field(default_factory=dict)


@dataclass
class AvailableSlot:
    slot: AvailabilitySlot
    available_clinicians: List[str]


@dataclass
class SelectedSlotInfo:
    slot_id: str
    day: str
    time: str
    clinicians: List[str]
    start_date: Optional[str] = None  # ISO date of earliest start, caller supplied
    weeks_added: Optional[int] = None
