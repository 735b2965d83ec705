"""
Per-clinician utilization rollup and ranking.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .booking import build_booking_index, is_clinician_booked
from .insurance import parse_insurances
from .models import AvailabilitySlot, BookedSlot, ClinicianStats


def compute_clinician_stats(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    requested_clinician: Optional[str] = None,
    client_insurance: Optional[str] = None,
) -> List[ClinicianStats]:
    index = build_booking_index(bookings)
    requested = requested_clinician.lower() if requested_clinician else None
    by_name: Dict[str, ClinicianStats] = {}

    for slot in slots:
        slot_insurances = parse_insurances(slot.insurance)
        for clinician in slot.clinicians:
            stats = by_name.get(clinician)
            if stats is None:
                # identity is case-sensitive; only the requested check folds case
                stats = ClinicianStats(
                    name=clinician,
                    is_requested_clinician=requested is not None and requested == clinician.lower(),
                )
                by_name[clinician] = stats
            stats.record(slot, is_clinician_booked(index, slot.id, clinician), slot_insurances)

    # Needs the complete insurance set per clinician, so runs after the slot pass.
    if client_insurance:
        wanted = client_insurance.lower()
        for stats in by_name.values():
            stats.matches_client_insurance = any(wanted in ins.lower() for ins in stats.insurances)

    return list(by_name.values())


def _name_key(stats: ClinicianStats) -> Tuple[str, str]:
    return (stats.name.casefold(), stats.name)


_SORT_KEYS: Dict[str, Callable[[ClinicianStats], tuple]] = {
    "availability": lambda s: (not s.is_requested_clinician, -s.available_slots, _name_key(s)),
    "alpha": lambda s: (not s.is_requested_clinician, _name_key(s)),
    "insurance": lambda s: (
        not s.is_requested_clinician,
        not s.matches_client_insurance,
        -s.available_slots,
        _name_key(s),
    ),
}


def sort_clinician_stats(stats: Sequence[ClinicianStats], sort_by: str = "availability") -> List[ClinicianStats]:
    try:
        key = _SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unknown sort strategy {sort_by!r}; expected one of {sorted(_SORT_KEYS)}") from None
    return sorted(stats, key=key)
