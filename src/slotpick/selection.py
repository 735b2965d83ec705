"""
Random slot selection for outreach offers.

Every mode runs the same two-pass sampler over a shuffled pool of open slots:
pass 1 only accepts picks that are new along one axis (day or clinician),
pass 2 fills the remaining count from slots not yet selected, repeats allowed.
Modes differ only in the pool they filter, the axis and how a clinician is
picked from a slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from random import Random
from typing import Callable, List, Optional, Sequence, Set, TypeVar

from .config import SelectionOptions
from .filtering import SlotCriteria, filter_slots
from .models import AvailableSlot, AvailabilitySlot, BookedSlot, SelectedSlotInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

AxisFn = Callable[[AvailabilitySlot, str], str]
PickFn = Callable[[List[str], Random], str]


class SelectionConfigError(ValueError):
    """Selection mode invoked without the parameter it requires."""


@dataclass
class SelectionResult:
    selected: List[SelectedSlotInfo] = field(default_factory=list)
    error: Optional[SelectionConfigError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def shuffle(items: Sequence[T], rng: Random) -> List[T]:
    """Fisher-Yates over a copy; the input is left untouched."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _random_pick(clinicians: List[str], rng: Random) -> str:
    return clinicians[rng.randrange(len(clinicians))]


def _first_pick(clinicians: List[str], rng: Random) -> str:
    return clinicians[0]


def _by_day(slot: AvailabilitySlot, clinician: str) -> str:
    return slot.day


def _by_clinician(slot: AvailabilitySlot, clinician: str) -> str:
    return clinician


def _info(slot: AvailabilitySlot, clinician: str) -> SelectedSlotInfo:
    return SelectedSlotInfo(slot_id=slot.id, day=slot.day, time=slot.time, clinicians=[clinician])


def two_pass_sample(
    pool: Sequence[AvailableSlot],
    count: int,
    axis: AxisFn,
    diverse_pick: PickFn,
    fill_pick: PickFn,
    rng: Random,
) -> List[SelectedSlotInfo]:
    if count <= 0 or not pool:
        return []

    shuffled = shuffle(pool, rng)
    selected: List[SelectedSlotInfo] = []
    used_keys: Set[str] = set()

    for cand in shuffled:
        if len(selected) >= count:
            break
        fresh = [c for c in cand.available_clinicians if axis(cand.slot, c) not in used_keys]
        if not fresh:
            continue
        clinician = diverse_pick(fresh, rng)
        selected.append(_info(cand.slot, clinician))
        used_keys.add(axis(cand.slot, clinician))

    if len(selected) < count:
        # Excludes by slot id: a slot taken in pass 1 is not re-offered with another clinician.
        selected_ids = {s.slot_id for s in selected}
        for cand in shuffled:
            if len(selected) >= count:
                break
            if cand.slot.id in selected_ids:
                continue
            selected.append(_info(cand.slot, fill_pick(cand.available_clinicians, rng)))
            selected_ids.add(cand.slot.id)

    return selected


def _criteria(options: Optional[SelectionOptions], **overrides) -> SlotCriteria:
    options = options or SelectionOptions()
    criteria = SlotCriteria(
        time_range=options.time_range,
        client_insurance=options.client_insurance,
        only_insurance_match=options.only_insurance_match,
        exclude_offered=options.exclude_offered,
        previously_offered=set(options.previously_offered),
    )
    return replace(criteria, **overrides)


def select_random_slots_full(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    options: SelectionOptions,
    rng: Optional[Random] = None,
) -> List[SelectedSlotInfo]:
    pool = filter_slots(slots, bookings, _criteria(options))
    return two_pass_sample(pool, options.count, _by_day, _random_pick, _random_pick, rng or Random())


def select_random_times_for_clinician(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    clinician: str,
    count: int,
    options: Optional[SelectionOptions] = None,
    rng: Optional[Random] = None,
) -> List[SelectedSlotInfo]:
    pool = filter_slots(slots, bookings, _criteria(options, clinicians=[clinician]))
    fixed: PickFn = lambda _clinicians, _rng: clinician
    return two_pass_sample(pool, count, _by_day, fixed, fixed, rng or Random())


def select_random_slots_for_days(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    days: Sequence[str],
    count: int,
    options: Optional[SelectionOptions] = None,
    rng: Optional[Random] = None,
) -> List[SelectedSlotInfo]:
    pool = filter_slots(slots, bookings, _criteria(options, days=list(days)))
    return two_pass_sample(pool, count, _by_clinician, _first_pick, _random_pick, rng or Random())


def select_random_slots(
    slots: Sequence[AvailabilitySlot],
    bookings: Sequence[BookedSlot],
    options: SelectionOptions,
    rng: Optional[Random] = None,
) -> SelectionResult:
    """
    Dispatch on ``options.mode``.

    A mode missing its required parameter yields an empty selection with the
    error attached instead of raising, so callers can prompt or fall back.
    """
    if options.mode == "full":
        return SelectionResult(select_random_slots_full(slots, bookings, options, rng))

    if options.mode == "by-clinician":
        if not options.clinician:
            return _config_error("by-clinician mode requires a clinician")
        return SelectionResult(
            select_random_times_for_clinician(
                slots, bookings, options.clinician, options.count, options, rng
            )
        )

    if options.mode == "by-day":
        if not options.days:
            return _config_error("by-day mode requires at least one day")
        return SelectionResult(
            select_random_slots_for_days(slots, bookings, options.days, options.count, options, rng)
        )

    return _config_error(f"unknown selection mode {options.mode!r}")


def _config_error(message: str) -> SelectionResult:
    logger.warning("Random selection skipped: %s", message)
    return SelectionResult(error=SelectionConfigError(message))


def add_to_selection(
    selected: Sequence[SelectedSlotInfo], slot: AvailabilitySlot, clinician: str
) -> List[SelectedSlotInfo]:
    """Add a manual pick; a second clinician on an already selected slot joins that entry."""
    result = list(selected)
    for i, info in enumerate(result):
        if info.slot_id != slot.id:
            continue
        if clinician not in info.clinicians:
            result[i] = SelectedSlotInfo(
                slot_id=info.slot_id,
                day=info.day,
                time=info.time,
                clinicians=info.clinicians + [clinician],
                start_date=info.start_date,
                weeks_added=info.weeks_added,
            )
        return result
    result.append(_info(slot, clinician))
    return result


def remove_from_selection(selected: Sequence[SelectedSlotInfo], slot_id: str) -> List[SelectedSlotInfo]:
    return [info for info in selected if info.slot_id != slot_id]


def offered_ids(selected: Sequence[SelectedSlotInfo]) -> Set[str]:
    return {info.slot_id for info in selected}
