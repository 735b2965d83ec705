"""Pytest configuration and fixtures."""

from random import Random

import pytest

from slotpick.models import AvailabilitySlot, BookedSlot


@pytest.fixture
def two_slot_pool():
    """Monday slot shared by A and B with A booked; Tuesday slot for A only."""
    slots = [
        AvailabilitySlot(id="mon-9", day="Monday", time="9:00 AM", clinicians=["A", "B"], insurance="Aetna"),
        AvailabilitySlot(id="tue-10", day="Tuesday", time="10:00 AM", clinicians=["A"], insurance=""),
    ]
    bookings = [BookedSlot(slot_id="mon-9", clinician="A")]
    return slots, bookings


@pytest.fixture
def week_pool():
    """A week of slots across four clinicians with a couple of bookings."""
    slots = [
        AvailabilitySlot(
            id="monday-9-00-am",
            day="Monday",
            time="9:00 AM",
            clinicians=["Dr. Smith", "Jane Doe"],
            insurance="Blue Cross Blue Shield, Aetna",
        ),
        AvailabilitySlot(
            id="monday-2-00-pm", day="Monday", time="2:00 PM", clinicians=["Jane Doe"], insurance="Aetna"
        ),
        AvailabilitySlot(
            id="tuesday-10-00-am", day="Tuesday", time="10:00 AM", clinicians=["Sam Lee"], insurance="Cigna"
        ),
        AvailabilitySlot(
            id="wednesday-6-00-pm",
            day="Wednesday",
            time="6:00 PM",
            clinicians=["Dr. Smith", "Ana Ruiz"],
            insurance="Blue Cross Blue Shield PPO",
        ),
        AvailabilitySlot(
            id="thursday-11-00-am", day="Thursday", time="11:00 AM", clinicians=["Ana Ruiz"], insurance=""
        ),
        AvailabilitySlot(
            id="friday-3-30-pm",
            day="Friday",
            time="3:30 PM",
            clinicians=["Sam Lee", "Jane Doe"],
            insurance="Cigna, Aetna",
        ),
    ]
    bookings = [
        BookedSlot(slot_id="monday-2-00-pm", clinician="Jane Doe"),
        BookedSlot(slot_id="wednesday-6-00-pm", clinician="Dr. Smith"),
    ]
    return slots, bookings


@pytest.fixture
def rng():
    return Random(1234)
