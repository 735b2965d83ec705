import json

import pytest

from slotpick.models import AvailabilitySlot
from slotpick.sheets import (
    SheetFormatError,
    clinician_insurance_map,
    load_bookings_csv,
    load_slots_csv,
    make_slot_id,
    parse_offered_ids,
    slots_from_rows,
    sort_slots,
)


def test_make_slot_id_is_deterministic():
    assert make_slot_id("Monday", "9:00 AM") == "monday-9-00-am"
    assert make_slot_id("Monday", "9:00 AM") == make_slot_id("Monday", "9:00 AM")
    assert make_slot_id("Late  Tuesday", "10:30  PM") == "late-tuesday-10-30-pm"


def test_clinician_insurance_map():
    rows = [
        ["Aetna", "Cigna", ""],
        ["Jane Doe", "Sam Lee", "Ignored"],
        ["Sam Lee", "jane doe", None],
        [None, "Jane Doe"],
    ]
    assert clinician_insurance_map(rows) == {
        "jane doe": ["Aetna", "Cigna"],
        "sam lee": ["Aetna", "Cigna"],
    }
    assert clinician_insurance_map([["Aetna"]]) == {}


def test_slots_from_rows():
    rows = [
        ["Day", "Time", "Clinicians", "Insurance"],
        ["Tuesday", "10:00 AM", "Sam Lee", "Cigna"],
        ["Monday", "9:00 AM", "Jane Doe, Sam Lee", ""],
        ["", "11:00 AM", "Jane Doe", ""],
        ["Monday", "1:00 PM", "", ""],
    ]
    insurance_map = {"jane doe": ["Aetna"], "sam lee": ["Cigna", "Aetna"]}
    slots = slots_from_rows(rows, insurance_map)
    assert slots == [
        AvailabilitySlot(
            id="monday-9-00-am",
            day="Monday",
            time="9:00 AM",
            clinicians=["Jane Doe", "Sam Lee"],
            insurance="Aetna, Cigna",
        ),
        AvailabilitySlot(id="tuesday-10-00-am", day="Tuesday", time="10:00 AM", clinicians=["Sam Lee"], insurance="Cigna"),
    ]


def test_slots_from_rows_header_aliases_and_short_rows():
    rows = [["Days", "Times", "Providers"], ["Friday", "3:30 PM", "Ana Ruiz"], ["Friday"]]
    slots = slots_from_rows(rows)
    assert [(s.id, s.clinicians, s.insurance) for s in slots] == [("friday-3-30-pm", ("Ana Ruiz",), "")]


def test_slots_from_rows_requires_columns():
    with pytest.raises(SheetFormatError):
        slots_from_rows([["Day", "Clinicians"], ["Monday", "Jane Doe"]])
    assert slots_from_rows([["Day", "Time", "Clinicians"]]) == []


def test_sort_slots_week_starts_sunday():
    slots = [
        AvailabilitySlot(id="c", day="Monday", time="9:00 AM", clinicians=["A"]),
        AvailabilitySlot(id="d", day="Someday", time="9:00 AM", clinicians=["A"]),
        AvailabilitySlot(id="b", day="Sunday", time="9:00 AM", clinicians=["A"]),
        AvailabilitySlot(id="a", day="Monday", time="10:00 AM", clinicians=["A"]),
    ]
    assert [s.id for s in sort_slots(slots)] == ["b", "a", "c", "d"]


def test_parse_offered_ids():
    text = json.dumps([{"slotId": "monday-9-00-am", "day": "Monday"}, {"slotId": "friday-3-30-pm"}, {}])
    assert parse_offered_ids(text) == {"monday-9-00-am", "friday-3-30-pm"}
    assert parse_offered_ids("") == set()
    assert parse_offered_ids(None) == set()
    assert parse_offered_ids("{not json") == set()
    assert parse_offered_ids('{"slotId": "x"}') == set()


def test_load_csv(tmp_path):
    slots_csv = tmp_path / "availability.csv"
    slots_csv.write_text('Day,Time,Clinicians\nMonday,9:00 AM,"Jane Doe, Sam Lee"\nTuesday,10:00 AM,Sam Lee\n')
    insurance_csv = tmp_path / "insurance.csv"
    insurance_csv.write_text("Aetna,Cigna\nJane Doe,Sam Lee\n")
    bookings_csv = tmp_path / "booked.csv"
    bookings_csv.write_text("slot_id,clinician\nmonday-9-00-am,Jane Doe\n,\n")

    slots = load_slots_csv(slots_csv, insurance_csv)
    assert [s.id for s in slots] == ["monday-9-00-am", "tuesday-10-00-am"]
    assert slots[0].insurance == "Aetna, Cigna"
    assert slots[1].insurance == "Cigna"

    bookings = load_bookings_csv(bookings_csv)
    assert [(b.slot_id, b.clinician) for b in bookings] == [("monday-9-00-am", "Jane Doe")]

    with pytest.raises(FileNotFoundError):
        load_slots_csv(tmp_path / "missing.csv")


def test_slots_are_hashable_and_clinicians_immutable():
    slot = AvailabilitySlot(id="monday-9-00-am", day="Monday", time="9:00 AM", clinicians=["Jane Doe", "Sam Lee"])
    assert slot.clinicians == ("Jane Doe", "Sam Lee")
    assert slot in {slot}
    rows = [["Day", "Time", "Clinicians"], ["Monday", "9:00 AM", "Jane Doe, Sam Lee"]]
    assert slots_from_rows(rows)[0].clinicians == ("Jane Doe", "Sam Lee")


def test_load_bookings_requires_columns(tmp_path):
    wrong = tmp_path / "booked.csv"
    wrong.write_text("slotId,name\nmonday-9-00-am,Jane Doe\n")
    with pytest.raises(SheetFormatError, match="slot_id, clinician"):
        load_bookings_csv(wrong)


def test_empty_csv_is_a_format_error(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_text("")
    with pytest.raises(SheetFormatError):
        load_bookings_csv(empty)
    with pytest.raises(SheetFormatError):
        load_slots_csv(empty)
