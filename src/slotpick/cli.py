from __future__ import annotations

import logging
from pathlib import Path
from random import Random
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import DEFAULT_SELECTION_COUNT, SELECTION_MODES, SORT_STRATEGIES, TIME_RANGES, SelectionOptions
from .distribution import compute_slot_distribution, day_counts, insurance_match_count, total_available_count
from .filtering import SlotCriteria, filter_slots
from .models import AvailabilitySlot, BookedSlot
from .selection import select_random_slots
from .sheets import SheetFormatError, load_bookings_csv, load_slots_csv
from .stats import compute_clinician_stats, sort_clinician_stats
from .visualize import plot_distribution

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)

SlotsOpt = typer.Option(..., "--slots", help="Availability sheet exported as CSV (Day, Time, Clinicians[, Insurance]).")
BookingsOpt = typer.Option(None, "--bookings", help="Booked slots CSV with slot_id and clinician columns.")
InsuranceSheetOpt = typer.Option(None, help="Insurance sheet CSV: insurer headers, clinician names below.")


@app.callback()
def _setup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(
    slots_path: Path, bookings_path: Optional[Path], insurance_path: Optional[Path]
) -> Tuple[List[AvailabilitySlot], List[BookedSlot]]:
    try:
        slots = load_slots_csv(slots_path, insurance_path)
        bookings = load_bookings_csv(bookings_path) if bookings_path else []
    except (FileNotFoundError, SheetFormatError) as e:
        console.print(str(e), style="red")
        raise typer.Exit(code=1)
    console.log(f"Loaded {len(slots)} slots and {len(bookings)} bookings")
    return slots, bookings


def _check_choice(value: Optional[str], choices: List[str], name: str) -> None:
    if value is not None and value not in choices:
        raise typer.BadParameter(f"{value!r} is not one of {', '.join(choices)}", param_hint=name)


@app.command("stats")
def stats(
    slots_path: Path = SlotsOpt,
    bookings_path: Optional[Path] = BookingsOpt,
    insurance_sheet: Optional[Path] = InsuranceSheetOpt,
    requested: Optional[str] = typer.Option(None, help="Client's requested clinician."),
    insurance: Optional[str] = typer.Option(None, help="Client's insurance provider."),
    sort_by: str = typer.Option("availability", help="availability | alpha | insurance"),
) -> None:
    _check_choice(sort_by, SORT_STRATEGIES, "--sort-by")
    slots, bookings = _load(slots_path, bookings_path, insurance_sheet)
    rows = sort_clinician_stats(compute_clinician_stats(slots, bookings, requested, insurance), sort_by)

    table = Table(title="Clinician availability", show_header=True, header_style="bold magenta")
    for col in ["Clinician", "Available", "Booked", "Total", "Days", "Insurance match"]:
        table.add_column(col)
    for s in rows:
        name = f"[bold]{s.name}[/bold] (requested)" if s.is_requested_clinician else s.name
        table.add_row(
            name,
            str(s.available_slots),
            str(s.booked_slots),
            str(s.total_slots),
            ", ".join(s.days),
            "yes" if s.matches_client_insurance else "",
        )
    console.print(table)


@app.command("distribution")
def distribution(
    slots_path: Path = SlotsOpt,
    bookings_path: Optional[Path] = BookingsOpt,
    insurance_sheet: Optional[Path] = InsuranceSheetOpt,
    insurance: Optional[str] = typer.Option(None, help="Client's insurance provider."),
    png_out: Optional[Path] = typer.Option(None, help="Save histogram plot to this path."),
) -> None:
    slots, bookings = _load(slots_path, bookings_path, insurance_sheet)
    dist = compute_slot_distribution(slots, bookings)

    table = Table(title="Open slots", show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("total_available", str(total_available_count(slots, bookings)))
    if insurance:
        table.add_row("insurance_matched", str(insurance_match_count(slots, bookings, insurance)))
    for day, n in day_counts(slots, bookings).items():
        table.add_row(f"day:{day}", str(n))
    for bucket, n in dist.by_time.items():
        table.add_row(f"time:{bucket}", str(n))
    for name, n in sorted(dist.by_clinician.items(), key=lambda kv: (-kv[1], kv[0])):
        table.add_row(f"clinician:{name}", str(n))
    console.print(table)

    if png_out:
        plot_distribution(dist, outfile=png_out)
        console.log(f"Saved plot to {png_out}")


@app.command("filter")
def filter_cmd(
    slots_path: Path = SlotsOpt,
    bookings_path: Optional[Path] = BookingsOpt,
    insurance_sheet: Optional[Path] = InsuranceSheetOpt,
    clinician: List[str] = typer.Option([], help="Restrict to these clinicians (repeatable)."),
    day: List[str] = typer.Option([], help="Restrict to these days (repeatable)."),
    time_range: Optional[str] = typer.Option(None, help="morning | afternoon | evening"),
    time: Optional[str] = typer.Option(None, help="Exact time label, e.g. '9:00 AM'."),
    insurance: Optional[str] = typer.Option(None, help="Client's insurance provider."),
    only_matching: bool = typer.Option(False, help="Keep only insurance-matched slots."),
    exclude: List[str] = typer.Option([], help="Previously offered slot ids to skip (repeatable)."),
) -> None:
    _check_choice(time_range, list(TIME_RANGES), "--time-range")
    slots, bookings = _load(slots_path, bookings_path, insurance_sheet)
    criteria = SlotCriteria(
        clinicians=clinician,
        days=day,
        time_range=time_range,
        specific_time=time,
        client_insurance=insurance,
        only_insurance_match=only_matching,
        exclude_offered=bool(exclude),
        previously_offered=set(exclude),
    )
    matches = filter_slots(slots, bookings, criteria)

    table = Table(title=f"{len(matches)} matching slots", show_header=True, header_style="bold magenta")
    for col in ["Slot", "Day", "Time", "Open clinicians", "Insurance"]:
        table.add_column(col)
    for m in matches:
        table.add_row(m.slot.id, m.slot.day, m.slot.time, ", ".join(m.available_clinicians), m.slot.insurance)
    console.print(table)


@app.command("select")
def select(
    slots_path: Path = SlotsOpt,
    bookings_path: Optional[Path] = BookingsOpt,
    insurance_sheet: Optional[Path] = InsuranceSheetOpt,
    mode: str = typer.Option("full", help="full | by-clinician | by-day"),
    count: int = typer.Option(DEFAULT_SELECTION_COUNT, min=0, help="Number of slots to offer."),
    clinician: Optional[str] = typer.Option(None, help="Clinician for by-clinician mode."),
    day: List[str] = typer.Option([], help="Days for by-day mode (repeatable)."),
    time_range: Optional[str] = typer.Option(None, help="morning | afternoon | evening"),
    insurance: Optional[str] = typer.Option(None, help="Client's insurance provider."),
    only_matching: bool = typer.Option(False, help="Keep only insurance-matched slots."),
    exclude: List[str] = typer.Option([], help="Previously offered slot ids to skip (repeatable)."),
    seed: Optional[int] = typer.Option(None, help="Random seed."),
) -> None:
    _check_choice(mode, SELECTION_MODES, "--mode")
    _check_choice(time_range, list(TIME_RANGES), "--time-range")
    slots, bookings = _load(slots_path, bookings_path, insurance_sheet)
    options = SelectionOptions(
        mode=mode,
        count=count,
        clinician=clinician,
        days=day,
        client_insurance=insurance,
        only_insurance_match=only_matching,
        exclude_offered=bool(exclude),
        previously_offered=set(exclude),
        time_range=time_range,
    )
    result = select_random_slots(slots, bookings, options, rng=Random(seed))
    if result.error:
        console.print(str(result.error), style="red")
        raise typer.Exit(code=1)

    table = Table(title="Offer candidates", show_header=True, header_style="bold magenta")
    for col in ["Slot", "Day", "Time", "Clinician"]:
        table.add_column(col)
    for info in result.selected:
        table.add_row(info.slot_id, info.day, info.time, ", ".join(info.clinicians))
    console.print(table)
