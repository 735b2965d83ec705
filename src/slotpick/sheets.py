"""
Spreadsheet ingestion: availability rows to AvailabilitySlot values.

The fetch itself happens elsewhere; these helpers take the raw cell rows
(header row first) or a CSV export of the same sheet.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pandas as pd

from .config import CLINICIAN_HEADERS, DAY_HEADERS, DAY_ORDER, INSURANCE_HEADERS, TIME_HEADERS
from .models import AvailabilitySlot, BookedSlot

logger = logging.getLogger(__name__)

Rows = Sequence[Sequence[Optional[str]]]

BOOKING_COLUMNS: List[str] = ["slot_id", "clinician"]


class SheetFormatError(ValueError):
    """Sheet or CSV export is empty or missing a required column."""


def make_slot_id(day: str, time: str) -> str:
    # Stable across re-reads of the same sheet.
    day_part = re.sub(r"\s+", "-", day.lower())
    time_part = re.sub(r"[:\s]+", "-", time.lower())
    return f"{day_part}-{time_part}"


def _cell(row: Sequence[Optional[str]], idx: int) -> str:
    if idx < 0 or idx >= len(row) or row[idx] is None:
        return ""
    return str(row[idx]).strip()


def _find_column(headers: List[str], aliases: List[str]) -> int:
    return next((i for i, h in enumerate(headers) if h in aliases), -1)


def clinician_insurance_map(rows: Rows) -> Dict[str, List[str]]:
    """Insurance sheet: headers are insurers, cells below list the clinicians they cover."""
    mapping: Dict[str, List[str]] = {}
    if len(rows) < 2:
        return mapping

    insurers = [(h or "").strip() for h in rows[0]]
    for col, insurer in enumerate(insurers):
        if not insurer:
            continue
        for row in rows[1:]:
            clinician = _cell(row, col)
            if not clinician:
                continue
            covered = mapping.setdefault(clinician.lower(), [])
            if insurer not in covered:
                covered.append(insurer)
    return mapping


def slots_from_rows(rows: Rows, insurance_map: Optional[Dict[str, List[str]]] = None) -> List[AvailabilitySlot]:
    if len(rows) < 2:
        return []

    headers = [(h or "").strip().lower() for h in rows[0]]
    day_idx = _find_column(headers, DAY_HEADERS)
    time_idx = _find_column(headers, TIME_HEADERS)
    clinicians_idx = _find_column(headers, CLINICIAN_HEADERS)
    insurance_idx = _find_column(headers, INSURANCE_HEADERS)
    if min(day_idx, time_idx, clinicians_idx) < 0:
        raise SheetFormatError(f"Missing required columns. Expected: Day, Time, Clinicians; found {headers}")

    insurance_map = insurance_map or {}
    slots: List[AvailabilitySlot] = []
    skipped = 0
    for row in rows[1:]:
        day = _cell(row, day_idx)
        time = _cell(row, time_idx)
        raw_clinicians = _cell(row, clinicians_idx)
        if not (day and time and raw_clinicians):
            skipped += 1
            continue

        clinicians = [c.strip() for c in raw_clinicians.split(",") if c.strip()]
        insurance = _cell(row, insurance_idx)
        if not insurance and insurance_map:
            merged: List[str] = []
            for clinician in clinicians:
                for ins in insurance_map.get(clinician.lower(), []):
                    if ins not in merged:
                        merged.append(ins)
            insurance = ", ".join(merged)

        slots.append(
            AvailabilitySlot(
                id=make_slot_id(day, time),
                day=day,
                time=time,
                clinicians=tuple(clinicians),
                insurance=insurance,
            )
        )

    if skipped:
        logger.debug("Skipped %d incomplete availability rows", skipped)
    return sort_slots(slots)


def sort_slots(slots: Sequence[AvailabilitySlot]) -> List[AvailabilitySlot]:
    # Time compares as a plain string; sheet labels share one format.
    return sorted(slots, key=lambda s: (DAY_ORDER.get(s.day.lower(), 7), s.time))


def parse_offered_ids(text: Optional[str]) -> Set[str]:
    """Slot ids from a JSON list of offered-slot records (``slotId`` key)."""
    if not text:
        return set()
    try:
        offered = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed offered-availability JSON")
        return set()
    if not isinstance(offered, list):
        return set()
    return {str(o["slotId"]) for o in offered if isinstance(o, dict) and o.get("slotId")}


def _frame_to_rows(df: pd.DataFrame) -> List[List[Optional[str]]]:
    df = df.astype(object).where(pd.notna(df), None)
    return [list(df.columns)] + df.values.tolist()


def _read_csv(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(path, dtype=str)
    except pd.errors.EmptyDataError:
        raise SheetFormatError(f"{path} is empty") from None


def load_slots_csv(path: Path, insurance_path: Optional[Path] = None) -> List[AvailabilitySlot]:
    if not path.exists():
        raise FileNotFoundError(f"Missing availability CSV at {path}")
    insurance_map: Dict[str, List[str]] = {}
    if insurance_path is not None:
        insurance_map = clinician_insurance_map(_frame_to_rows(_read_csv(insurance_path)))
    return slots_from_rows(_frame_to_rows(_read_csv(path)), insurance_map)


def _booking_from_row(row: pd.Series) -> BookedSlot:
    return BookedSlot(slot_id=str(row["slot_id"]).strip(), clinician=str(row["clinician"]).strip())


def load_bookings_csv(path: Path) -> List[BookedSlot]:
    if not path.exists():
        raise FileNotFoundError(f"Missing bookings CSV at {path}")
    b_df = _read_csv(path)
    missing = [col for col in BOOKING_COLUMNS if col not in b_df.columns]
    if missing:
        raise SheetFormatError(
            f"Missing required columns. Expected: {', '.join(BOOKING_COLUMNS)}; found {list(b_df.columns)}"
        )
    b_df = b_df.dropna(subset=BOOKING_COLUMNS)
    return [_booking_from_row(r) for _, r in b_df.iterrows()]
