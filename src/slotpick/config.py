"""
Centralized selection defaults and vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple


DAYS_OF_WEEK: List[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
# Sheet ordering starts the week on Sunday.
DAY_ORDER: Dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

# name -> (label, start hour inclusive, end hour exclusive)
TIME_RANGES: Dict[str, Tuple[str, int, int]] = {
    "morning": ("Morning (9-12)", 9, 12),
    "afternoon": ("Afternoon (12-5)", 12, 17),
    "evening": ("Evening (5+)", 17, 24),
}
DEFAULT_HOUR: int = 12  # fallback for unparseable time labels

SORT_STRATEGIES: List[str] = ["availability", "alpha", "insurance"]
SELECTION_MODES: List[str] = ["full", "by-clinician", "by-day"]
DEFAULT_SELECTION_COUNT: int = 3

DAY_HEADERS: List[str] = ["day", "days"]
TIME_HEADERS: List[str] = ["time", "times"]
CLINICIAN_HEADERS: List[str] = ["clinicians", "clinician", "provider", "providers"]
INSURANCE_HEADERS: List[str] = ["insurance", "insurances", "insurance type"]


@dataclass
class SelectionOptions:
    mode: str = "full"
    count: int = DEFAULT_SELECTION_COUNT
    clinician: Optional[str] = None  # required for by-clinician
    days: List[str] = field(default_factory=list)  # required for by-day
    client_insurance: Optional[str] = None
    only_insurance_match: bool = False
    exclude_offered: bool = False
    previously_offered: Set[str] = field(default_factory=set)
    time_range: Optional[str] = None
